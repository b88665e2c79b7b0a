"""Shared fixtures for rolloutcheck integration tests."""

from __future__ import annotations

import io
from datetime import timedelta

import pytest

from rolloutcheck.models.config import StatusCheckConfig
from rolloutcheck.models.status import ActionableError
from rolloutcheck.status.monitor import StatusObserver
from rolloutcheck.status.resource import Resource


class RecordingObserver(StatusObserver):
    def __init__(self) -> None:
        self.transitions: list[tuple[str, ActionableError, ActionableError]] = []

    def resource_status_changed(
        self,
        resource: Resource,
        previous: ActionableError,
        current: ActionableError,
    ) -> None:
        self.transitions.append((resource.name, previous, current))

    def codes_for(self, name: str) -> list[str]:
        return [current.code.value for n, _, current in self.transitions if n == name]


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def config() -> StatusCheckConfig:
    """Fast-polling config with a deadline no test should reach."""
    return StatusCheckConfig(
        deadline=timedelta(seconds=5),
        poll_interval=0.01,
        report_interval=0.01,
        fail_fast=True,
        mute_logs=False,
    )
