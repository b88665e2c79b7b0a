"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json
from collections.abc import Iterator

import pytest
import structlog

from rolloutcheck.observability.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


class TestSetupLogging:
    def test_json_lines(self) -> None:
        buf = io.StringIO()
        setup_logging("info", "json", stream=buf)

        get_logger("status.monitor").info("status_check_started", resources=2)

        event = json.loads(buf.getvalue())
        assert event["event"] == "status_check_started"
        assert event["component"] == "status.monitor"
        assert event["resources"] == 2
        assert event["level"] == "info"
        assert "ts" in event

    def test_console_lines(self) -> None:
        buf = io.StringIO()
        setup_logging("info", "console", stream=buf)

        get_logger("app").warning("pod observation disabled", error="no kubeconfig")

        line = buf.getvalue()
        assert "pod observation disabled" in line
        assert "error=no kubeconfig" in line
        assert "\x1b[" not in line

    def test_level_filters(self) -> None:
        buf = io.StringIO()
        setup_logging("warning", "json", stream=buf)

        log = get_logger("app")
        log.info("hidden")
        log.warning("shown")

        assert [json.loads(line)["event"] for line in buf.getvalue().splitlines()] == ["shown"]
