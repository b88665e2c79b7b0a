"""Concurrent status check over a set of tracked resources.

StatusObserver -- ABC notified after every outcome transition.
LoggingObserver -- Observer that records transitions in the structured log.
StatusMonitor  -- Polls each resource in its own task until it reaches a
                  terminal code, writes progress reports on an interval and
                  forces DEADLINE_EXCEEDED / USER_CANCELLED onto whatever is
                  still pending when the check is cut short.
"""

from __future__ import annotations

import asyncio
import sys
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TextIO

from rolloutcheck.executor.base import RolloutExecutor, SubResourceProbe
from rolloutcheck.models.config import StatusCheckConfig
from rolloutcheck.models.status import ActionableError, StatusCode
from rolloutcheck.observability.logging import get_logger
from rolloutcheck.observability.metrics import status_transitions_total
from rolloutcheck.status.classifier import format_duration
from rolloutcheck.status.report import LogSink
from rolloutcheck.status.resource import Resource

_logger = get_logger("status.monitor")

MSG_CONTEXT_CANCELLED = "context cancelled"


class StatusObserver(ABC):
    """Receives outcome transitions of tracked resources.

    Implementations must not raise; errors are logged and swallowed so an
    observer can never stall the status check.
    """

    @abstractmethod
    def resource_status_changed(
        self,
        resource: Resource,
        previous: ActionableError,
        current: ActionableError,
    ) -> None:
        """Called once per transition, after the resource has been updated."""


class LoggingObserver(StatusObserver):
    """Logs every transition at info level."""

    def resource_status_changed(
        self,
        resource: Resource,
        previous: ActionableError,
        current: ActionableError,
    ) -> None:
        _logger.info(
            "resource_status_changed",
            resource=str(resource),
            previous=previous.code.value,
            code=current.code.value,
            message=current.message.strip(),
        )


class _ResourceFailedError(Exception):
    """Raised inside a poll task to stop sibling polls on the first failure."""

    def __init__(self, resource: Resource) -> None:
        super().__init__(f"{resource} failed")
        self.resource = resource


class StatusMonitor:
    """Drives the status check for a batch of resources.

    Each resource is polled by exactly one task, so resources never see
    concurrent updates. Overrides issued on cancellation happen after the
    poll tasks have been cancelled and awaited.
    """

    def __init__(
        self,
        executor: RolloutExecutor,
        config: StatusCheckConfig,
        kube_context: str = "",
        observers: Sequence[StatusObserver] = (),
        probe: SubResourceProbe | None = None,
        out: TextIO | None = None,
        sink: LogSink | None = None,
    ) -> None:
        self._executor = executor
        self._config = config
        self._kube_context = kube_context
        self._observers = list(observers)
        self._probe = probe
        self._out = out
        self._sink = sink

    async def check(self, resources: Sequence[Resource]) -> StatusCode:
        """Poll *resources* until all are complete, returning the overall code."""
        if not resources:
            return StatusCode.SUCCESS

        deadline = self._config.deadline
        _logger.info(
            "status_check_started",
            resources=len(resources),
            deadline=format_duration(deadline),
        )
        reporter = asyncio.create_task(self._report_loop(resources), name="status-reporter")
        try:
            async with asyncio.timeout(deadline.total_seconds() or None):
                await self._poll_all(resources)
        except TimeoutError:
            _logger.warning("status_check_deadline_exceeded", deadline=format_duration(deadline))
            self._override_pending(
                resources,
                ActionableError(
                    StatusCode.DEADLINE_EXCEEDED,
                    f"could not stabilize within {format_duration(deadline)}",
                ),
            )
        except _ResourceFailedError as exc:
            _logger.warning("status_check_failed_fast", resource=str(exc.resource))
            self._override_pending(
                resources,
                ActionableError(StatusCode.USER_CANCELLED, f"{MSG_CONTEXT_CANCELLED}: {exc.resource} failed"),
            )
        except asyncio.CancelledError:
            _logger.warning("status_check_cancelled")
            self._override_pending(resources, ActionableError(StatusCode.USER_CANCELLED, MSG_CONTEXT_CANCELLED))
            raise
        finally:
            reporter.cancel()
            await asyncio.gather(reporter, return_exceptions=True)
            self._report(resources)

        code = final_status_code(resources)
        _logger.info("status_check_finished", code=code.value)
        return code

    async def _poll_all(self, resources: Sequence[Resource]) -> None:
        tasks = [asyncio.create_task(self._poll(r), name=f"poll:{r}") for r in resources]
        try:
            await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _poll(self, resource: Resource) -> None:
        while True:
            if self._probe is not None:
                statuses = await self._probe.observe(resource)
                if statuses is not None:
                    resource.update_sub_resources(statuses)

            previous = resource.status
            await resource.check_status(self._executor, self._kube_context)
            self._record_transition(resource, previous)

            if resource.is_complete():
                code = resource.status_code()
                _logger.debug("resource_complete", resource=str(resource), code=code.value)
                if self._config.fail_fast and code != StatusCode.SUCCESS:
                    raise _ResourceFailedError(resource)
                return
            await asyncio.sleep(self._config.poll_interval)

    def _override_pending(self, resources: Sequence[Resource], status: ActionableError) -> None:
        for resource in resources:
            if resource.is_complete():
                continue
            previous = resource.status
            resource.update_status(status)
            self._record_transition(resource, previous)

    def _record_transition(self, resource: Resource, previous: ActionableError) -> None:
        current = resource.status
        if current == previous:
            return
        status_transitions_total.labels(code=current.code.value).inc()
        for observer in self._observers:
            try:
                observer.resource_status_changed(resource, previous, current)
            except Exception as exc:  # noqa: BLE001
                _logger.error(
                    "status_observer_error",
                    observer=type(observer).__name__,
                    resource=str(resource),
                    error=str(exc),
                )

    async def _report_loop(self, resources: Sequence[Resource]) -> None:
        while True:
            await asyncio.sleep(self._config.report_interval)
            self._report(resources)

    def _report(self, resources: Sequence[Resource]) -> None:
        out = self._out or sys.stdout
        for resource in resources:
            text = resource.report_since_last_updated(self._config.mute_logs, self._sink)
            if text:
                out.write(text)
        out.flush()


def final_status_code(resources: Sequence[Resource]) -> StatusCode:
    """Return the overall code for a finished check.

    The first failure (by resource name) wins; cancellations only count when
    nothing failed on its own, so a fail-fast run reports the real failure.
    """
    cancelled = False
    for resource in sorted(resources, key=lambda r: (r.name, r.namespace)):
        code = resource.status_code()
        if code == StatusCode.USER_CANCELLED:
            cancelled = True
        elif code != StatusCode.SUCCESS:
            return code
    return StatusCode.USER_CANCELLED if cancelled else StatusCode.SUCCESS
