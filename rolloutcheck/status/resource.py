"""Per-resource rollout state machine.

A :class:`Resource` moves from unobserved (``UNSET``) through pending
(retryable codes) to terminal (codes for which :func:`is_terminal` holds).
Polling stops at a terminal code, but :meth:`Resource.update_status` keeps
accepting overrides in every state so the monitor can force a cancellation
or deadline outcome onto a resource whose probe is still in flight.

A resource is owned by a single worker task; nothing here is locked.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from datetime import timedelta
from types import MappingProxyType
from typing import TYPE_CHECKING

from rolloutcheck.errors import KubectlError
from rolloutcheck.models.resources import PodPhase, ResourceType, RolloutProbe, SubResourceStatus
from rolloutcheck.models.status import UNSET_STATUS, ActionableError, StatusCode
from rolloutcheck.observability.logging import get_logger
from rolloutcheck.observability.metrics import rollout_probe_duration_seconds, rollout_probes_total
from rolloutcheck.status.classifier import parse_rollout_result
from rolloutcheck.status.report import LogSink, report_since_last_updated
from rolloutcheck.status.retry import is_terminal

if TYPE_CHECKING:
    from rolloutcheck.executor.base import RolloutExecutor

_logger = get_logger("status.resource")


class Resource:
    """A tracked workload and the last observed state of its pods."""

    def __init__(
        self,
        name: str,
        resource_type: ResourceType,
        namespace: str,
        deadline: timedelta,
    ) -> None:
        self.name = name
        self.resource_type = resource_type
        self.namespace = namespace
        self.deadline = deadline
        self._children: Mapping[str, SubResourceStatus] = MappingProxyType({})
        self._status: ActionableError = UNSET_STATUS
        self.changed = False
        self.reported = False

    def __str__(self) -> str:
        return f"{self.namespace}:{self.resource_type}/{self.name}"

    def __repr__(self) -> str:
        return f"Resource({self}, status={self._status.code})"

    @property
    def status(self) -> ActionableError:
        return self._status

    @property
    def children(self) -> Mapping[str, SubResourceStatus]:
        return self._children

    def sorted_children(self) -> list[SubResourceStatus]:
        return [self._children[name] for name in sorted(self._children)]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def update_status(self, status: ActionableError) -> None:
        """Replace the current outcome.

        ``changed`` records whether this update differed from the previous
        outcome; a differing update also makes the resource reportable again.
        """
        if status == self._status:
            self.changed = False
            return
        self._status = status
        self.changed = True
        self.reported = False

    def update_sub_resources(self, statuses: Iterable[SubResourceStatus]) -> None:
        """Replace the child map with a fresh set of observations."""
        self._children = MappingProxyType({s.name: s for s in statuses})

    async def check_status(self, executor: RolloutExecutor, kube_context: str = "") -> None:
        """Poll once and fold the result into the current outcome."""
        if self.resource_type == ResourceType.STANDALONE_PODS:
            self.update_status(self._check_standalone_pods())
            return

        status = await self._check_rollout_status(executor, kube_context)
        if status is not None:
            self.update_status(status)

    async def _check_rollout_status(self, executor: RolloutExecutor, kube_context: str) -> ActionableError | None:
        probe = RolloutProbe(
            namespace=self.namespace,
            kube_context=kube_context,
            resource_type=self.resource_type,
            name=self.name,
            watch=False,
            deadline=self.deadline,
        )
        t_start = time.monotonic()
        output = ""
        error: KubectlError | None = None
        try:
            output = await executor.rollout_status(probe)
        except KubectlError as exc:
            error = exc
        rollout_probe_duration_seconds.observe(time.monotonic() - t_start)
        rollout_probes_total.labels(result="error" if error else "ok").inc()

        if error is not None:
            _logger.debug("rollout_probe_failed", resource=str(self), error=str(error))
        return parse_rollout_result(self._cleanup_details(output), self.deadline, False, error)

    def _cleanup_details(self, output: str) -> str:
        """Drop the ``deployment "<name>" `` prefix kubectl puts on every line."""
        clean = output.strip().replace(f'{self.resource_type} "{self.name}" ', "")
        if clean:
            clean = clean[0].lower() + clean[1:]
        return clean

    def _check_standalone_pods(self) -> ActionableError:
        pending: list[str] = []
        for child in self.sorted_children():
            if child.phase == PodPhase.FAILED:
                return ActionableError(StatusCode.UNKNOWN, f"pod {child.name} failed")
            if child.phase != PodPhase.SUCCEEDED:
                pending.append(child.name)
        if pending or not self._children:
            return ActionableError(
                StatusCode.STANDALONE_PODS_PENDING,
                f"pods not ready: [{' '.join(pending)}]",
            )
        return ActionableError(StatusCode.SUCCESS, "")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_complete(self) -> bool:
        """Return True once the outcome is terminal and polling should stop."""
        return is_terminal(self._status.code)

    def status_code(self) -> StatusCode:
        """Return the single code representing this resource and its pods.

        Cancellation wins over everything and a resource-level success hides
        lagging pod noise; otherwise the first failing pod (by name) decides.
        """
        own = self._status.code
        if own in (StatusCode.USER_CANCELLED, StatusCode.SUCCESS):
            return own
        for child in self.sorted_children():
            if child.error is not None and child.error.code != StatusCode.SUCCESS:
                return child.error.code
        return own

    def status_message(self) -> str:
        """Return the first failing pod's message, or this resource's own."""
        for child in self.sorted_children():
            if child.error is not None and child.error.code != StatusCode.SUCCESS and child.error.message:
                return f"{child.error.message}\n"
        return self._status.message

    def report_since_last_updated(self, mute_logs: bool, sink: LogSink | None = None) -> str:
        return report_since_last_updated(self, mute_logs, sink)
