"""Executor interfaces consumed by the status core."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from rolloutcheck.models.resources import RolloutProbe, SubResourceStatus

if TYPE_CHECKING:
    from rolloutcheck.status.resource import Resource


class RolloutExecutor(ABC):
    """Runs rollout-status probes against the cluster."""

    @abstractmethod
    async def rollout_status(self, probe: RolloutProbe) -> str:
        """Return the captured output of one non-watching rollout probe.

        Raises:
            KubectlError -- the probe failed; the message is the failure text.
        """


class SubResourceProbe(ABC):
    """Observes the children (pods) of a tracked resource."""

    @abstractmethod
    async def observe(self, resource: Resource) -> list[SubResourceStatus] | None:
        """Return fresh child snapshots, or None when nothing could be observed."""
