"""Tracked resource types and child (pod) snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum

from rolloutcheck.models.status import ActionableError


class ResourceType(StrEnum):
    """Kinds of workload the status check knows how to track."""

    DEPLOYMENT = "deployment"
    STANDALONE_PODS = "standalone-pods"


class PodPhase(StrEnum):
    """Pod lifecycle phases as reported in ``status.phase``."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class SubResourceStatus:
    """Last observed state of one child object, typically a pod.

    Immutable: a new observation replaces the snapshot, it never edits it.
    ``phase`` is kept as the raw string so unexpected phases survive.
    """

    namespace: str
    kind: str
    name: str
    phase: str
    error: ActionableError | None = None
    logs: tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"{self.namespace}:{self.kind}/{self.name}"


@dataclass(frozen=True)
class RolloutProbe:
    """Parameters of one ``rollout status`` invocation.

    A zero ``deadline`` means the probe is not time bounded.
    """

    namespace: str
    kube_context: str
    resource_type: ResourceType
    name: str
    watch: bool = False
    deadline: timedelta = timedelta(0)
