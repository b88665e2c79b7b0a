"""Core data structures for rolloutcheck."""

from rolloutcheck.models.config import (
    KubectlConfig,
    LogConfig,
    RolloutCheckConfig,
    StatusCheckConfig,
)
from rolloutcheck.models.resources import (
    PodPhase,
    ResourceType,
    RolloutProbe,
    SubResourceStatus,
)
from rolloutcheck.models.status import UNSET_STATUS, ActionableError, StatusCode

__all__ = [
    "UNSET_STATUS",
    "ActionableError",
    "KubectlConfig",
    "LogConfig",
    "PodPhase",
    "ResourceType",
    "RolloutCheckConfig",
    "RolloutProbe",
    "StatusCheckConfig",
    "StatusCode",
    "SubResourceStatus",
]
