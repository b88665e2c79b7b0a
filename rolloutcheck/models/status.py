"""Status codes and the actionable outcome value."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class StatusCode(StrEnum):
    """Closed set of status-check codes.

    Values are the wire names shared with reporting and telemetry consumers.
    """

    UNSET = "STATUSCHECK_UNSET"
    SUCCESS = "STATUSCHECK_SUCCESS"
    UNKNOWN = "STATUSCHECK_UNKNOWN"
    UNHEALTHY = "STATUSCHECK_UNHEALTHY"
    KUBECTL_CONNECTION_ERR = "STATUSCHECK_KUBECTL_CONNECTION_ERR"
    KUBECTL_PID_KILLED = "STATUSCHECK_KUBECTL_PID_KILLED"
    DEPLOYMENT_ROLLOUT_PENDING = "STATUSCHECK_DEPLOYMENT_ROLLOUT_PENDING"
    STANDALONE_PODS_PENDING = "STATUSCHECK_STANDALONE_PODS_PENDING"
    USER_CANCELLED = "STATUSCHECK_USER_CANCELLED"
    DEADLINE_EXCEEDED = "STATUSCHECK_DEADLINE_EXCEEDED"
    NODE_UNSCHEDULABLE = "STATUSCHECK_NODE_UNSCHEDULABLE"
    UNKNOWN_UNSCHEDULABLE = "STATUSCHECK_UNKNOWN_UNSCHEDULABLE"
    FAILED_SCHEDULING = "STATUSCHECK_FAILED_SCHEDULING"
    CONTAINER_CREATING = "STATUSCHECK_CONTAINER_CREATING"
    POD_INITIALIZING = "STATUSCHECK_POD_INITIALIZING"
    CONTAINER_RESTARTING = "STATUSCHECK_CONTAINER_RESTARTING"
    CONTAINER_TERMINATED = "STATUSCHECK_CONTAINER_TERMINATED"
    IMAGE_PULL_ERR = "STATUSCHECK_IMAGE_PULL_ERR"
    RUN_CONTAINER_ERR = "STATUSCHECK_RUN_CONTAINER_ERR"


@dataclass(frozen=True)
class ActionableError:
    """A (code, message) classification of a resource's rollout state.

    Two outcomes are equal when both code and message match; this equality
    drives change detection for reporting.
    """

    code: StatusCode = StatusCode.UNSET
    message: str = ""

    def __str__(self) -> str:
        return self.message


UNSET_STATUS = ActionableError()
