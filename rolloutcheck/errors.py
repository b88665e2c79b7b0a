"""Exception types raised across rolloutcheck."""

from __future__ import annotations


class RolloutCheckError(Exception):
    """Base class for rolloutcheck errors."""


class ConfigError(RolloutCheckError, ValueError):
    """Raised when an environment setting cannot be parsed."""


class KubectlError(RolloutCheckError):
    """Raised by the executor when a kubectl invocation fails.

    The message is what the rollout classifier inspects, so it carries the
    kubectl stderr text verbatim (or ``signal: killed`` when the process was
    killed).
    """

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class ClusterConfigError(RolloutCheckError):
    """Raised when no kubeconfig or in-cluster configuration can be loaded."""
