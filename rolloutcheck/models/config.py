"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta


@dataclass
class KubectlConfig:
    """kubectl invocation configuration."""

    binary: str = "kubectl"
    kube_context: str = ""
    namespace: str = "default"


@dataclass
class StatusCheckConfig:
    """Status-check scheduling configuration."""

    deadline: timedelta = timedelta(minutes=10)
    poll_interval: float = 1.0
    report_interval: float = 2.0
    fail_fast: bool = True
    mute_logs: bool = False
    observe_pods: bool = True
    log_tail_lines: int = 20


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "console"


@dataclass
class RolloutCheckConfig:
    """Top-level rolloutcheck configuration."""

    kubectl: KubectlConfig = field(default_factory=KubectlConfig)
    status_check: StatusCheckConfig = field(default_factory=StatusCheckConfig)
    log: LogConfig = field(default_factory=LogConfig)
