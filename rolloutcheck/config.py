"""Configuration loading from environment variables."""

from __future__ import annotations

import os
import re
from datetime import timedelta

from rolloutcheck.errors import ConfigError
from rolloutcheck.models.config import (
    KubectlConfig,
    LogConfig,
    RolloutCheckConfig,
    StatusCheckConfig,
)

_DURATION_RE = re.compile(r"^([0-9]+)(s|m|h)$")
_DURATION_UNITS = {"s": "seconds", "m": "minutes", "h": "hours"}


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"ROLLOUTCHECK_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid integer for ROLLOUTCHECK_{key}: {raw}") from exc
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float, min_val: float | None = None, max_val: float | None = None) -> float:
    raw = _env(key, str(default))
    try:
        val = float(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid number for ROLLOUTCHECK_{key}: {raw}") from exc
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def parse_duration(value: str) -> timedelta:
    """Parse a ``<n>s``, ``<n>m`` or ``<n>h`` duration."""
    match = _DURATION_RE.match(value.strip())
    if not match:
        raise ConfigError(f"Invalid duration format: {value}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ConfigError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    valid = {"console", "json"}
    if value.lower() not in valid:
        raise ConfigError(f"Invalid log format: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> RolloutCheckConfig:
    """Load configuration from ROLLOUTCHECK_* environment variables."""
    return RolloutCheckConfig(
        kubectl=KubectlConfig(
            binary=_env("KUBECTL_BINARY", "kubectl"),
            kube_context=_env("KUBE_CONTEXT", ""),
            namespace=_env("NAMESPACE", "default"),
        ),
        status_check=StatusCheckConfig(
            deadline=parse_duration(_env("DEADLINE", "10m")),
            poll_interval=_env_float("POLL_INTERVAL", 1.0, min_val=0.1, max_val=60.0),
            report_interval=_env_float("REPORT_INTERVAL", 2.0, min_val=0.1, max_val=300.0),
            fail_fast=_env_bool("FAIL_FAST", True),
            mute_logs=_env_bool("MUTE_LOGS", False),
            observe_pods=_env_bool("OBSERVE_PODS", True),
            log_tail_lines=_env_int("LOG_TAIL_LINES", 20, min_val=0, max_val=500),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
            format=_validate_log_format(_env("LOG_FORMAT", "console")),
        ),
    )
