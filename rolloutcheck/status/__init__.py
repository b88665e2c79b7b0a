"""Rollout status core.

Submodules
----------
classifier -- parse_rollout_result: kubectl output/error -> ActionableError.
retry      -- is_terminal: which codes stop polling.
resource   -- Resource: per-workload state machine and status aggregation.
report     -- report_since_last_updated: deduplicated progress text, log muting.
monitor    -- StatusMonitor: concurrent polling with observer callbacks.
"""

from rolloutcheck.status.classifier import parse_rollout_result
from rolloutcheck.status.monitor import LoggingObserver, StatusMonitor, StatusObserver
from rolloutcheck.status.report import FileLogSink, LogSink
from rolloutcheck.status.resource import Resource
from rolloutcheck.status.retry import is_terminal

__all__ = [
    "FileLogSink",
    "LogSink",
    "LoggingObserver",
    "Resource",
    "StatusMonitor",
    "StatusObserver",
    "is_terminal",
    "parse_rollout_result",
]
