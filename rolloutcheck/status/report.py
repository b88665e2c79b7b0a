"""Human-readable progress reports for tracked resources.

A report is rendered only for an outcome that has not been reported yet, so
repeated polls with an unchanged outcome stay quiet. Child logs are shown
inline; in muted mode long logs are cut to a short tail and the full text is
handed to a :class:`LogSink`.
"""

from __future__ import annotations

import tempfile
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from rolloutcheck.observability.logging import get_logger

if TYPE_CHECKING:
    from rolloutcheck.status.resource import Resource

_logger = get_logger("status.report")

TOOL_NAME = "rolloutcheck"
MAX_LOG_LINES = 3

_TAB_HEADER = " -"
_CHILD_INDENT = "    -"
_LOG_INDENT = "      "


class LogSink(ABC):
    """Destination for full child logs when reporting is muted."""

    @abstractmethod
    def write(self, name: str, lines: Sequence[str]) -> Path:
        """Persist *lines* for child *name*, returning where they were written.

        May raise OSError.
        """


class FileLogSink(LogSink):
    """Writes logs to ``<root>/<child-name>.log``, overwriting previous content."""

    def __init__(self, root: Path | None = None) -> None:
        self._root = root or default_log_dir()

    @property
    def root(self) -> Path:
        return self._root

    def write(self, name: str, lines: Sequence[str]) -> Path:
        self._root.mkdir(parents=True, exist_ok=True)
        path = self._root / f"{name}.log"
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path


def default_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / TOOL_NAME / "statuscheck"


def render_logs(name: str, logs: Sequence[str], mute_logs: bool, sink: LogSink) -> str:
    """Render a child's log lines, muting to *sink* when requested."""
    if not mute_logs or len(logs) <= MAX_LOG_LINES:
        return "".join(f"{_LOG_INDENT}> {line}\n" for line in logs)

    tail = "".join(f"{_LOG_INDENT}> {line}\n" for line in logs[-MAX_LOG_LINES:])
    try:
        path = sink.write(name, logs)
    except OSError as exc:
        _logger.warning("log_sink_write_failed", pod=name, error=str(exc))
        return tail
    return f"{tail}{_LOG_INDENT}Full logs at {path}\n"


def report_since_last_updated(resource: Resource, mute_logs: bool, sink: LogSink | None = None) -> str:
    """Render *resource* and its failing children if not yet reported.

    Marks the resource as reported; a second call before the outcome changes
    again returns an empty string.
    """
    if resource.reported:
        return ""
    resource.reported = True

    sink = sink or FileLogSink()
    children = []
    for child in resource.sorted_children():
        child_message = child.error.message.rstrip("\n") if child.error is not None else ""
        if not child_message:
            continue
        children.append(f"{_CHILD_INDENT} {child}: {child_message}\n")
        children.append(render_logs(child.name, child.logs, mute_logs, sink))

    message = resource.status_message().rstrip("\n")
    if not message and not children:
        return ""
    header = f"{_TAB_HEADER} {resource}: {message}\n"
    return header + "".join(children)
