"""Which status codes end polling for a resource."""

from __future__ import annotations

from rolloutcheck.models.status import StatusCode

TERMINAL_CODES: frozenset[StatusCode] = frozenset(
    {
        StatusCode.SUCCESS,
        StatusCode.UNKNOWN,
        StatusCode.KUBECTL_PID_KILLED,
        StatusCode.USER_CANCELLED,
        StatusCode.DEADLINE_EXCEEDED,
    }
)


def is_terminal(code: StatusCode) -> bool:
    """Return True if *code* is final and the resource should not be polled again.

    Connection errors, unschedulable pods and every pending code are retried.
    """
    return code in TERMINAL_CODES
