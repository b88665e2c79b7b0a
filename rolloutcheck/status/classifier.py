"""Classification of ``kubectl rollout status`` results.

Maps the captured output and error of one probe to a single
:class:`ActionableError`. The mapping is total: every input yields an
outcome (or ``None`` for "no signal this cycle") and nothing is raised.

Rules, in order:
    1. error mentions an unreachable API server  -> KUBECTL_CONNECTION_ERR
    2. error says the process was killed          -> KUBECTL_PID_KILLED
    3. any other error                            -> UNKNOWN (error text)
    4. no error, empty output                     -> None
    5. output contains the rollout success marker -> SUCCESS (text as is)
    6. anything else                              -> DEPLOYMENT_ROLLOUT_PENDING
"""

from __future__ import annotations

from datetime import timedelta

from rolloutcheck.models.status import ActionableError, StatusCode

ROLLOUT_SUCCESS = "successfully rolled out"
CONNECTION_ERR_MARKER = "Unable to connect to the server"
KILLED_ERR_MARKER = "signal: killed"

MSG_KUBECTL_CONNECTION = (
    "kubectl connection error: could not reach the cluster API server. "
    "Check your connection to the cluster.\n"
)
MSG_KUBECTL_KILLED = "kubectl rollout status command interrupted\n"


def format_duration(duration: timedelta) -> str:
    """Render *duration* the way kubectl users read it (``10s``, ``1m30s``)."""
    total = duration.total_seconds()
    if total == 0:
        return "0s"
    whole = int(total)
    hours, rem = divmod(whole, 3600)
    minutes, seconds = divmod(rem, 60)
    secs = f"{seconds + (total - whole):g}s"
    if hours:
        return f"{hours}h{minutes}m{secs}"
    if minutes:
        return f"{minutes}m{secs}"
    return secs


def parse_rollout_result(
    details: str,
    deadline: timedelta,
    cancelled: bool,
    error: BaseException | None,
) -> ActionableError | None:
    """Classify one rollout probe result.

    ``cancelled`` does not change the outcome: a killed probe cannot tell a
    user interrupt from an elapsed deadline, so the killed message names both.
    """
    if error is not None:
        text = str(error)
        if CONNECTION_ERR_MARKER in text:
            return ActionableError(StatusCode.KUBECTL_CONNECTION_ERR, MSG_KUBECTL_CONNECTION)
        if KILLED_ERR_MARKER in text:
            return ActionableError(
                StatusCode.KUBECTL_PID_KILLED,
                f"received Ctrl-C or deployments could not stabilize within "
                f"{format_duration(deadline)}: {MSG_KUBECTL_KILLED}",
            )
        return ActionableError(StatusCode.UNKNOWN, text)

    if not details:
        return None
    if ROLLOUT_SUCCESS in details:
        return ActionableError(StatusCode.SUCCESS, details)
    # Case carries no meaning in progress text; normalise for stable dedup.
    return ActionableError(StatusCode.DEPLOYMENT_ROLLOUT_PENDING, details.lower())
