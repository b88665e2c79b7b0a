"""Tests for the rollout result classifier and duration formatting."""

from __future__ import annotations

from datetime import timedelta

from hypothesis import assume, given
from hypothesis import strategies as st

from rolloutcheck.errors import KubectlError
from rolloutcheck.models.status import ActionableError, StatusCode
from rolloutcheck.status.classifier import (
    CONNECTION_ERR_MARKER,
    KILLED_ERR_MARKER,
    MSG_KUBECTL_CONNECTION,
    format_duration,
    parse_rollout_result,
)
from rolloutcheck.status.retry import is_terminal

_TEN_SECONDS = timedelta(seconds=10)


# =====================================================================
# Execution errors
# =====================================================================


class TestErrors:
    def test_connection_error(self) -> None:
        ae = parse_rollout_result("", _TEN_SECONDS, False, KubectlError("Unable to connect to the server"))
        assert ae == ActionableError(StatusCode.KUBECTL_CONNECTION_ERR, MSG_KUBECTL_CONNECTION)

    def test_connection_error_is_retryable(self) -> None:
        ae = parse_rollout_result("", _TEN_SECONDS, False, KubectlError("Unable to connect to the server"))
        assert ae is not None
        assert is_terminal(ae.code) is False

    def test_killed(self) -> None:
        ae = parse_rollout_result("", _TEN_SECONDS, False, KubectlError("signal: killed"))
        assert ae == ActionableError(
            StatusCode.KUBECTL_PID_KILLED,
            "received Ctrl-C or deployments could not stabilize within 10s: "
            "kubectl rollout status command interrupted\n",
        )

    def test_killed_message_same_when_cancelled(self) -> None:
        err = KubectlError("signal: killed")
        assert parse_rollout_result("", _TEN_SECONDS, True, err) == parse_rollout_result(
            "", _TEN_SECONDS, False, err
        )

    def test_unclassified_error_is_verbatim(self) -> None:
        ae = parse_rollout_result("", _TEN_SECONDS, False, KubectlError("deployment test not found"))
        assert ae == ActionableError(StatusCode.UNKNOWN, "deployment test not found")

    def test_error_wins_over_success_output(self) -> None:
        ae = parse_rollout_result("successfully rolled out", _TEN_SECONDS, False, RuntimeError("boom"))
        assert ae == ActionableError(StatusCode.UNKNOWN, "boom")

    def test_any_exception_type_is_accepted(self) -> None:
        ae = parse_rollout_result("", _TEN_SECONDS, False, OSError("Unable to connect to the server: EOF"))
        assert ae is not None
        assert ae.code == StatusCode.KUBECTL_CONNECTION_ERR


# =====================================================================
# Output without error
# =====================================================================


class TestOutput:
    def test_success_keeps_text(self) -> None:
        ae = parse_rollout_result("successfully rolled out", _TEN_SECONDS, False, None)
        assert ae == ActionableError(StatusCode.SUCCESS, "successfully rolled out")

    def test_success_case_is_not_normalised(self) -> None:
        ae = parse_rollout_result('Deployment "Web" successfully rolled out', _TEN_SECONDS, False, None)
        assert ae is not None
        assert ae.message == 'Deployment "Web" successfully rolled out'

    def test_pending_is_lower_cased(self) -> None:
        ae = parse_rollout_result("Waiting for replicas to be available", _TEN_SECONDS, False, None)
        assert ae == ActionableError(
            StatusCode.DEPLOYMENT_ROLLOUT_PENDING,
            "waiting for replicas to be available",
        )
        assert is_terminal(ae.code) is False

    def test_empty_output_is_no_signal(self) -> None:
        assert parse_rollout_result("", _TEN_SECONDS, False, None) is None


# =====================================================================
# Properties
# =====================================================================


class TestProperties:
    @given(prefix=st.text(), suffix=st.text())
    def test_connection_marker_anywhere(self, prefix: str, suffix: str) -> None:
        err = KubectlError(f"{prefix}{CONNECTION_ERR_MARKER}{suffix}")
        ae = parse_rollout_result("", _TEN_SECONDS, False, err)
        assert ae == ActionableError(StatusCode.KUBECTL_CONNECTION_ERR, MSG_KUBECTL_CONNECTION)

    @given(prefix=st.text(), suffix=st.text(), seconds=st.integers(min_value=0, max_value=86_400))
    def test_killed_message_names_deadline(self, prefix: str, suffix: str, seconds: int) -> None:
        text = f"{prefix}{KILLED_ERR_MARKER}{suffix}"
        assume(CONNECTION_ERR_MARKER not in text)
        deadline = timedelta(seconds=seconds)
        ae = parse_rollout_result("", deadline, False, KubectlError(text))
        assert ae is not None
        assert ae.code == StatusCode.KUBECTL_PID_KILLED
        assert format_duration(deadline) in ae.message
        assert ae.message.endswith("\n")

    @given(
        details=st.text(),
        cancelled=st.booleans(),
        error=st.one_of(st.none(), st.text().map(KubectlError)),
    )
    def test_total(self, details: str, cancelled: bool, error: KubectlError | None) -> None:
        ae = parse_rollout_result(details, _TEN_SECONDS, cancelled, error)
        if error is None and details == "":
            assert ae is None
        else:
            assert ae is not None
            assert isinstance(ae.code, StatusCode)


# =====================================================================
# format_duration
# =====================================================================


class TestFormatDuration:
    def test_seconds(self) -> None:
        assert format_duration(timedelta(seconds=10)) == "10s"

    def test_minutes_and_seconds(self) -> None:
        assert format_duration(timedelta(seconds=90)) == "1m30s"

    def test_whole_minutes(self) -> None:
        assert format_duration(timedelta(minutes=10)) == "10m0s"

    def test_hours(self) -> None:
        assert format_duration(timedelta(hours=1)) == "1h0m0s"

    def test_zero(self) -> None:
        assert format_duration(timedelta(0)) == "0s"

    def test_fractional(self) -> None:
        assert format_duration(timedelta(milliseconds=1500)) == "1.5s"
