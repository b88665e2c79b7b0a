"""Tests for ROLLOUTCHECK_* environment configuration."""

from __future__ import annotations

import os
from datetime import timedelta

import pytest

from rolloutcheck.config import load_config, parse_duration
from rolloutcheck.errors import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("ROLLOUTCHECK_"):
            monkeypatch.delenv(key)


class TestDefaults:
    def test_defaults(self) -> None:
        config = load_config()
        assert config.kubectl.binary == "kubectl"
        assert config.kubectl.kube_context == ""
        assert config.kubectl.namespace == "default"
        assert config.status_check.deadline == timedelta(minutes=10)
        assert config.status_check.poll_interval == 1.0
        assert config.status_check.report_interval == 2.0
        assert config.status_check.fail_fast is True
        assert config.status_check.mute_logs is False
        assert config.log.level == "info"
        assert config.log.format == "console"
        assert config.status_check.observe_pods is True
        assert config.status_check.log_tail_lines == 20


class TestOverrides:
    def test_env_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLOUTCHECK_KUBE_CONTEXT", "kind-dev")
        monkeypatch.setenv("ROLLOUTCHECK_NAMESPACE", "prod")
        monkeypatch.setenv("ROLLOUTCHECK_DEADLINE", "90s")
        monkeypatch.setenv("ROLLOUTCHECK_FAIL_FAST", "false")
        monkeypatch.setenv("ROLLOUTCHECK_MUTE_LOGS", "yes")
        monkeypatch.setenv("ROLLOUTCHECK_LOG_LEVEL", "DEBUG")

        config = load_config()

        assert config.kubectl.kube_context == "kind-dev"
        assert config.kubectl.namespace == "prod"
        assert config.status_check.deadline == timedelta(seconds=90)
        assert config.status_check.fail_fast is False
        assert config.status_check.mute_logs is True
        assert config.log.level == "debug"

    def test_poll_interval_is_clamped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLOUTCHECK_POLL_INTERVAL", "0")
        assert load_config().status_check.poll_interval == 0.1

    def test_invalid_number(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLOUTCHECK_REPORT_INTERVAL", "often")
        with pytest.raises(ConfigError):
            load_config()

    def test_invalid_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLOUTCHECK_LOG_LEVEL", "verbose")
        with pytest.raises(ConfigError):
            load_config()

    def test_pod_observation_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLOUTCHECK_OBSERVE_PODS", "0")
        monkeypatch.setenv("ROLLOUTCHECK_LOG_TAIL_LINES", "50")
        monkeypatch.setenv("ROLLOUTCHECK_LOG_FORMAT", "JSON")

        config = load_config()

        assert config.status_check.observe_pods is False
        assert config.status_check.log_tail_lines == 50
        assert config.log.format == "json"

    def test_log_tail_lines_is_clamped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLOUTCHECK_LOG_TAIL_LINES", "100000")
        assert load_config().status_check.log_tail_lines == 500

    def test_invalid_log_tail_lines(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLOUTCHECK_LOG_TAIL_LINES", "a few")
        with pytest.raises(ConfigError):
            load_config()

    def test_invalid_log_format(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROLLOUTCHECK_LOG_FORMAT", "xml")
        with pytest.raises(ConfigError):
            load_config()


class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("30s", timedelta(seconds=30)),
            ("5m", timedelta(minutes=5)),
            ("2h", timedelta(hours=2)),
            ("0s", timedelta(0)),
        ],
    )
    def test_valid(self, value: str, expected: timedelta) -> None:
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "5", "5d", "1.5m", "m5"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ConfigError):
            parse_duration(value)
