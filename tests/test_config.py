"""Tests for jsonws.config."""

from __future__ import annotations

import pytest

from jsonws import configure, configure_from_env, get_config
from jsonws.config import DEFAULT_LANGUAGE, DEFAULT_LOCAL_NAME, DEFAULT_TIMEOUT, _initial_timeout


class TestConfigure:
    def test_defaults(self, monkeypatch) -> None:
        """Without overrides the documented defaults apply."""
        for key in ("JSONWS_LANGUAGE", "JSONWS_PROXY_NAME", "JSONWS_TIMEOUT"):
            monkeypatch.delenv(key, raising=False)
        configure(default_language=DEFAULT_LANGUAGE, local_name=DEFAULT_LOCAL_NAME, timeout=DEFAULT_TIMEOUT)

        config = get_config()
        assert (config.default_language, config.local_name, config.timeout) == ("Python", "Proxy", 30.0)

    def test_partial_update(self) -> None:
        configure(local_name="Client")
        configure(timeout=5)

        config = get_config()
        assert config.local_name == "Client"
        assert config.timeout == 5.0

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_timeout_must_be_positive(self, timeout) -> None:
        with pytest.raises(ValueError):
            configure(timeout=timeout)


class TestConfigureFromEnv:
    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("JSONWS_LANGUAGE", "JavaScript")
        monkeypatch.setenv("JSONWS_PROXY_NAME", "RenderApi")
        monkeypatch.setenv("JSONWS_TIMEOUT", "2.5")

        configure_from_env()

        config = get_config()
        assert config.default_language == "JavaScript"
        assert config.local_name == "RenderApi"
        assert config.timeout == 2.5

    def test_unset_variables_keep_values(self, monkeypatch) -> None:
        configure(local_name="Kept")
        monkeypatch.delenv("JSONWS_PROXY_NAME", raising=False)

        configure_from_env()

        assert get_config().local_name == "Kept"

    def test_bad_timeout(self, monkeypatch) -> None:
        monkeypatch.setenv("JSONWS_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="JSONWS_TIMEOUT"):
            configure_from_env()


class TestInitialTimeout:
    """JSONWS_TIMEOUT as read when jsonws is imported."""

    def test_valid_value(self, monkeypatch) -> None:
        monkeypatch.setenv("JSONWS_TIMEOUT", "2.5")
        assert _initial_timeout() == 2.5

    @pytest.mark.parametrize("value", ["soon", "-1", "0", ""])
    def test_unusable_value_falls_back(self, monkeypatch, value) -> None:
        monkeypatch.setenv("JSONWS_TIMEOUT", value)
        assert _initial_timeout() == DEFAULT_TIMEOUT

    def test_bad_value_is_logged(self, monkeypatch, caplog) -> None:
        monkeypatch.setenv("JSONWS_TIMEOUT", "soon")
        _initial_timeout()
        assert "JSONWS_TIMEOUT must be a number of seconds" in caplog.text
