"""
Configuration management for jsonws

This module provides global defaults for the compiler and the runtime tunnel.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


DEFAULT_LANGUAGE = "Python"
DEFAULT_LOCAL_NAME = "Proxy"
DEFAULT_TIMEOUT = 30.0


@dataclass
class ProxyConfig:
    """jsonws configuration options."""
    default_language: str = DEFAULT_LANGUAGE
    local_name: str = DEFAULT_LOCAL_NAME
    timeout: float = DEFAULT_TIMEOUT


def _get_env(key: str) -> str | None:
    """Get environment variable value."""
    return os.environ.get(key)


def _get_env_float(key: str) -> float | None:
    value = _get_env(key)
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{key} must be a number of seconds, got {value!r}") from None


def _initial_timeout() -> float:
    try:
        value = _get_env_float("JSONWS_TIMEOUT")
    except ValueError as e:
        logger.warning("%s; using %s", e, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    if value is None or value <= 0:
        return DEFAULT_TIMEOUT
    return value


# Global configuration
_global_config: dict[str, str | float | None] = {
    "default_language": _get_env("JSONWS_LANGUAGE") or DEFAULT_LANGUAGE,
    "local_name": _get_env("JSONWS_PROXY_NAME") or DEFAULT_LOCAL_NAME,
    "timeout": _initial_timeout(),
}


def configure(
    *,
    default_language: str | None = None,
    local_name: str | None = None,
    timeout: float | None = None,
) -> None:
    """
    Configure jsonws defaults.

    Args:
        default_language: Emitter used by the CLI when none is given
        local_name: Proxy class name used when the caller passes none
        timeout: Per-call timeout of the default tunnel, in seconds

    Example::

        from jsonws import configure

        configure(local_name="RenderClient", timeout=60.0)
    """
    global _global_config

    if default_language is not None:
        _global_config["default_language"] = default_language
    if local_name is not None:
        _global_config["local_name"] = local_name
    if timeout is not None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        _global_config["timeout"] = float(timeout)


def get_config() -> ProxyConfig:
    """
    Get current jsonws configuration.

    Returns:
        Current configuration object
    """
    return ProxyConfig(
        default_language=str(_global_config["default_language"] or DEFAULT_LANGUAGE),
        local_name=str(_global_config["local_name"] or DEFAULT_LOCAL_NAME),
        timeout=float(_global_config["timeout"] or DEFAULT_TIMEOUT),
    )


def configure_from_env() -> None:
    """
    Configure jsonws from environment variables.

    Reads from:
        - JSONWS_LANGUAGE
        - JSONWS_PROXY_NAME
        - JSONWS_TIMEOUT
    """
    configure(
        default_language=_get_env("JSONWS_LANGUAGE"),
        local_name=_get_env("JSONWS_PROXY_NAME"),
        timeout=_get_env_float("JSONWS_TIMEOUT"),
    )
