"""
Relay settings, loaded from the process environment.

``DISCORD_TOKEN`` is the only required value. A ``.env`` file in the working
directory is read first so local runs do not need exported variables.
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from discord_relay.errors import ConfigurationError

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 80
DEFAULT_READY_TIMEOUT = 30.0
DEFAULT_READY_POLL_INTERVAL = 0.1


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for one relay process."""

    discord_token: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    ready_timeout: float = DEFAULT_READY_TIMEOUT
    ready_poll_interval: float = DEFAULT_READY_POLL_INTERVAL
    max_concurrency: Optional[int] = None
    log_level: str = "INFO"
    discord_log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ`` plus ``.env``)."""
        if environ is None:
            load_dotenv(find_dotenv(usecwd=True))
            environ = os.environ

        token = environ.get("DISCORD_TOKEN", "").strip()
        if not token:
            raise ConfigurationError("DISCORD_TOKEN environment variable must be set")

        max_concurrency = _parse(environ, "RELAY_MAX_CONCURRENCY", int, None)
        if max_concurrency is not None and max_concurrency < 1:
            raise ConfigurationError(
                "RELAY_MAX_CONCURRENCY must be a positive integer",
                {"RELAY_MAX_CONCURRENCY": max_concurrency},
            )

        return cls(
            discord_token=token,
            host=environ.get("RELAY_HOST", DEFAULT_HOST),
            port=_parse(environ, "RELAY_PORT", int, DEFAULT_PORT),
            ready_timeout=_parse(environ, "RELAY_READY_TIMEOUT", float, DEFAULT_READY_TIMEOUT),
            ready_poll_interval=_parse(
                environ, "RELAY_READY_POLL_INTERVAL", float, DEFAULT_READY_POLL_INTERVAL,
            ),
            max_concurrency=max_concurrency,
            log_level=_level(environ, "RELAY_LOG_LEVEL", "INFO"),
            discord_log_level=_level(environ, "DISCORD_LOG_LEVEL", "INFO"),
        )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "log_level" in changes:
            changes["log_level"] = _check_level("log_level", changes["log_level"])
        return replace(self, **changes)


def _parse(environ: Mapping[str, str], key: str, kind: type, default: Any) -> Any:
    raw = environ.get(key, "").strip()
    if not raw:
        return default
    try:
        return kind(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a valid {kind.__name__}, got {raw!r}", {key: raw})


def _level(environ: Mapping[str, str], key: str, default: str) -> str:
    raw = environ.get(key, "").strip()
    return _check_level(key, raw) if raw else default


def _check_level(key: str, value: str) -> str:
    name = value.upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ConfigurationError(f"{key} is not a logging level: {value!r}", {key: value})
    return name
