"""
discord-relay error types.
"""

from typing import Any, Optional


class RelayError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConfigurationError(RelayError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("configuration_error", message, details)


class ReadinessTimeoutError(RelayError):
    def __init__(self, timeout: float):
        super().__init__(
            "readiness_timeout",
            f"Discord client failed to become ready within {timeout:g} seconds",
            {"timeout": timeout},
        )


class SessionNotReadyError(RelayError):
    def __init__(self, message: str = "Discord client is not ready"):
        super().__init__("session_not_ready", message)
