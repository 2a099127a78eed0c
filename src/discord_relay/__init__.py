"""
discord-relay — forward JSON requests to Discord users as direct messages.

HTTP endpoint + Discord bot session, served with FastAPI and discord.py.
"""

from discord_relay.config import Settings
from discord_relay.errors import RelayError, ConfigurationError, ReadinessTimeoutError, SessionNotReadyError
from discord_relay.models.request import MessageRequest, EmbedRequest, EmbedField
from discord_relay.relay import RelayContext, RelayHandler, RelayResult
from discord_relay.transport.gateway import DiscordSession
from discord_relay.transport.http import create_app

__version__ = "0.1.0"
__all__ = [
    "Settings",
    "RelayError",
    "ConfigurationError",
    "ReadinessTimeoutError",
    "SessionNotReadyError",
    "MessageRequest",
    "EmbedRequest",
    "EmbedField",
    "RelayContext",
    "RelayHandler",
    "RelayResult",
    "DiscordSession",
    "create_app",
]
