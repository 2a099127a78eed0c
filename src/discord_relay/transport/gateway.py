"""
Discord session manager: login, gateway connection and readiness tracking.

Readiness follows the live gateway connection: READY or RESUMED marks the
session ready, a disconnect marks it not ready until the client reconnects.
"""

import asyncio
import logging
from typing import Optional

import discord

from discord_relay.config import DEFAULT_READY_POLL_INTERVAL, DEFAULT_READY_TIMEOUT
from discord_relay.errors import ReadinessTimeoutError, SessionNotReadyError

logger = logging.getLogger(__name__)


def direct_message_intents() -> discord.Intents:
    """The minimal gateway intents needed to deliver direct messages."""
    intents = discord.Intents.none()
    intents.dm_messages = True
    return intents


class DiscordSession:
    def __init__(
        self,
        token: str,
        ready_timeout: float = DEFAULT_READY_TIMEOUT,
        poll_interval: float = DEFAULT_READY_POLL_INTERVAL,
        client: Optional[discord.Client] = None,
    ):
        self._token = token
        self._ready_timeout = ready_timeout
        self._poll_interval = poll_interval
        self._client = client or discord.Client(intents=direct_message_intents())
        self._runner: Optional[asyncio.Task] = None
        self._ready = False
        self._ever_ready = False
        self._register_handlers()

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def client(self) -> discord.Client:
        return self._client

    def _register_handlers(self) -> None:
        @self._client.event
        async def on_ready() -> None:
            self._mark_ready()

        @self._client.event
        async def on_resumed() -> None:
            self._mark_ready()

        @self._client.event
        async def on_disconnect() -> None:
            if self._ready:
                logger.warning("Discord gateway disconnected; requests are refused until it reconnects")
            self._ready = False

    def _mark_ready(self) -> None:
        if not self._ever_ready:
            logger.info("Discord bot is ready!")
        elif not self._ready:
            logger.info("Discord gateway connection restored")
        self._ready = True
        self._ever_ready = True

    async def start(self) -> None:
        """Log in, open the gateway connection and wait until the client is ready."""
        if self._runner is not None:
            return

        try:
            logger.info("Logging in to Discord...")
            await self._client.login(self._token)

            logger.info("Starting Discord client...")
            self._runner = asyncio.create_task(self._client.connect(reconnect=True))

            logger.info("Waiting for Discord client to be ready...")
            await self._wait_until_ready()
        except BaseException:
            await self.close()
            raise

    async def _wait_until_ready(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._ready_timeout
        while not self._ready:
            if self._runner is not None and self._runner.done():
                # connect() only returns early on failure; surface it now
                exc = self._runner.exception()
                if exc is not None:
                    raise exc
                raise RuntimeError("Discord client stopped before becoming ready")
            if loop.time() >= deadline:
                raise ReadinessTimeoutError(self._ready_timeout)
            await asyncio.sleep(self._poll_interval)

    async def resolve_user(self, user_id: int) -> Optional[discord.User]:
        """Look a user up in the client cache, then over REST. Returns None if unknown."""
        self._ensure_ready()
        user = self._client.get_user(user_id)
        if user is not None:
            return user
        try:
            return await self._client.fetch_user(user_id)
        except discord.NotFound:
            return None

    async def send_text(self, user: discord.User, content: str) -> discord.Message:
        self._ensure_ready()
        return await user.send(content)

    async def send_embed(self, user: discord.User, embed: discord.Embed) -> discord.Message:
        self._ensure_ready()
        return await user.send(embed=embed)

    def _ensure_ready(self) -> None:
        if not self._ready:
            raise SessionNotReadyError()

    async def close(self) -> None:
        self._ready = False
        if not self._client.is_closed():
            await self._client.close()
        if self._runner is not None:
            runner, self._runner = self._runner, None
            try:
                await runner
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug(f"Discord connection task ended with: {e!r}")
