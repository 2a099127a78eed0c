"""Shared fakes: an in-memory Discord session and a stand-in gateway client."""

import asyncio
from types import SimpleNamespace
from typing import Any, Optional

import discord
import pytest


class FakeUser:
    def __init__(self, user_id: int, name: str = "someone"):
        self.id = user_id
        self.name = name


class FakeSession:
    """Duck-typed DiscordSession recording every outbound send."""

    def __init__(self, ready: bool = True, users: Optional[dict[int, FakeUser]] = None):
        self.ready = ready
        self.users = users if users is not None else {}
        self.sent: list[tuple[FakeUser, str, Any]] = []
        self.send_error: Optional[Exception] = None
        self.started = 0
        self.closed = 0

    async def start(self) -> None:
        self.started += 1
        self.ready = True

    async def close(self) -> None:
        self.closed += 1
        self.ready = False

    async def resolve_user(self, user_id: int) -> Optional[FakeUser]:
        return self.users.get(user_id)

    async def send_text(self, user: FakeUser, content: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((user, "text", content))

    async def send_embed(self, user: FakeUser, embed: discord.Embed) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((user, "embed", embed))


def not_found() -> discord.NotFound:
    return discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown User")


class FakeDiscordClient:
    """Implements the slice of discord.Client that DiscordSession drives."""

    def __init__(self, ready_after: Optional[float] = 0.0, fail: Optional[BaseException] = None):
        self.ready_after = ready_after
        self.fail = fail
        self.handlers: dict[str, Any] = {}
        self.token: Optional[str] = None
        self.cache: dict[int, FakeUser] = {}
        self.remote: dict[int, FakeUser] = {}
        self.fetches: list[int] = []
        self._closed = False
        self._stop: Optional[asyncio.Event] = None

    def event(self, coro):
        self.handlers[coro.__name__] = coro
        return coro

    async def login(self, token: str) -> None:
        self.token = token

    async def connect(self, reconnect: bool = True) -> None:
        self._stop = asyncio.Event()
        if self.fail is not None:
            raise self.fail
        if self.ready_after is not None:
            await asyncio.sleep(self.ready_after)
            await self.handlers["on_ready"]()
        await self._stop.wait()

    async def close(self) -> None:
        self._closed = True
        if self._stop is not None:
            self._stop.set()

    def is_closed(self) -> bool:
        return self._closed

    def get_user(self, user_id: int) -> Optional[FakeUser]:
        return self.cache.get(user_id)

    async def fetch_user(self, user_id: int) -> FakeUser:
        self.fetches.append(user_id)
        if user_id in self.remote:
            return self.remote[user_id]
        raise not_found()


USER_ID = 123456789012345678


@pytest.fixture
def user() -> FakeUser:
    return FakeUser(USER_ID, name="alice")


@pytest.fixture
def session(user: FakeUser) -> FakeSession:
    return FakeSession(ready=True, users={user.id: user})
