"""
Inbound HTTP surface: one catch-all route that relays a JSON request to Discord.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from discord_relay.relay import RelayContext, RelayHandler
from discord_relay.transport.gateway import DiscordSession

logger = logging.getLogger(__name__)


def json_message(status_code: int, message: str) -> JSONResponse:
    """Write ``{"message": ...}`` with the given status code."""
    return JSONResponse(status_code=status_code, content={"message": message})


def create_app(session: DiscordSession, manage_session: bool = True) -> FastAPI:
    """Build the relay application around ``session``.

    With ``manage_session`` the app lifespan starts the session, blocking
    until Discord is ready, and closes it on shutdown.
    """
    context = RelayContext(session=session)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if manage_session:
            await session.start()
        logger.info("Relay accepting requests")
        try:
            yield
        finally:
            if manage_session:
                await session.close()

    app = FastAPI(
        title="discord-relay",
        description="Relays JSON requests to Discord users as direct messages",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.relay = RelayHandler(context)

    async def relay(request: Request) -> JSONResponse:
        body = await request.body()
        result = await request.app.state.relay.handle(request.method, body)
        return json_message(result.status, result.message)

    # no method filter: every method goes through the handler's 503/405 checks
    app.add_route("/{path:path}", relay, include_in_schema=False)
    return app
