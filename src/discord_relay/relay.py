"""
Request handling. Validates an inbound relay request and delivers it as a DM.

Each call of :meth:`RelayHandler.handle` is independent; the only shared
state is the read-only :class:`RelayContext`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from pydantic import ValidationError

from discord_relay.models.request import MessageRequest
from discord_relay.transport.embed import build_embed

if TYPE_CHECKING:
    from discord_relay.transport.gateway import DiscordSession

logger = logging.getLogger(__name__)

SUPPORTED_TARGET = "user"


class RelayResult(NamedTuple):
    status: int
    message: str


NOT_READY = RelayResult(503, "Discord client is not ready")
METHOD_NOT_ALLOWED = RelayResult(405, "Method not allowed")
INVALID_REQUEST = RelayResult(400, "Invalid request format")
USER_NOT_FOUND = RelayResult(404, "User not found")
NOTHING_TO_SEND = RelayResult(400, "Either 'message' or 'embed' must be provided")
SENT = RelayResult(200, "Message sent successfully")


@dataclass(frozen=True)
class RelayContext:
    """Process-wide state shared by every request, fixed at startup."""

    session: DiscordSession


class RelayHandler:
    def __init__(self, context: RelayContext):
        self._context = context

    @property
    def session(self) -> DiscordSession:
        return self._context.session

    async def handle(self, method: str, body: bytes) -> RelayResult:
        """Process one HTTP request and return the status to report."""
        if not self.session.ready:
            return NOT_READY

        if method.upper() != "POST":
            return METHOD_NOT_ALLOWED

        try:
            return await self._relay(body)
        except Exception as e:
            logger.exception(f"Error relaying message: {e}")
            return RelayResult(500, f"Error: {e}")

    async def _relay(self, body: bytes) -> RelayResult:
        text = body.decode("utf-8", errors="replace")
        logger.info(f"Received request body: {text}")

        request = parse_request(text)
        if request is None:
            return INVALID_REQUEST

        logger.info(f"Parsed request - Target: {request.target}, UserId: {request.user_id}")
        logger.debug(f"Embed present: {request.embed is not None}")

        if not request.target or request.target.lower() != SUPPORTED_TARGET:
            return RelayResult(
                400,
                f"Only '{SUPPORTED_TARGET}' target is supported at this time. "
                f"Received target: '{request.target or ''}'",
            )

        user = await self.session.resolve_user(request.user_id)
        if user is None:
            return USER_NOT_FOUND
        logger.info(f"Found user: {user.name}")

        if request.embed is not None:
            embed = build_embed(request.embed)
            logger.info("Sending message with embed...")
            await self.session.send_embed(user, embed)
        elif request.message:
            logger.info(f"Sending regular message: {request.message}")
            await self.session.send_text(user, request.message)
        else:
            return NOTHING_TO_SEND

        return SENT


def parse_request(text: str) -> MessageRequest | None:
    """Parse a JSON request body. Returns None for malformed or null bodies."""
    try:
        return MessageRequest.model_validate_json(text)
    except ValidationError as e:
        logger.info(f"Rejected request body: {e.error_count()} validation error(s)")
        return None
