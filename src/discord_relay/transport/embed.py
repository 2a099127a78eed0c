"""
Embed construction from an EmbedRequest.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import discord

from discord_relay.models.request import EmbedRequest

logger = logging.getLogger(__name__)


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp. Returns None if unparsable; naive values are UTC."""
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_embed(spec: EmbedRequest) -> discord.Embed:
    """Build the outbound embed. Empty title/description and bad timestamps are skipped."""
    embed = discord.Embed()

    if spec.title:
        embed.title = spec.title
        logger.debug(f"Added title: {spec.title}")

    if spec.description:
        embed.description = spec.description
        logger.debug(f"Added description: {spec.description}")

    if spec.color is not None:
        embed.colour = discord.Colour(spec.color)
        logger.debug(f"Added color: {spec.color}")

    if spec.timestamp:
        timestamp = parse_timestamp(spec.timestamp)
        if timestamp is not None:
            embed.timestamp = timestamp
            logger.debug(f"Added timestamp: {timestamp.isoformat()}")
        else:
            logger.debug(f"Skipped unparsable timestamp: {spec.timestamp!r}")

    for field in spec.fields or []:
        embed.add_field(name=field.name, value=field.value, inline=field.inline)
        logger.debug(f"Added field - Name: {field.name}, Value: {field.value}, Inline: {field.inline}")

    return embed
