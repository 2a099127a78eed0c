from discord_relay.models.request import EmbedField, EmbedRequest, MessageRequest, RelayModel

__all__ = ["EmbedField", "EmbedRequest", "MessageRequest", "RelayModel"]
