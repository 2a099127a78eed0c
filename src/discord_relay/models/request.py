"""
Inbound request models for the JSON body accepted by the relay endpoint.

Field names are matched case-insensitively: ``{"UserID": 1, "Target": "user"}``
parses the same as ``{"userId": 1, "target": "user"}``.
"""

from typing import Annotated, Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

UInt64 = Annotated[int, Field(strict=True, ge=0, le=2**64 - 1)]
UInt32 = Annotated[int, Field(strict=True, ge=0, le=2**32 - 1)]


class RelayModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Deserialization option: match incoming keys to field aliases by casefold.
    case_insensitive_keys: ClassVar[bool] = True

    @model_validator(mode="before")
    @classmethod
    def _fold_keys(cls, data: Any) -> Any:
        if not cls.case_insensitive_keys or not isinstance(data, dict):
            return data
        known = {}
        for name, field in cls.model_fields.items():
            key = field.alias or name
            known[key.casefold()] = key
        return {
            known.get(k.casefold(), k) if isinstance(k, str) else k: v
            for k, v in data.items()
        }


class EmbedField(RelayModel):
    name: str = ""
    value: str = ""
    inline: bool = False


class EmbedRequest(RelayModel):
    title: Optional[str] = None
    description: Optional[str] = None
    fields: Optional[list[EmbedField]] = None
    color: Optional[UInt32] = None  # packed 0xRRGGBB
    timestamp: Optional[str] = None  # ISO-8601


class MessageRequest(RelayModel):
    target: Optional[str] = None
    user_id: UInt64 = Field(alias="userId")
    message: Optional[str] = None
    embed: Optional[EmbedRequest] = None
