from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from basechat.llms.base import LLMMessage
from basechat.retriever.base import SourceRecord


class ConversationMessageResponse(BaseModel):
    """
    The structured object every provider must produce.

    Providers are asked for exactly this shape, but extra keys in a finished
    object are dropped rather than rejected so a usable answer still finalizes.
    """

    model_config = ConfigDict(extra="ignore", json_schema_extra={"additionalProperties": False})

    message: str


def response_json_schema() -> dict[str, Any]:
    return ConversationMessageResponse.model_json_schema()


class GenerateContext(BaseModel):
    """Everything a single generation call needs. Not persisted."""

    messages: list[LLMMessage]
    sources: list[SourceRecord] = Field(default_factory=list)
    model: str
