"""
Core LLM abstractions and message data models.

All concrete LLM backends ('OpenAILLM', 'GoogleLLM', 'AnthropicLLM') implement the
'StructuredLLM' ABC. The shared message format ('LLMMessage') is deliberately
backend-agnostic so the orchestrator never needs to know which provider is in use.

Generation is always structured: the caller passes a JSON schema and the backend
streams the raw JSON text of the object as it is produced. Parsing partial JSON
into partial objects is left to the caller so every backend stays a thin adapter
over its SDK.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class Roles(StrEnum):
    """Conversation roles as used by the chat completion APIs."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class LLMMessage(BaseModel):
    """A single message in a conversation sent to an LLM."""

    content: str = ""
    role: Roles = Roles.ASSISTANT


def split_system_messages(conversation: list[LLMMessage]) -> tuple[str, list[LLMMessage]]:
    """Join all system messages into one instruction string and return it with the remaining turns.

    Anthropic and Gemini take the system instruction as a separate request field
    rather than as a message, so both backends need this split.
    """
    system = "\n\n".join(message.content for message in conversation if message.role == Roles.SYSTEM)
    turns = [message for message in conversation if message.role != Roles.SYSTEM]
    return system, turns


class StructuredLLM(ABC):
    """
    Abstract base class for structured streaming generation.

    Concrete implementations adapt a specific provider SDK to a common
    interface. Each instance is bound to one model identifier.

    Attributes:
        model_name: Provider-side model identifier.
    """

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name

    @abstractmethod
    def stream_structured(
        self,
        conversation: list[LLMMessage],
        schema: dict[str, Any],
        temperature: float,
    ) -> AsyncIterator[str]:
        """Yield raw JSON text deltas of an object conforming to 'schema'."""
        pass
