"""
Message data model and storage interface.

An assistant message is created with 'content=None' before generation starts so
the client can render a placeholder turn and correlate streamed updates with a
stable id. It is finalized by 'update_message_content' once the structured
response is complete. A message whose generation never completes keeps
'content=None' forever.

'update_message_content' is scoped by tenant, profile and conversation together:
implementations must only touch a row that matches all three.

Concrete implementations: 'InMemoryMessageDatabase'.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from basechat.llms.base import Roles
from basechat.retriever.base import SourceRecord


class Message(BaseModel):
    """
    A single turn within a conversation.

    'model' and 'provider' are set on assistant messages only.
    """

    id: str
    tenant_id: str
    conversation_id: str
    role: Roles
    content: str | None
    create_timestamp: int
    sources: list[SourceRecord] = Field(default_factory=list)
    model: str | None = None
    provider: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.role == Roles.ASSISTANT and self.content is None


class MessageDatabase(ABC):
    """Abstract repository for 'Message' records."""

    @abstractmethod
    async def create_message(self, message: Message) -> Message:
        pass

    @abstractmethod
    async def update_message_content(
        self,
        tenant_id: str,
        profile_id: str,
        conversation_id: str,
        message_id: str,
        content: str,
    ) -> None:
        pass

    @abstractmethod
    async def get_messages_by_conversation_id(self, tenant_id: str, conversation_id: str) -> list[Message]:
        pass

    @abstractmethod
    async def get_message_by_id(self, message_id: str) -> Message | None:
        pass
