"""
Conversation data model and storage interface.

A conversation belongs to one profile (a user's membership in a tenant) and is
looked up scoped by tenant and profile so one tenant can never read another's.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class Conversation(BaseModel):
    """A single conversation session owned by a tenant profile."""

    id: str
    tenant_id: str
    profile_id: str
    title: str
    create_timestamp: int
    update_timestamp: int


class ConversationDatabase(ABC):
    """Abstract repository for 'Conversation' records."""

    @abstractmethod
    async def create_conversation(self, conversation: Conversation) -> Conversation:
        pass

    @abstractmethod
    async def get_conversation_by_id(self, tenant_id: str, profile_id: str, conversation_id: str) -> Conversation | None:
        pass

    @abstractmethod
    async def update_conversation(self, conversation: Conversation) -> Conversation:
        pass
