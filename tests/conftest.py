import asyncio
from collections.abc import AsyncIterator
from typing import Any

import pytest

from basechat.controller import ChatController
from basechat.conversation_database.data_models.conversation import Conversation
from basechat.conversation_database.data_models.tenant import Tenant
from basechat.conversation_database.in_memory import (
    InMemoryConversationDatabase,
    InMemoryMessageDatabase,
    InMemoryTenantDatabase,
)
from basechat.generation.orchestrator import GenerationOrchestrator
from basechat.llms.base import LLMMessage, StructuredLLM
from basechat.llms.registry import ModelRegistry, Provider
from basechat.retriever.base import RetrievalResult, Retriever, ScoredChunk, SourceRecord

TENANT_ID = "tenant-1"
PROFILE_ID = "profile-1"
CONVERSATION_ID = "conversation-1"


class FakeLLM(StructuredLLM):
    """Streams a fixed list of JSON deltas and records every call."""

    def __init__(
        self,
        model_name: str,
        provider: Provider,
        chunks: list[str],
        message_db: InMemoryMessageDatabase | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        super().__init__(model_name)
        self.provider = provider
        self.chunks = chunks
        self.message_db = message_db
        self.error = error
        self.delay = delay
        self.calls: list[dict[str, Any]] = []
        self.pending_seen_at_start: bool | None = None

    async def stream_structured(
        self,
        conversation: list[LLMMessage],
        schema: dict[str, Any],
        temperature: float,
    ) -> AsyncIterator[str]:
        self.calls.append({"conversation": conversation, "schema": schema, "temperature": temperature})
        if self.message_db is not None:
            self.pending_seen_at_start = any(message.is_pending for message in self.message_db.messages.values())
        for chunk in self.chunks:
            if self.delay:
                await asyncio.sleep(self.delay)
            yield chunk
        if self.error is not None:
            raise self.error


class RecordingMessageDatabase(InMemoryMessageDatabase):
    def __init__(self, conversation_db: InMemoryConversationDatabase) -> None:
        super().__init__(conversation_db)
        self.updates: list[tuple[str, str, str, str, str]] = []

    async def update_message_content(
        self,
        tenant_id: str,
        profile_id: str,
        conversation_id: str,
        message_id: str,
        content: str,
    ) -> None:
        self.updates.append((tenant_id, profile_id, conversation_id, message_id, content))
        await super().update_message_content(tenant_id, profile_id, conversation_id, message_id, content)


class FakeRetriever(Retriever):
    def __init__(self, result: RetrievalResult) -> None:
        super().__init__(top_k=6)
        self.result = result
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def retrieve(self, partition: str, query: str) -> RetrievalResult:
        self.calls.append((partition, query))
        return self.result

    async def close(self) -> None:
        self.closed = True


class LLMProvider:
    """Hands out 'FakeLLM's from the registry and remembers them."""

    def __init__(self, message_db: InMemoryMessageDatabase) -> None:
        self.message_db = message_db
        self.chunks: list[str] = ['{"mess', 'age": "Hel', 'lo"}']
        self.error: Exception | None = None
        self.delay = 0.0
        self.created: list[FakeLLM] = []

    def factory(self, provider: Provider):
        def build(model_name: str) -> FakeLLM:
            llm = FakeLLM(model_name, provider, self.chunks, self.message_db, self.error, self.delay)
            self.created.append(llm)
            return llm

        return build


@pytest.fixture
def conversation_db() -> InMemoryConversationDatabase:
    db = InMemoryConversationDatabase()
    db.conversations[CONVERSATION_ID] = Conversation(
        id=CONVERSATION_ID,
        tenant_id=TENANT_ID,
        profile_id=PROFILE_ID,
        title="New conversation",
        create_timestamp=1,
        update_timestamp=1,
    )
    return db


@pytest.fixture
def message_db(conversation_db: InMemoryConversationDatabase) -> RecordingMessageDatabase:
    return RecordingMessageDatabase(conversation_db)


@pytest.fixture
def tenant_db() -> InMemoryTenantDatabase:
    db = InMemoryTenantDatabase()
    db.tenants[TENANT_ID] = Tenant(id=TENANT_ID, name="Acme", slug="acme")
    return db


@pytest.fixture
def llms(message_db: RecordingMessageDatabase) -> LLMProvider:
    return LLMProvider(message_db)


@pytest.fixture
def registry(llms: LLMProvider) -> ModelRegistry:
    return ModelRegistry(llm_factories={provider: llms.factory(provider) for provider in Provider})


@pytest.fixture
def orchestrator(registry: ModelRegistry, message_db: RecordingMessageDatabase) -> GenerationOrchestrator:
    return GenerationOrchestrator(registry, message_db)


@pytest.fixture
def retrieval_result() -> RetrievalResult:
    raw = {
        "scored_chunks": [
            {
                "text": "Pallets are FSC certified.",
                "score": 0.91,
                "document_id": "doc-1",
                "document_name": "pallets.pdf",
                "document_metadata": {"page": 3},
            }
        ]
    }
    chunks = [ScoredChunk.model_validate(chunk) for chunk in raw["scored_chunks"]]
    return RetrievalResult(scored_chunks=chunks, sources=[SourceRecord.from_chunk(c) for c in chunks], raw=raw)


@pytest.fixture
def retriever(retrieval_result: RetrievalResult) -> FakeRetriever:
    return FakeRetriever(retrieval_result)


@pytest.fixture
def controller(
    tenant_db: InMemoryTenantDatabase,
    conversation_db: InMemoryConversationDatabase,
    message_db: RecordingMessageDatabase,
    retriever: FakeRetriever,
    orchestrator: GenerationOrchestrator,
    registry: ModelRegistry,
) -> ChatController:
    return ChatController(
        tenant_db=tenant_db,
        conversation_db=conversation_db,
        message_db=message_db,
        retriever=retriever,
        orchestrator=orchestrator,
        registry=registry,
    )
