"""
Wiring of the application from settings.

'build_llm' maps a provider to its backend and is what the model registry uses
to dispatch a resolved provider. 'build_controller' assembles the full object
graph once at start-up; everything downstream receives its collaborators by
reference.
"""

from functools import partial

from loguru import logger

from basechat.controller import ChatController
from basechat.conversation_database.data_models.conversation import ConversationDatabase
from basechat.conversation_database.data_models.message import MessageDatabase
from basechat.conversation_database.data_models.tenant import TenantDatabase
from basechat.conversation_database.in_memory import (
    InMemoryConversationDatabase,
    InMemoryMessageDatabase,
    InMemoryTenantDatabase,
)
from basechat.generation.orchestrator import GenerationOrchestrator
from basechat.llms.anthropic import AnthropicLLM
from basechat.llms.base import StructuredLLM
from basechat.llms.google import GoogleLLM
from basechat.llms.openai import OpenAILLM
from basechat.llms.registry import ModelRegistry, Provider
from basechat.retriever.ragie import RagieRetriever
from basechat.settings import Settings


def build_llm(provider: Provider, model_name: str, settings: Settings) -> StructuredLLM:
    """Instantiate the backend for 'provider' bound to 'model_name'."""
    match provider:
        case Provider.OPENAI:
            return OpenAILLM(model_name=model_name, openai_api_key=settings.openai_api_key)
        case Provider.GOOGLE:
            return GoogleLLM(model_name=model_name, google_api_key=settings.google_api_key)
        case Provider.ANTHROPIC:
            return AnthropicLLM(
                model_name=model_name,
                anthropic_api_key=settings.anthropic_api_key,
                max_tokens=settings.anthropic_max_tokens,
            )
        case _:
            raise ValueError(f"Unsupported provider {provider!r}")


def build_registry(settings: Settings) -> ModelRegistry:
    return ModelRegistry(
        llm_factories={provider: partial(build_llm, provider, settings=settings) for provider in Provider},
    )


def build_controller(
    settings: Settings,
    tenant_db: TenantDatabase | None = None,
    conversation_db: ConversationDatabase | None = None,
    message_db: MessageDatabase | None = None,
) -> ChatController:
    """Assemble the controller. Repositories default to the in-memory implementations."""
    if conversation_db is None:
        conversation_db = InMemoryConversationDatabase()
    if message_db is None:
        if not isinstance(conversation_db, InMemoryConversationDatabase):
            raise ValueError("A message database is required when a custom conversation database is used")
        message_db = InMemoryMessageDatabase(conversation_db)
    registry = build_registry(settings)
    retriever = RagieRetriever(
        api_key=settings.ragie_api_key,
        base_url=settings.ragie_api_url,
        top_k=settings.retrieval_top_k,
        rerank=settings.retrieval_rerank,
        timeout=settings.retrieval_timeout,
    )
    orchestrator = GenerationOrchestrator(
        registry,
        message_db,
        temperature=settings.generation_temperature,
        timeout=settings.generation_timeout,
    )
    logger.info(
        f"{settings.app_name}: {len(registry.list_models())} models, default {registry.default_provider}/{registry.default_model}"
    )
    return ChatController(
        tenant_db=tenant_db or InMemoryTenantDatabase(),
        conversation_db=conversation_db,
        message_db=message_db,
        retriever=retriever,
        orchestrator=orchestrator,
        registry=registry,
        naming_llm=OpenAILLM(model_name=registry.default_naming_model, openai_api_key=settings.openai_api_key),
    )
