"""
Generation orchestrator.

'GenerationOrchestrator.generate' turns a prepared 'GenerateContext' into a live
'GenerationHandle'. The order of operations matters:

1. Resolve the provider for the requested model and build its backend. An
   unknown model falls back to the registry's default provider; the request is
   never rejected for it. A provider with no backend raises before anything is
   written.
2. Persist the pending assistant message (content None) before the provider is
   contacted, so the client gets a stable id for its placeholder turn at once.
3. Start the structured stream in the background and return immediately.
4. When the stream ends with a valid object, write its 'message' back to the
   pending message, scoped by tenant, profile and conversation. A stream that
   ends without an object leaves the message pending.

Concurrent calls are independent: each creates its own message and nothing
serialises two generations for the same conversation.
"""

from loguru import logger

from basechat.conversation_database.data_models.message import Message, MessageDatabase
from basechat.generation.handle import GenerationHandle
from basechat.generation.schemas import ConversationMessageResponse, GenerateContext, response_json_schema
from basechat.llms.base import Roles
from basechat.llms.registry import ModelRegistry, Provider
from basechat.utils.database import generate_uid
from basechat.utils.time import get_current_timestamp

DEFAULT_TEMPERATURE = 0.3


class GenerationOrchestrator:
    """
    Attributes:
        registry: Resolves models to providers and builds the provider backend.
        message_db: Where pending and finalized assistant messages are written.
        temperature: Sampling temperature for every generation.
        timeout: Seconds before an unfinished stream is abandoned; None never gives up.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        message_db: MessageDatabase,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float | None = None,
    ) -> None:
        self.registry = registry
        self.message_db = message_db
        self.temperature = temperature
        self.timeout = timeout

    def resolve_provider(self, model: str) -> Provider:
        provider = self.registry.resolve_provider(model)
        if provider is None:
            logger.warning(f"Provider not found for model {model}, using {self.registry.default_provider}")
            provider = self.registry.default_provider
        return provider

    async def generate(
        self,
        tenant_id: str,
        profile_id: str,
        conversation_id: str,
        context: GenerateContext,
    ) -> tuple[GenerationHandle, str]:
        provider = self.resolve_provider(context.model)
        llm = self.registry.llm_for(provider, context.model)

        pending_message = await self.message_db.create_message(
            Message(
                id=generate_uid(),
                tenant_id=tenant_id,
                conversation_id=conversation_id,
                role=Roles.ASSISTANT,
                content=None,
                create_timestamp=get_current_timestamp(),
                sources=context.sources,
                model=context.model,
                provider=provider.value,
            )
        )

        deltas = llm.stream_structured(context.messages, response_json_schema(), self.temperature)

        async def on_finish(response: ConversationMessageResponse) -> None:
            await self.message_db.update_message_content(
                tenant_id,
                profile_id,
                conversation_id,
                pending_message.id,
                response.message,
            )

        logger.info(
            f"Generating message {pending_message.id} with {provider}/{context.model} "
            f"({len(context.messages)} messages, {len(context.sources)} sources)"
        )
        handle = GenerationHandle(pending_message.id, deltas, on_finish, timeout=self.timeout)
        return handle, pending_message.id
