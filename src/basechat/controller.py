"""
Chat controller (Facade).

'ChatController' is the single entry point for the application logic behind the
HTTP routes. It coordinates the tenant, conversation and message repositories,
the retriever and the generation orchestrator to handle one conversation turn:

    'process_new_message_stream' - stores the user's message, retrieves sources
                                   from the tenant's partition, assembles the
                                   grounding and system prompts and starts the
                                   generation. Returns the live handle and the
                                   pending assistant message id.
    'name_conversation'          - titles a new conversation from its first message.
    'check_slug_available'       - tenant slug uniqueness, excluding the tenant itself.
"""

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from basechat.conversation_database.data_models.conversation import Conversation, ConversationDatabase
from basechat.conversation_database.data_models.message import Message, MessageDatabase
from basechat.conversation_database.data_models.tenant import TenantDatabase
from basechat.generation.handle import GenerationHandle
from basechat.generation.orchestrator import GenerationOrchestrator
from basechat.generation.schemas import GenerateContext
from basechat.llms.base import LLMMessage, Roles
from basechat.llms.openai import OpenAILLM
from basechat.llms.registry import ModelRegistry
from basechat.prompts.renderer import Company, GroundingPromptContext, render_grounding_prompt
from basechat.retriever.base import Retriever
from basechat.utils.database import generate_uid
from basechat.utils.retriever import build_retrieval_system_prompt
from basechat.utils.time import get_current_timestamp

DEFAULT_CONVERSATION_TITLE = "New conversation"

NAMING_PROMPT = (
    "Create a short title, at most six words, for a conversation that starts with the user's message. "
    "Reply with the title only, without quotes or trailing punctuation."
)


class MessageInput(BaseModel):
    content: str = Field(min_length=1)
    model: str | None = None


class SlugCheckInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    slug: str = Field(min_length=1)
    tenant_id: str | None = Field(default=None, alias="tenantId")


class ChatController:
    def __init__(
        self,
        tenant_db: TenantDatabase,
        conversation_db: ConversationDatabase,
        message_db: MessageDatabase,
        retriever: Retriever,
        orchestrator: GenerationOrchestrator,
        registry: ModelRegistry,
        naming_llm: OpenAILLM | None = None,
    ):
        self.tenant_db = tenant_db
        self.conversation_db = conversation_db
        self.message_db = message_db
        self.retriever = retriever
        self.orchestrator = orchestrator
        self.registry = registry
        self.naming_llm = naming_llm

    async def check_slug_available(self, slug: str, tenant_id: str | None = None) -> bool:
        existing = await self.tenant_db.get_tenant_by_slug(slug, exclude_tenant_id=tenant_id)
        return existing is None

    async def create_conversation(self, tenant_id: str, profile_id: str) -> Conversation:
        create_time = get_current_timestamp()
        return await self.conversation_db.create_conversation(
            Conversation(
                id=generate_uid(),
                tenant_id=tenant_id,
                profile_id=profile_id,
                title=DEFAULT_CONVERSATION_TITLE,
                create_timestamp=create_time,
                update_timestamp=create_time,
            )
        )

    async def get_conversation(self, tenant_id: str, profile_id: str, conversation_id: str) -> Conversation:
        conversation = await self.conversation_db.get_conversation_by_id(tenant_id, profile_id, conversation_id)
        if conversation is None:
            raise ValueError(f"Conversation with id {conversation_id} not found")
        return conversation

    async def get_messages(self, tenant_id: str, profile_id: str, conversation_id: str) -> list[Message]:
        conversation = await self.get_conversation(tenant_id, profile_id, conversation_id)
        return await self.message_db.get_messages_by_conversation_id(tenant_id, conversation.id)

    async def process_new_message_stream(
        self,
        tenant_id: str,
        profile_id: str,
        conversation_id: str,
        user_input: MessageInput,
    ) -> tuple[GenerationHandle, str]:
        tenant = await self.tenant_db.get_tenant_by_id(tenant_id)
        if tenant is None:
            raise ValueError(f"Tenant with id {tenant_id} not found")
        conversation = await self.get_conversation(tenant_id, profile_id, conversation_id)

        history = await self.message_db.get_messages_by_conversation_id(tenant_id, conversation.id)
        await self.message_db.create_message(
            Message(
                id=generate_uid(),
                tenant_id=tenant_id,
                conversation_id=conversation.id,
                role=Roles.USER,
                content=user_input.content,
                create_timestamp=get_current_timestamp(),
            )
        )

        grounding_prompt = render_grounding_prompt(
            GroundingPromptContext(company=Company(name=tenant.name)), tenant.grounding_prompt
        )
        system_prompt, sources = await build_retrieval_system_prompt(self.retriever, tenant, user_input.content)

        # Pending assistant turns from earlier generations carry no content
        messages = [
            LLMMessage(role=Roles.SYSTEM, content=grounding_prompt),
            LLMMessage(role=Roles.SYSTEM, content=system_prompt),
            *[LLMMessage(role=message.role, content=message.content) for message in history if message.content is not None],
            LLMMessage(role=Roles.USER, content=user_input.content),
        ]

        return await self.orchestrator.generate(
            tenant_id,
            profile_id,
            conversation.id,
            GenerateContext(messages=messages, sources=sources, model=user_input.model or self.registry.default_model),
        )

    async def name_conversation(self, tenant_id: str, profile_id: str, conversation_id: str, first_message: str) -> Conversation:
        conversation = await self.get_conversation(tenant_id, profile_id, conversation_id)
        if self.naming_llm is None:
            logger.debug(f"No naming model configured, keeping title of conversation {conversation_id}")
            return conversation

        title = await self.naming_llm.generate_text(
            [
                LLMMessage(role=Roles.SYSTEM, content=NAMING_PROMPT),
                LLMMessage(role=Roles.USER, content=first_message),
            ]
        )
        title = title.strip().strip('"').strip() or DEFAULT_CONVERSATION_TITLE
        logger.info(f"Named conversation {conversation_id}: {title!r}")
        return await self.conversation_db.update_conversation(
            conversation.model_copy(update={"title": title[:100], "update_timestamp": get_current_timestamp()})
        )
