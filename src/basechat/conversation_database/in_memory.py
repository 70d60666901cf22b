"""
In-memory repository implementations.

Records live in plain dicts keyed by id, so insertion order is creation order.
Useful for local development and tests; nothing survives a restart.
"""

from basechat.conversation_database.data_models.conversation import Conversation, ConversationDatabase
from basechat.conversation_database.data_models.message import Message, MessageDatabase
from basechat.conversation_database.data_models.tenant import Tenant, TenantDatabase


class InMemoryConversationDatabase(ConversationDatabase):
    def __init__(self) -> None:
        self.conversations: dict[str, Conversation] = {}

    async def create_conversation(self, conversation: Conversation) -> Conversation:
        self.conversations[conversation.id] = conversation
        return conversation

    async def get_conversation_by_id(self, tenant_id: str, profile_id: str, conversation_id: str) -> Conversation | None:
        conversation = self.conversations.get(conversation_id)
        if conversation is None or conversation.tenant_id != tenant_id or conversation.profile_id != profile_id:
            return None
        return conversation

    async def update_conversation(self, conversation: Conversation) -> Conversation:
        if conversation.id not in self.conversations:
            raise ValueError(f"Conversation with id {conversation.id} not found")
        self.conversations[conversation.id] = conversation
        return conversation


class InMemoryMessageDatabase(MessageDatabase):
    def __init__(self, conversation_db: InMemoryConversationDatabase) -> None:
        self.conversation_db = conversation_db
        self.messages: dict[str, Message] = {}

    async def create_message(self, message: Message) -> Message:
        self.messages[message.id] = message
        return message

    async def update_message_content(
        self,
        tenant_id: str,
        profile_id: str,
        conversation_id: str,
        message_id: str,
        content: str,
    ) -> None:
        conversation = await self.conversation_db.get_conversation_by_id(tenant_id, profile_id, conversation_id)
        message = self.messages.get(message_id)
        if conversation is None or message is None or message.tenant_id != tenant_id or message.conversation_id != conversation_id:
            raise ValueError(f"Message with id {message_id} not found in conversation {conversation_id}")
        self.messages[message_id] = message.model_copy(update={"content": content})

    async def get_messages_by_conversation_id(self, tenant_id: str, conversation_id: str) -> list[Message]:
        return [
            message
            for message in self.messages.values()
            if message.tenant_id == tenant_id and message.conversation_id == conversation_id
        ]

    async def get_message_by_id(self, message_id: str) -> Message | None:
        return self.messages.get(message_id)


class InMemoryTenantDatabase(TenantDatabase):
    def __init__(self) -> None:
        self.tenants: dict[str, Tenant] = {}

    async def create_tenant(self, tenant: Tenant) -> Tenant:
        self.tenants[tenant.id] = tenant
        return tenant

    async def get_tenant_by_id(self, tenant_id: str) -> Tenant | None:
        return self.tenants.get(tenant_id)

    async def get_tenant_by_slug(self, slug: str, exclude_tenant_id: str | None = None) -> Tenant | None:
        return next(
            (tenant for tenant in self.tenants.values() if tenant.slug == slug and tenant.id != exclude_tenant_id),
            None,
        )
