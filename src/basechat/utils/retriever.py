from basechat.conversation_database.data_models.tenant import Tenant
from basechat.prompts.renderer import Company, SystemPromptContext, render_system_prompt
from basechat.retriever.base import Retriever, SourceRecord


async def build_retrieval_system_prompt(retriever: Retriever, tenant: Tenant, query: str) -> tuple[str, list[SourceRecord]]:
    """
    Retrieve chunks for 'query' from the tenant's partition and render the system prompt around them.

    Parameters:
    - retriever: The retriever to query. Errors from the retrieval service propagate.
    - tenant: Supplies the partition (its id), the company name and the optional prompt override.
    - query: The user's latest message.

    Returns:
    - The rendered system prompt and the source records for citation display.
    """
    result = await retriever.retrieve(tenant.id, query)
    content = render_system_prompt(
        SystemPromptContext(company=Company(name=tenant.name), chunks=result.serialize()),
        tenant.system_prompt,
    )
    return content, result.sources
