"""
Anthropic backend using the official async SDK.

Claude has no JSON response format, so structured output is obtained by forcing a
single tool call whose input schema is the response schema. The tool input is
streamed as 'input_json_delta' events carrying partial JSON text.
"""

from collections.abc import AsyncIterator
from typing import Any

from anthropic import NOT_GIVEN, AsyncAnthropic
from loguru import logger

from basechat.llms.base import LLMMessage, StructuredLLM, split_system_messages

RESPONSE_TOOL_NAME = "respond"


class AnthropicLLM(StructuredLLM):
    def __init__(
        self,
        model_name: str,
        anthropic_api_key: str | None = None,
        max_tokens: int = 4096,
        client: AsyncAnthropic | None = None,
    ) -> None:
        super().__init__(model_name)
        self.max_tokens = max_tokens
        self.client = client or AsyncAnthropic(api_key=anthropic_api_key)

    async def stream_structured(
        self,
        conversation: list[LLMMessage],
        schema: dict[str, Any],
        temperature: float,
    ) -> AsyncIterator[str]:
        system, turns = split_system_messages(conversation)
        logger.debug(f"Anthropic structured stream: model={self.model_name} messages={len(turns)}")
        async with self.client.messages.stream(
            model=self.model_name,
            max_tokens=self.max_tokens,
            system=system or NOT_GIVEN,
            messages=[{"role": message.role.value, "content": message.content} for message in turns],  # type: ignore[misc]
            temperature=temperature,
            tools=[
                {
                    "name": RESPONSE_TOOL_NAME,
                    "description": "Reply to the user with the structured response.",
                    "input_schema": schema,
                }
            ],
            tool_choice={"type": "tool", "name": RESPONSE_TOOL_NAME},
        ) as stream:
            async for event in stream:
                if event.type == "content_block_delta" and event.delta.type == "input_json_delta":
                    yield event.delta.partial_json
