"""
OpenAI backend using the official async SDK.

Structured output is requested through the 'json_schema' response format, so the
streamed content deltas are the JSON text of the object itself.
"""

from collections.abc import AsyncIterator
from typing import Any

from loguru import logger
from openai import AsyncOpenAI

from basechat.llms.base import LLMMessage, StructuredLLM


class OpenAILLM(StructuredLLM):
    def __init__(self, model_name: str, openai_api_key: str | None = None, client: AsyncOpenAI | None = None) -> None:
        super().__init__(model_name)
        self.client = client or AsyncOpenAI(api_key=openai_api_key)

    async def stream_structured(
        self,
        conversation: list[LLMMessage],
        schema: dict[str, Any],
        temperature: float,
    ) -> AsyncIterator[str]:
        logger.debug(f"OpenAI structured stream: model={self.model_name} messages={len(conversation)}")
        stream = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[{"role": message.role.value, "content": message.content} for message in conversation],  # type: ignore[misc]
            temperature=temperature,
            stream=True,
            response_format={
                "type": "json_schema",
                "json_schema": {"name": "response", "schema": schema, "strict": True},
            },
        )
        async for chunk in stream:
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content

    async def generate_text(self, conversation: list[LLMMessage], temperature: float = 0.0) -> str:
        """Return a single plain-text completion. Used for conversation naming."""
        response = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[{"role": message.role.value, "content": message.content} for message in conversation],  # type: ignore[misc]
            temperature=temperature,
        )
        return response.choices[0].message.content or ""
