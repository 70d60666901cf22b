"""
Google Gemini backend using the 'google-genai' SDK.

Gemini accepts a response schema directly; with 'application/json' as the
response MIME type the streamed text is the JSON object itself.
"""

from collections.abc import AsyncIterator
from typing import Any

from google import genai
from google.genai import types
from loguru import logger

from basechat.llms.base import LLMMessage, Roles, StructuredLLM, split_system_messages


class GoogleLLM(StructuredLLM):
    def __init__(self, model_name: str, google_api_key: str | None = None, client: genai.Client | None = None) -> None:
        super().__init__(model_name)
        self.client = client or genai.Client(api_key=google_api_key)

    @staticmethod
    def _to_contents(turns: list[LLMMessage]) -> list[types.Content]:
        # Gemini names the assistant role "model"
        return [
            types.Content(
                role="model" if message.role == Roles.ASSISTANT else "user",
                parts=[types.Part(text=message.content)],
            )
            for message in turns
        ]

    async def stream_structured(
        self,
        conversation: list[LLMMessage],
        schema: dict[str, Any],
        temperature: float,
    ) -> AsyncIterator[str]:
        system, turns = split_system_messages(conversation)
        logger.debug(f"Gemini structured stream: model={self.model_name} messages={len(turns)}")
        stream = await self.client.aio.models.generate_content_stream(
            model=self.model_name,
            contents=self._to_contents(turns),
            config=types.GenerateContentConfig(
                system_instruction=system or None,
                temperature=temperature,
                response_mime_type="application/json",
                response_json_schema=schema,
            ),
        )
        async for chunk in stream:
            if chunk.text:
                yield chunk.text
