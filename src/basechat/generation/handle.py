"""
Live handle on a running structured generation.

'GenerationHandle' owns a background task that drains the provider stream. The
task forwards raw JSON deltas to a queue for the HTTP layer and, once the stream
ends, parses the accumulated text into the response schema and runs the
completion callback. Callers can:

    iterate the handle          - partial response objects as they grow,
    iterate 'text_stream()'     - the raw JSON deltas,
    await 'wait()'              - the terminal 'GenerationOutcome'.

The handle has a single consumer: either iteration style drains the same queue.
A provider error ends the stream and is re-raised to whoever is iterating;
'wait()' reports it in the outcome instead.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from enum import StrEnum
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_core import from_json

from basechat.generation.schemas import ConversationMessageResponse

_END = object()


class GenerationStatus(StrEnum):
    FINALIZED = "finalized"
    STUCK = "stuck"


class GenerationOutcome(BaseModel):
    """
    Terminal state of one generation.

    'STUCK' covers every way the message can be left pending: the provider
    failed, the timeout fired, or the stream ended without a valid object.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: GenerationStatus
    message_id: str
    content: str | None = None
    error: BaseException | None = None


def parse_response(text: str) -> ConversationMessageResponse | None:
    """Parse the complete stream text, or return None if it is not a valid response object."""
    try:
        return ConversationMessageResponse.model_validate_json(text)
    except ValidationError:
        return None


def parse_partial(text: str) -> dict[str, Any] | None:
    """Best-effort parse of an incomplete JSON object, including a trailing unterminated string."""
    try:
        value = from_json(text, allow_partial="trailing-strings")
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


class GenerationHandle:
    def __init__(
        self,
        message_id: str,
        deltas: AsyncIterator[str],
        on_finish: Callable[[ConversationMessageResponse], Awaitable[None]],
        timeout: float | None = None,
    ) -> None:
        self.message_id = message_id
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._error: BaseException | None = None
        self._task = asyncio.create_task(self._run(deltas, on_finish, timeout))

    async def _run(
        self,
        deltas: AsyncIterator[str],
        on_finish: Callable[[ConversationMessageResponse], Awaitable[None]],
        timeout: float | None,
    ) -> GenerationOutcome:
        text = ""
        try:
            async with asyncio.timeout(timeout):
                async for delta in deltas:
                    text += delta
                    self._queue.put_nowait(delta)
        except TimeoutError as exc:
            logger.warning(f"Generation for message {self.message_id} timed out after {timeout}s")
            self._error = exc
        except Exception as exc:
            logger.warning(f"Generation for message {self.message_id} failed: {exc!r}")
            self._error = exc
        finally:
            self._queue.put_nowait(_END)
            aclose = getattr(deltas, "aclose", None)
            if aclose is not None:
                await aclose()

        if self._error is not None:
            return GenerationOutcome(status=GenerationStatus.STUCK, message_id=self.message_id, error=self._error)

        response = parse_response(text)
        if response is None:
            logger.warning(f"Generation for message {self.message_id} finished without a structured object")
            return GenerationOutcome(status=GenerationStatus.STUCK, message_id=self.message_id)

        await on_finish(response)
        return GenerationOutcome(
            status=GenerationStatus.FINALIZED, message_id=self.message_id, content=response.message
        )

    async def text_stream(self) -> AsyncIterator[str]:
        while True:
            item = await self._queue.get()
            if item is _END:
                break
            yield item
        if self._error is not None:
            raise self._error

    async def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        text = ""
        last: dict[str, Any] | None = None
        async for delta in self.text_stream():
            text += delta
            partial = parse_partial(text)
            if partial is not None and partial != last:
                last = partial
                yield partial

    async def wait(self) -> GenerationOutcome:
        return await self._task

    def done(self) -> bool:
        return self._task.done()
