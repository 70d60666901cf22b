"""
FastAPI application.

Routes are thin: they validate the request, delegate to 'ChatController' and
shape the response. The conversation message route streams newline-delimited
JSON, one partial response object per line, and returns the pending assistant
message id in the 'X-Message-Id' header so the client can correlate the stream
with the stored turn.
"""

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import BackgroundTasks, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse, StreamingResponse
from loguru import logger
from pydantic import ValidationError

from basechat.controller import DEFAULT_CONVERSATION_TITLE, ChatController, MessageInput, SlugCheckInput
from basechat.generation.handle import GenerationHandle


async def _ndjson(handle: GenerationHandle) -> AsyncIterator[bytes]:
    async for partial in handle:
        yield (json.dumps(partial) + "\n").encode("utf-8")
    # Close the response only once the message has been written back
    await handle.wait()


def create_app(controller: ChatController) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await controller.retriever.close()
        logger.info("Retriever closed")

    app = FastAPI(title="basechat", lifespan=lifespan)
    app.state.controller = controller

    @app.post("/api/tenants/check-slug")
    async def check_slug(request: Request) -> JSONResponse:
        try:
            body = SlugCheckInput.model_validate(await request.json())
            available = await controller.check_slug_available(body.slug, body.tenant_id)
        except ValidationError as exc:
            return JSONResponse(
                {"error": "Invalid request body", "details": exc.errors(include_url=False, include_context=False)},
                status_code=400,
            )
        except Exception:
            logger.exception("Slug check failed")
            return JSONResponse({"error": "Internal server error"}, status_code=500)
        return JSONResponse({"available": available})

    @app.get("/api/models")
    async def list_models() -> dict[str, Any]:
        registry = controller.registry
        return {
            "models": [descriptor.model_dump() for descriptor in registry.list_models()],
            "default_model": registry.default_model,
            "default_provider": registry.default_provider,
            "default_naming_model": registry.default_naming_model,
        }

    @app.post("/api/conversations")
    async def create_conversation(
        x_tenant_id: str = Header(),
        x_profile_id: str = Header(),
    ) -> dict[str, Any]:
        conversation = await controller.create_conversation(x_tenant_id, x_profile_id)
        return conversation.model_dump()

    @app.get("/api/conversations/{conversation_id}/messages")
    async def get_messages(
        conversation_id: str,
        x_tenant_id: str = Header(),
        x_profile_id: str = Header(),
    ) -> list[dict[str, Any]]:
        try:
            messages = await controller.get_messages(x_tenant_id, x_profile_id, conversation_id)
        except ValueError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return [message.model_dump() for message in messages]

    @app.post("/api/conversations/{conversation_id}/messages")
    async def post_message(
        conversation_id: str,
        user_input: MessageInput,
        background_tasks: BackgroundTasks,
        x_tenant_id: str = Header(),
        x_profile_id: str = Header(),
    ) -> StreamingResponse:
        try:
            conversation = await controller.get_conversation(x_tenant_id, x_profile_id, conversation_id)
            handle, message_id = await controller.process_new_message_stream(
                x_tenant_id, x_profile_id, conversation_id, user_input
            )
        except ValueError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

        if conversation.title == DEFAULT_CONVERSATION_TITLE:
            background_tasks.add_task(
                controller.name_conversation, x_tenant_id, x_profile_id, conversation_id, user_input.content
            )
        return StreamingResponse(
            _ndjson(handle),
            media_type="application/x-ndjson",
            headers={"X-Message-Id": message_id},
            background=background_tasks,
        )

    return app
