"""Chat routes: health, /chat and /stream."""

from __future__ import annotations

from typing import Any, AsyncIterable

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse

from chatrelay.adapters.chat.mapper import body_to_messages, missing_input_payload
from chatrelay.config.settings import settings
from chatrelay.core.errors import MissingChatInputError
from chatrelay.core.inference import InferenceBackend
from chatrelay.observability.logging import log_event
from chatrelay.util.logger import get_logger

logger = get_logger("chat.router")

router = APIRouter()

AVAILABLE_ENDPOINTS = ["/", "/health", "/chat", "/stream"]


def _error_response(status_code: int, content: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content)


def _build_streaming_response(stream: AsyncIterable[bytes]) -> StreamingResponse:
    return StreamingResponse(
        stream,
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


def _inference(request: Request) -> InferenceBackend:
    return request.app.state.inference


async def health(request: Request) -> JSONResponse:
    return JSONResponse(
        content={
            "status": "ok",
            "model": settings.model_id,
            "endpoints": {
                "chat": "/chat",
                "stream": "/stream",
            },
        }
    )


async def chat_entry(request: Request):
    route = request.url.path
    if request.method != "POST":
        logger.info("reject method=%s path=%s", request.method, route)
        return _error_response(405, {"error": "Method not allowed. Use POST."})

    raw = await request.body()
    if settings.log_full_request_body:
        logger.debug("request body path=%s body=%s", route, raw.decode("utf-8", errors="replace"))
    else:
        logger.debug("request body path=%s body_size=%d", route, len(raw))

    try:
        body = await request.json()
    except ValueError:
        logger.info("reject invalid json path=%s body_size=%d", route, len(raw))
        return _error_response(400, {"error": "Invalid JSON body"})

    try:
        messages = body_to_messages(body)
    except MissingChatInputError:
        logger.info("reject missing chat input path=%s", route)
        return _error_response(400, missing_input_payload())

    if route == "/chat":
        log_event("chat_dispatch", route=route, model=settings.model_id, messages=len(messages), stream=False)
        result = await _inference(request).run(settings.model_id, {"messages": messages})
        return JSONResponse(content=result)

    if route == "/stream":
        log_event("chat_dispatch", route=route, model=settings.model_id, messages=len(messages), stream=True)
        stream = await _inference(request).run(settings.model_id, {"messages": messages, "stream": True})
        return _build_streaming_response(stream)

    logger.info("route not found path=%s", route)
    return _error_response(404, {"error": "Not found", "availableEndpoints": AVAILABLE_ENDPOINTS})


# Plain Starlette routes with no method list match every verb (TRACE, PURGE, ...).
# OPTIONS never gets here; the CORS middleware answers it.
router.add_route("/", health, methods=None, include_in_schema=False)
router.add_route("/health", health, methods=None, include_in_schema=False)
router.add_route("/{path:path}", chat_entry, methods=None, include_in_schema=False)
