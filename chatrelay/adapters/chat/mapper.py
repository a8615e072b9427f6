"""Chat body -> canonical message list."""

from __future__ import annotations

from typing import Any

from chatrelay.core.errors import MissingChatInputError
from chatrelay.util.logger import get_logger

logger = get_logger("chat.mapper")

MISSING_INPUT_ERROR = "Request must include either 'messages' array or 'prompt' string"

USAGE_EXAMPLE = {
    "messages": [
        {"role": "system", "content": "You are a helpful assistant"},
        {"role": "user", "content": "Hello!"},
    ],
}

SIMPLE_USAGE_EXAMPLE = {
    "prompt": "Hello!",
    "system": "You are a helpful assistant",
}


def missing_input_payload() -> dict[str, Any]:
    return {
        "error": MISSING_INPUT_ERROR,
        "example": USAGE_EXAMPLE,
        "simpleExample": SIMPLE_USAGE_EXAMPLE,
    }


def _truthy(value: Any) -> bool:
    # JSON-level truthiness: empty arrays and objects count as present
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)):
        return value == value and value != 0
    return True


def body_to_messages(body: Any) -> list[Any]:
    """Return the message list to send upstream.

    A ``messages`` array wins and is passed through untouched, elements
    included. Otherwise a truthy ``prompt`` becomes a user message, preceded by
    a system message when ``system`` is truthy. Anything else raises
    :class:`MissingChatInputError`.
    """
    if not isinstance(body, dict):
        raise MissingChatInputError(MISSING_INPUT_ERROR)

    messages = body.get("messages")
    if isinstance(messages, list):
        logger.debug("structured body messages=%d", len(messages))
        return messages

    prompt = body.get("prompt")
    if not _truthy(prompt):
        raise MissingChatInputError(MISSING_INPUT_ERROR)

    built: list[Any] = []
    system = body.get("system")
    if _truthy(system):
        built.append({"role": "system", "content": system})
    built.append({"role": "user", "content": prompt})
    logger.debug("simple body mapped messages=%d system=%s", len(built), _truthy(system))
    return built
