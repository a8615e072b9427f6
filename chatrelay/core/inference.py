"""Inference backend contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator


class InferenceBackend(ABC):
    """Runs a model over a message list.

    ``run`` returns the decoded JSON result for plain calls. When
    ``inputs["stream"]`` is true it returns once the stream is open and hands
    back an async iterator of server-sent event bytes.
    """

    @abstractmethod
    async def run(self, model_id: str, inputs: dict[str, Any]) -> dict[str, Any] | AsyncIterator[bytes]:
        pass

    async def aclose(self) -> None:
        return None
