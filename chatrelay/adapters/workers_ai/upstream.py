"""
Workers AI REST client. Plays the role of the in-Worker ``env.AI`` binding.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncIterator

import httpx

from chatrelay.config.settings import settings
from chatrelay.core.errors import InferenceError
from chatrelay.core.inference import InferenceBackend
from chatrelay.util.logger import get_logger

logger = get_logger("workers_ai")


def _upstream_http_limits() -> httpx.Limits:
    return httpx.Limits(
        max_connections=max(10, int(settings.upstream_max_connections)),
        max_keepalive_connections=max(5, int(settings.upstream_max_keepalive_connections)),
    )


def _upstream_http_timeout() -> httpx.Timeout:
    timeout = float(settings.upstream_timeout_seconds)
    return httpx.Timeout(connect=timeout, read=timeout, write=timeout, pool=timeout)


def _decode_json_or_text(body: bytes) -> dict[str, Any] | str:
    text = body.decode("utf-8", errors="replace")
    if not text:
        return ""
    try:
        parsed = json.loads(text)
        if isinstance(parsed, dict):
            return parsed
        return text
    except json.JSONDecodeError:
        return text


def _safe_error_detail(payload: dict[str, Any] | str) -> str:
    if isinstance(payload, str):
        return payload[:600]
    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict) and isinstance(first.get("message"), str):
            return first["message"][:600]
    return json.dumps(payload, ensure_ascii=False)[:600]


def _unwrap_result(payload: dict[str, Any] | str) -> dict[str, Any]:
    # REST wraps the binding output as {"result": ..., "success": ..., "errors": [...]}
    if not isinstance(payload, dict):
        raise InferenceError(f"upstream_invalid_response: {str(payload)[:200]}")
    result = payload.get("result")
    if isinstance(result, dict):
        return result
    return payload


class WorkersAIClient(InferenceBackend):
    def __init__(
        self,
        *,
        account_id: str | None = None,
        api_token: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.account_id = (account_id if account_id is not None else settings.workers_ai_account_id).strip()
        self.api_token = (api_token if api_token is not None else settings.workers_ai_api_token).strip()
        self.base_url = (base_url or settings.workers_ai_base_url).rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock: asyncio.Lock | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        if self._client_lock is None:
            self._client_lock = asyncio.Lock()
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=_upstream_http_timeout(),
                    limits=_upstream_http_limits(),
                    transport=self._transport,
                )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def run_url(self, model_id: str) -> str:
        if not self.account_id:
            raise InferenceError("workers_ai_misconfigured: account id is not set")
        return f"{self.base_url}/accounts/{self.account_id}/ai/run/{model_id}"

    def _headers(self) -> dict[str, str]:
        if not self.api_token:
            raise InferenceError("workers_ai_misconfigured: api token is not set")
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    async def run(self, model_id: str, inputs: dict[str, Any]) -> dict[str, Any] | AsyncIterator[bytes]:
        url = self.run_url(model_id)
        headers = self._headers()
        body = json.dumps(inputs, ensure_ascii=False).encode("utf-8")
        if inputs.get("stream"):
            return await self._open_stream(url, body, headers)
        return await self._run_json(url, body, headers)

    async def _run_json(self, url: str, body: bytes, headers: dict[str, str]) -> dict[str, Any]:
        logger.debug("run_json start url=%s payload_bytes=%d", url, len(body))
        client = await self._get_client()
        try:
            response = await client.post(url, content=body, headers=headers)
        except httpx.HTTPError as exc:
            detail = (str(exc) or "").strip() or "connection_failed_or_timeout"
            logger.warning("run_json http_error url=%s error=%s", url, detail)
            raise InferenceError(f"upstream_unreachable: {detail}") from exc
        logger.debug("run_json done url=%s status=%s", url, response.status_code)
        payload = _decode_json_or_text(response.content)
        if response.status_code >= 400:
            raise InferenceError(f"upstream_http_error:{response.status_code}:{_safe_error_detail(payload)}")
        return _unwrap_result(payload)

    async def _open_stream(self, url: str, body: bytes, headers: dict[str, str]) -> AsyncIterator[bytes]:
        logger.debug("open_stream start url=%s payload_bytes=%d", url, len(body))
        client = await self._get_client()
        request = client.build_request("POST", url, content=body, headers=headers)
        try:
            resp = await client.send(request, stream=True)
        except httpx.HTTPError as exc:
            detail = (str(exc) or "").strip() or "connection_failed_or_timeout"
            logger.warning("open_stream http_error url=%s error=%s", url, detail)
            raise InferenceError(f"upstream_unreachable: {detail}") from exc
        logger.debug("open_stream connected url=%s status=%s", url, resp.status_code)
        if resp.status_code >= 400:
            try:
                detail = _safe_error_detail(_decode_json_or_text(await resp.aread()))
            finally:
                await resp.aclose()
            raise InferenceError(f"upstream_http_error:{resp.status_code}:{detail}")
        return self._iter_stream(url, resp)

    async def _iter_stream(self, url: str, resp: httpx.Response) -> AsyncIterator[bytes]:
        try:
            async for chunk in resp.aiter_bytes():
                yield chunk
        except httpx.HTTPError as exc:
            detail = (str(exc) or "").strip() or "stream_interrupted"
            logger.warning("stream http_error url=%s error=%s", url, detail)
            raise InferenceError(f"upstream_stream_error: {detail}") from exc
        finally:
            await resp.aclose()
