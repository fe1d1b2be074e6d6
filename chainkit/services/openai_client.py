"""HTTP transport for the OpenAI REST API with retry logic, timeout handling,
error mapping and server-sent-event streaming.

OpenAI API docs: https://platform.openai.com/docs/api-reference
All requests carry the API key as a Bearer token.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import AsyncIterator
from typing import Any

import httpx

from chainkit import config
from chainkit.errors import (
    GenericOpenAIError,
    OpenAIError,
    OpenAIServerError,
    RateLimitExceededError,
    openai_error_from_status,
)
from chainkit.services.metrics import metrics

logger = logging.getLogger(__name__)

# ── Retry configuration ─────────────────────────────────────────────
INITIAL_BACKOFF_SECONDS = 1.0

_SSE_DATA_PREFIX = "data:"
_SSE_DONE = "[DONE]"


def _is_retryable(exc: OpenAIError) -> bool:
    """5xx and rate limits are transient; auth, quota and 4xx are not."""
    if isinstance(exc, RateLimitExceededError):
        return True
    return exc.status_code is not None and exc.status_code >= 500


def _backoff(attempt: int) -> float:
    return INITIAL_BACKOFF_SECONDS * (2 ** (attempt - 1))


def _parse_json(response: httpx.Response) -> dict[str, Any]:
    try:
        return response.json()
    except ValueError as exc:
        logger.error("Could not parse response: %s", exc)
        raise OpenAIServerError(500, "Could not parse response") from exc


def parse_sse_line(line: str) -> dict[str, Any] | None:
    """Decode one SSE line.

    Returns the JSON payload of a ``data:`` line, or ``None`` for blank lines,
    comments, other fields and the ``[DONE]`` sentinel.
    """
    line = line.strip()
    if not line.startswith(_SSE_DATA_PREFIX):
        return None
    data = line[len(_SSE_DATA_PREFIX):].strip()
    if not data or data == _SSE_DONE:
        return None
    try:
        return json.loads(data)
    except ValueError as exc:
        raise OpenAIServerError(500, f"Could not parse stream chunk: {data[:200]}") from exc


class OpenAIClient:
    """Thin wrapper around the OpenAI REST API with automatic retries.

    One instance owns a sync and an async ``httpx`` client; both are created
    lazily so a client used only synchronously never opens an async pool.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
        organization: str | None = None,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key or config.get_openai_api_key()
        self._organization = organization or config.get_openai_organization()
        self._base_url = (base_url or config.OPENAI_BASE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else config.OPENAI_TIMEOUT_SECONDS
        self.max_retries = max(1, max_retries if max_retries is not None else config.OPENAI_MAX_RETRIES)
        self._transport = transport
        self._async_transport = async_transport
        self._client: httpx.Client | None = None
        self._async_client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if self._organization:
            headers["OpenAI-Organization"] = self._organization
        return headers

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base_url,
                headers=self._headers(),
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    @property
    def async_client(self) -> httpx.AsyncClient:
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers(),
                timeout=self._timeout,
                transport=self._async_transport,
            )
        return self._async_client

    # ── Internal helpers ─────────────────────────────────────────────

    def _check(self, response: httpx.Response) -> None:
        if response.status_code >= 400:
            raise openai_error_from_status(response.status_code, response.text)

    def _log_retry(self, path: str, attempt: int, reason: str) -> None:
        logger.warning(
            "OpenAI API %s attempt %d/%d failed (%s). Retrying in %.1fs…",
            path, attempt, self.max_retries, reason, _backoff(attempt),
        )

    def _decode(self, response: httpx.Response, path: str, t0: float) -> dict[str, Any]:
        """Parse a 2xx body.  A malformed body is final: resending won't fix it."""
        latency_ms = (time.perf_counter() - t0) * 1000
        try:
            data = _parse_json(response)
        except OpenAIServerError:
            metrics.record_failure("openai", f"POST {path}", error_type="OpenAIServerError", latency_ms=latency_ms)
            raise
        metrics.record_success("openai", f"POST {path}", latency_ms=latency_ms)
        return data

    # ── Public API methods ───────────────────────────────────────────

    def post(self, path: str, json_body: dict[str, Any]) -> dict[str, Any]:
        """POST *json_body* to *path* with exponential-backoff retries."""
        last_error: Exception | None = None
        t0 = time.perf_counter()
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.client.post(path, json=json_body)
                self._check(response)
            except httpx.TransportError as exc:
                last_error = exc
                self._log_retry(path, attempt, type(exc).__name__)
            except OpenAIError as exc:
                if not _is_retryable(exc):
                    metrics.record_failure(
                        "openai", f"POST {path}", error_type=type(exc).__name__,
                        latency_ms=(time.perf_counter() - t0) * 1000,
                    )
                    raise
                last_error = exc
                self._log_retry(path, attempt, type(exc).__name__)
            else:
                return self._decode(response, path, t0)

            if attempt < self.max_retries:
                time.sleep(_backoff(attempt))

        metrics.record_failure(
            "openai", f"POST {path}", error_type=type(last_error).__name__,
            latency_ms=(time.perf_counter() - t0) * 1000,
        )
        if isinstance(last_error, OpenAIError):
            raise last_error
        raise GenericOpenAIError(
            f"request failed after {self.max_retries} retries: {last_error}"
        ) from last_error

    async def apost(self, path: str, json_body: dict[str, Any]) -> dict[str, Any]:
        """Async counterpart of :meth:`post`."""
        last_error: Exception | None = None
        t0 = time.perf_counter()
        for attempt in range(1, self.max_retries + 1):
            try:
                response = await self.async_client.post(path, json=json_body)
                self._check(response)
            except httpx.TransportError as exc:
                last_error = exc
                self._log_retry(path, attempt, type(exc).__name__)
            except OpenAIError as exc:
                if not _is_retryable(exc):
                    metrics.record_failure(
                        "openai", f"POST {path}", error_type=type(exc).__name__,
                        latency_ms=(time.perf_counter() - t0) * 1000,
                    )
                    raise
                last_error = exc
                self._log_retry(path, attempt, type(exc).__name__)
            else:
                return self._decode(response, path, t0)

            if attempt < self.max_retries:
                await asyncio.sleep(_backoff(attempt))

        metrics.record_failure(
            "openai", f"POST {path}", error_type=type(last_error).__name__,
            latency_ms=(time.perf_counter() - t0) * 1000,
        )
        if isinstance(last_error, OpenAIError):
            raise last_error
        raise GenericOpenAIError(
            f"request failed after {self.max_retries} retries: {last_error}"
        ) from last_error

    async def astream(self, path: str, json_body: dict[str, Any]) -> AsyncIterator[dict[str, Any]]:
        """POST with ``stream: true`` and yield each decoded SSE ``data:`` payload.

        Streams are not retried: once chunks have been handed to the caller
        a replay would duplicate output.
        """
        t0 = time.perf_counter()
        body = {**json_body, "stream": True}
        try:
            async with self.async_client.stream("POST", path, json=body) as response:
                if response.status_code >= 400:
                    detail = (await response.aread()).decode("utf-8", errors="replace")
                    raise openai_error_from_status(response.status_code, detail)
                async for line in response.aiter_lines():
                    if line.strip() == f"{_SSE_DATA_PREFIX} {_SSE_DONE}":
                        break
                    payload = parse_sse_line(line)
                    if payload is not None:
                        yield payload
        except httpx.TransportError as exc:
            metrics.record_failure(
                "openai", f"STREAM {path}", error_type=type(exc).__name__,
                latency_ms=(time.perf_counter() - t0) * 1000,
            )
            raise GenericOpenAIError(f"stream failed: {exc}") from exc
        except OpenAIError as exc:
            metrics.record_failure(
                "openai", f"STREAM {path}", error_type=type(exc).__name__,
                latency_ms=(time.perf_counter() - t0) * 1000,
            )
            raise
        metrics.record_success("openai", f"STREAM {path}", latency_ms=(time.perf_counter() - t0) * 1000)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    async def aclose(self) -> None:
        if self._async_client is not None:
            await self._async_client.aclose()
            self._async_client = None
