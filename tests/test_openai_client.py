"""Tests for the OpenAI HTTP transport."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from chainkit.errors import (
    GenericOpenAIError,
    IncorrectApiKeyError,
    OpenAIServerError,
    QuotaExceededError,
    RateLimitExceededError,
)
from chainkit.services.openai_client import OpenAIClient, parse_sse_line

# ── Helpers ──────────────────────────────────────────────────────────


def _sse_body(*payloads: dict) -> bytes:
    lines = [f"data: {json.dumps(p)}\n\n" for p in payloads]
    lines.append("data: [DONE]\n\n")
    return "".join(lines).encode()


# ── Tests: post ──────────────────────────────────────────────────────


class TestPost:
    def test_returns_parsed_json(self, mock_http_response):
        client = OpenAIClient(api_key="sk-test", max_retries=3)
        with patch.object(client.client, "post", return_value=mock_http_response({"id": "1"})) as mock_post:
            assert client.post("/chat/completions", {"model": "m"}) == {"id": "1"}
            mock_post.assert_called_once_with("/chat/completions", json={"model": "m"})

    def test_sends_bearer_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"ok": True})

        client = OpenAIClient(
            api_key="sk-test", base_url="https://example.test/v1/", transport=httpx.MockTransport(handler),
        )
        client.post("/embeddings", {"input": []})
        assert seen["auth"] == "Bearer sk-test"
        assert seen["url"] == "https://example.test/v1/embeddings"

    def test_organization_header(self, monkeypatch):
        monkeypatch.setenv("OPENAI_ORGANIZATION", "org-from-env")
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("OpenAI-Organization"))
            return httpx.Response(200, json={})

        OpenAIClient(api_key="sk-test", transport=httpx.MockTransport(handler)).post("/models", {})
        OpenAIClient(
            api_key="sk-test", organization="org-explicit", transport=httpx.MockTransport(handler),
        ).post("/models", {})
        assert seen == ["org-from-env", "org-explicit"]

    @patch("chainkit.services.openai_client.time.sleep")
    def test_retries_server_errors(self, mock_sleep, mock_http_response):
        client = OpenAIClient(api_key="sk-test", max_retries=3)
        responses = [mock_http_response({"error": "boom"}, 500), mock_http_response({"id": "2"})]
        with patch.object(client.client, "post", side_effect=responses) as mock_post:
            assert client.post("/completions", {}) == {"id": "2"}
            assert mock_post.call_count == 2
        mock_sleep.assert_called_once_with(1.0)

    @patch("chainkit.services.openai_client.time.sleep")
    def test_retries_rate_limits_then_gives_up(self, mock_sleep, mock_http_response):
        client = OpenAIClient(api_key="sk-test", max_retries=3)
        with patch.object(
            client.client, "post", return_value=mock_http_response({"error": "Rate limit reached"}, 429),
        ) as mock_post:
            with pytest.raises(RateLimitExceededError):
                client.post("/completions", {})
            assert mock_post.call_count == 3
        # Backoff doubles, and there is no sleep after the last attempt
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0]

    @patch("chainkit.services.openai_client.time.sleep")
    def test_quota_errors_are_not_retried(self, mock_sleep, mock_http_response):
        client = OpenAIClient(api_key="sk-test", max_retries=3)
        body = {"error": "You exceeded your current quota, please check your plan and billing details"}
        with patch.object(client.client, "post", return_value=mock_http_response(body, 429)) as mock_post:
            with pytest.raises(QuotaExceededError):
                client.post("/completions", {})
            assert mock_post.call_count == 1
        mock_sleep.assert_not_called()

    @patch("chainkit.services.openai_client.time.sleep")
    def test_auth_errors_are_not_retried(self, mock_sleep, mock_http_response):
        client = OpenAIClient(api_key="sk-bad", max_retries=3)
        with patch.object(
            client.client, "post", return_value=mock_http_response({"error": "Incorrect API key provided"}, 401),
        ) as mock_post:
            with pytest.raises(IncorrectApiKeyError):
                client.post("/completions", {})
            assert mock_post.call_count == 1
        mock_sleep.assert_not_called()

    @patch("chainkit.services.openai_client.time.sleep")
    def test_timeouts_become_generic_error(self, mock_sleep):
        client = OpenAIClient(api_key="sk-test", max_retries=2)
        with patch.object(client.client, "post", side_effect=httpx.TimeoutException("timed out")):
            with pytest.raises(GenericOpenAIError, match="after 2 retries"):
                client.post("/completions", {})

    @patch("chainkit.services.openai_client.time.sleep")
    def test_unparseable_body_is_not_retried(self, mock_sleep, mock_http_response):
        client = OpenAIClient(api_key="sk-test", max_retries=3)
        response = mock_http_response({})
        response.json.side_effect = ValueError("not json")
        with patch.object(client.client, "post", return_value=response) as mock_post:
            with pytest.raises(OpenAIServerError, match="Could not parse response"):
                client.post("/completions", {})
            assert mock_post.call_count == 1
        mock_sleep.assert_not_called()

    @patch("chainkit.services.openai_client.time.sleep")
    def test_dropped_connections_are_retried_then_wrapped(self, mock_sleep):
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            raise httpx.RemoteProtocolError("Server disconnected without sending a response.", request=request)

        client = OpenAIClient(api_key="sk-test", max_retries=3, transport=httpx.MockTransport(handler))
        with pytest.raises(GenericOpenAIError, match="after 3 retries") as excinfo:
            client.post("/chat/completions", {})
        assert len(attempts) == 3
        assert isinstance(excinfo.value.__cause__, httpx.RemoteProtocolError)
        assert mock_sleep.call_count == 2

    def test_missing_api_key_raises(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(OSError, match="OPENAI_API_KEY"):
            OpenAIClient()


# ── Tests: async ─────────────────────────────────────────────────────


class TestAsync:
    @pytest.mark.asyncio
    async def test_apost_returns_json(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"id": "a"}))
        client = OpenAIClient(api_key="sk-test", async_transport=transport)
        assert await client.apost("/chat/completions", {}) == {"id": "a"}
        await client.aclose()

    @pytest.mark.asyncio
    async def test_apost_does_not_retry_quota_errors(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(429, text="You exceeded your current quota, please check your plan")

        client = OpenAIClient(api_key="sk-test", max_retries=3, async_transport=httpx.MockTransport(handler))
        with patch("chainkit.services.openai_client.asyncio.sleep") as mock_sleep:
            with pytest.raises(QuotaExceededError):
                await client.apost("/completions", {})
        assert len(calls) == 1
        mock_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_apost_wraps_read_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadError("connection reset", request=request)

        client = OpenAIClient(api_key="sk-test", max_retries=2, async_transport=httpx.MockTransport(handler))
        with patch("chainkit.services.openai_client.asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(GenericOpenAIError):
                await client.apost("/completions", {})

    @pytest.mark.asyncio
    async def test_astream_wraps_transport_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("peer closed connection", request=request)

        client = OpenAIClient(api_key="sk-test", async_transport=httpx.MockTransport(handler))
        with pytest.raises(GenericOpenAIError, match="stream failed"):
            async for _ in client.astream("/chat/completions", {}):
                pass

    @pytest.mark.asyncio
    async def test_astream_yields_payloads_until_done(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, content=_sse_body({"n": 1}, {"n": 2}))

        client = OpenAIClient(api_key="sk-test", async_transport=httpx.MockTransport(handler))
        chunks = [chunk async for chunk in client.astream("/chat/completions", {"model": "m"})]
        assert chunks == [{"n": 1}, {"n": 2}]
        assert bodies[0]["stream"] is True

    @pytest.mark.asyncio
    async def test_astream_maps_http_errors(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="kaput"))
        client = OpenAIClient(api_key="sk-test", async_transport=transport)
        with pytest.raises(OpenAIServerError, match="kaput"):
            async for _ in client.astream("/chat/completions", {}):
                pass


class TestParseSseLine:
    def test_data_line(self):
        assert parse_sse_line('data: {"a": 1}') == {"a": 1}

    def test_done_blank_and_comment_lines_are_skipped(self):
        assert parse_sse_line("data: [DONE]") is None
        assert parse_sse_line("") is None
        assert parse_sse_line(": keep-alive") is None

    def test_bad_json_raises(self):
        with pytest.raises(OpenAIServerError):
            parse_sse_line("data: {nope")
