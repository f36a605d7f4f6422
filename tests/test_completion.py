"""
Completion client tests against an in-process httpx transport.
Every failure mode must surface as UpstreamUnavailableError.
"""
import json

import httpx
import pytest

from garden.core.config import Settings
from garden.core.errors import UpstreamUnavailableError
from garden.services.completion import CompletionClient


def chat_reply(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_client(handler, api_key="sk-test"):
    return CompletionClient(
        api_key,
        base_url="https://llm.test/v1/",
        model="gpt-4o-mini",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


class TestRequestShape:
    @pytest.mark.asyncio
    async def test_system_only_request(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=chat_reply("hello"))

        text = await make_client(handler).complete("be kind", temperature=0.9)
        assert text == "hello"
        assert seen["url"] == "https://llm.test/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"]["model"] == "gpt-4o-mini"
        assert seen["body"]["temperature"] == 0.9
        assert seen["body"]["messages"] == [{"role": "system", "content": "be kind"}]
        assert "response_format" not in seen["body"]

    @pytest.mark.asyncio
    async def test_json_mode_with_user_message(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=chat_reply('{"points": {"courage": 8}, "comment": "좋아요"}'))

        result = await make_client(handler).complete_json("sys", "diary", temperature=0.8)
        assert result == {"points": {"courage": 8}, "comment": "좋아요"}
        assert seen["body"]["response_format"] == {"type": "json_object"}
        assert seen["body"]["messages"][1] == {"role": "user", "content": "diary"}

    def test_from_settings(self):
        s = Settings(OPENAI_API_KEY="k", OPENAI_MODEL="m", OPENAI_BASE_URL="https://x/v1", OPENAI_TIMEOUT=3)
        client = CompletionClient.from_settings(s)
        assert client.api_key == "k"
        assert client.model == "m"
        assert client.base_url == "https://x/v1"
        assert client.timeout == 3


class TestFailures:
    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        def handler(request):  # pragma: no cover - never reached
            raise AssertionError("request should not be sent")

        with pytest.raises(UpstreamUnavailableError):
            await make_client(handler, api_key="").complete("sys")

    @pytest.mark.asyncio
    async def test_non_2xx_status(self):
        client = make_client(lambda r: httpx.Response(429, json={"error": {"message": "slow down"}}))
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await client.complete("sys")
        assert exc_info.value.status_code == 429
        assert exc_info.value.details == {"status_code": 429}

    @pytest.mark.asyncio
    async def test_error_member_in_body(self):
        client = make_client(lambda r: httpx.Response(200, json={"error": {"message": "bad model"}}))
        with pytest.raises(UpstreamUnavailableError, match="bad model"):
            await client.complete("sys")

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamUnavailableError, match="network"):
            await make_client(handler).complete("sys")

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamUnavailableError, match="timeout"):
            await make_client(handler).complete("sys")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        client = make_client(lambda r: httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(UpstreamUnavailableError):
            await client.complete("sys")

    @pytest.mark.asyncio
    async def test_missing_choices(self):
        client = make_client(lambda r: httpx.Response(200, json={"choices": []}))
        with pytest.raises(UpstreamUnavailableError, match="choices"):
            await client.complete("sys")

    @pytest.mark.asyncio
    async def test_missing_content(self):
        client = make_client(lambda r: httpx.Response(200, json={"choices": [{"message": {}}]}))
        with pytest.raises(UpstreamUnavailableError, match="content"):
            await client.complete("sys")

    @pytest.mark.asyncio
    async def test_invalid_json_content(self):
        client = make_client(lambda r: httpx.Response(200, json=chat_reply("not json")))
        with pytest.raises(UpstreamUnavailableError, match="invalid JSON"):
            await client.complete_json("sys")

    @pytest.mark.asyncio
    async def test_json_content_not_an_object(self):
        client = make_client(lambda r: httpx.Response(200, json=chat_reply("[1, 2]")))
        with pytest.raises(UpstreamUnavailableError):
            await client.complete_json("sys")


class TestConnectionReuse:
    @pytest.mark.asyncio
    async def test_one_http_client_across_calls(self):
        client = make_client(lambda r: httpx.Response(200, json=chat_reply("hi")))
        await client.complete("sys")
        http = client._http
        await client.complete("sys")
        assert client._http is http

        await client.aclose()
        assert http.is_closed
        assert client._http is None

    @pytest.mark.asyncio
    async def test_usable_again_after_close(self):
        client = make_client(lambda r: httpx.Response(200, json=chat_reply("again")))
        await client.aclose()
        assert await client.complete("sys") == "again"
        await client.aclose()
