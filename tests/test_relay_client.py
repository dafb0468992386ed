# tests/test_relay_client.py

from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest

from studyflow.chat.relay_client import HttpRelayClient, InProcessRelayClient, RelayError
from studyflow.llm.errors import ProviderError
from studyflow.relay.service import ChatRelay

from .fakes import FakeProvider, fake_spec


@pytest.mark.asyncio
async def test_http_client_posts_contract_and_reads_message() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/chat"
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"message": "Sure!"})

    client = HttpRelayClient("http://relay.test/", transport=httpx.MockTransport(handler))
    history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]

    assert await client.ask("Quiz me", history) == "Sure!"
    assert seen == [{"message": "Quiz me", "history": history}]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(502, json={"error": "Gemini is rate-limited. Try again later."}),
        httpx.Response(500, text="<html>oops</html>"),
        httpx.Response(200, json={"reply": "wrong key"}),
    ],
)
async def test_http_client_failures_raise_relay_error(response: httpx.Response) -> None:
    client = HttpRelayClient("http://relay.test", transport=httpx.MockTransport(lambda r: response))
    with pytest.raises(RelayError):
        await client.ask("hi", [])


@pytest.mark.asyncio
async def test_http_client_transport_error_raises_relay_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = HttpRelayClient("http://relay.test", transport=httpx.MockTransport(handler))
    with pytest.raises(RelayError, match="unreachable"):
        await client.ask("hi", [])


@pytest.mark.asyncio
async def test_in_process_client() -> None:
    ok = InProcessRelayClient(
        ChatRelay(SimpleNamespace(alpha_key="a"), providers=[fake_spec("Alpha", "alpha_key", FakeProvider(reply="42"))])
    )
    assert await ok.ask("What is 6 x 7?", []) == "42"

    failing = InProcessRelayClient(
        ChatRelay(
            SimpleNamespace(alpha_key="a"),
            providers=[fake_spec("Alpha", "alpha_key", FakeProvider(error=ProviderError("boom")))],
        )
    )
    with pytest.raises(RelayError):
        await failing.ask("hi", [])


@pytest.mark.asyncio
async def test_in_process_client_wraps_unexpected_errors() -> None:
    class BrokenRelay:
        async def handle(self, message, history):
            raise KeyError("boom")

    with pytest.raises(RelayError):
        await InProcessRelayClient(BrokenRelay()).ask("hi", [])
