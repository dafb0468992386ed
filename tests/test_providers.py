# tests/test_providers.py

from __future__ import annotations

import json

import httpx
import openai
import pytest

from studyflow.llm.client import OpenAICompatibleProvider
from studyflow.llm.errors import ProviderError, friendly_provider_error
from studyflow.llm.gemini import GeminiProvider, build_contents
from studyflow.llm.huggingface import EMPTY_GENERATION_TEXT, HuggingFaceProvider, build_prompt

HISTORY = [
    {"role": "user", "content": "I have a chemistry test"},
    {"role": "assistant", "content": "When is it?"},
    {"role": "user", "content": "Tomorrow"},
]


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_gemini_contents_map_assistant_to_model() -> None:
    contents = build_contents(HISTORY)
    assert [c["role"] for c in contents] == ["user", "model", "user"]
    assert contents[2]["parts"] == [{"text": "Tomorrow"}]


@pytest.mark.asyncio
async def test_gemini_request_and_reply() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": "Review the periodic table."}]}}]},
        )

    async with _client(handler) as http:
        provider = GeminiProvider(api_key="g-key", model="gemini-1.5-flash", base_url="https://gemini.test/v1beta", http_client=http)
        text = await provider.generate(HISTORY, "You are a study assistant.")

    assert text == "Review the periodic table."
    request = seen[0]
    assert request.url.path == "/v1beta/models/gemini-1.5-flash:generateContent"
    assert request.headers["x-goog-api-key"] == "g-key"
    body = json.loads(request.content)
    assert body["systemInstruction"] == {"parts": [{"text": "You are a study assistant."}]}
    assert body["generationConfig"]["topK"] == 40
    assert len(body["contents"]) == 3


@pytest.mark.asyncio
async def test_gemini_errors() -> None:
    async with _client(lambda r: httpx.Response(403, json={"error": {"message": "bad key"}})) as http:
        provider = GeminiProvider(api_key="g-key", http_client=http)
        with pytest.raises(httpx.HTTPStatusError):
            await provider.generate(HISTORY, "sys")

    async with _client(lambda r: httpx.Response(200, json={"candidates": []})) as http:
        provider = GeminiProvider(api_key="g-key", http_client=http)
        with pytest.raises(ProviderError):
            await provider.generate(HISTORY, "sys")


def test_huggingface_prompt_framing() -> None:
    prompt = build_prompt(HISTORY, "SYSTEM")
    assert prompt == (
        "<s>[INST] I have a chemistry test [/INST] When is it?</s>"
        "[INST] SYSTEM\n\nTomorrow [/INST]"
    )
    assert build_prompt([{"role": "user", "content": "hi"}], "SYSTEM") == "<s>[INST] SYSTEM\n\nhi [/INST]"


@pytest.mark.asyncio
async def test_huggingface_request_and_empty_generation() -> None:
    seen: list[httpx.Request] = []
    replies = [
        [{"generated_text": "Make a one-page summary."}],
        [{}],
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=replies[len(seen) - 1])

    async with _client(handler) as http:
        provider = HuggingFaceProvider(
            api_key="hf-key", model="org/model", base_url="https://hf.test/models", http_client=http
        )
        assert await provider.generate(HISTORY, "sys") == "Make a one-page summary."
        assert await provider.generate(HISTORY, "sys") == EMPTY_GENERATION_TEXT

    assert seen[0].url.path == "/models/org/model"
    assert seen[0].headers["authorization"] == "Bearer hf-key"
    params = json.loads(seen[0].content)["parameters"]
    assert params["return_full_text"] is False


def _completion(content: str) -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }


@pytest.mark.asyncio
async def test_openai_sends_system_message_first() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_completion("Use active recall."))

    async with _client(handler) as http:
        provider = OpenAICompatibleProvider(name="OpenAI", api_key="sk-test", model="gpt-4o-mini", http_client=http)
        assert await provider.generate(HISTORY, "You are a study assistant.") == "Use active recall."
        # The injected client is still usable after a call.
        assert not http.is_closed

    assert seen[0].url.path.endswith("/chat/completions")
    assert seen[0].headers["authorization"] == "Bearer sk-test"
    body = json.loads(seen[0].content)
    assert body["model"] == "gpt-4o-mini"
    assert body["messages"][0] == {"role": "system", "content": "You are a study assistant."}
    assert body["messages"][1:] == HISTORY


@pytest.mark.asyncio
async def test_openrouter_sends_metadata_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_completion("ok"))

    async with _client(handler) as http:
        provider = OpenAICompatibleProvider(
            name="OpenRouter",
            api_key="or-test",
            model="qwen/qwen-2.5-72b-instruct:free",
            base_url="https://openrouter.test/api/v1",
            extra_headers={"HTTP-Referer": "https://studyflow.test", "X-Title": "studyflow"},
            http_client=http,
        )
        await provider.generate(HISTORY, "sys")

    assert seen[0].url.host == "openrouter.test"
    assert seen[0].url.path == "/api/v1/chat/completions"
    assert seen[0].headers["http-referer"] == "https://studyflow.test"
    assert seen[0].headers["x-title"] == "studyflow"


@pytest.mark.asyncio
async def test_openai_empty_choices_raise_provider_error() -> None:
    body = {**_completion("unused"), "choices": []}
    async with _client(lambda r: httpx.Response(200, json=body)) as http:
        provider = OpenAICompatibleProvider(name="OpenAI", api_key="sk-test", model="gpt-4o-mini", http_client=http)
        with pytest.raises(ProviderError):
            await provider.generate(HISTORY, "sys")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "exc_type", "expected"),
    [
        (429, openai.RateLimitError, "OpenAI is rate-limited. Try again later."),
        (401, openai.AuthenticationError, "OpenAI authentication failed. Check your API key."),
        (500, openai.InternalServerError, "OpenAI API error: 500"),
    ],
)
async def test_openai_status_errors_map_to_friendly_text(status: int, exc_type: type, expected: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": {"message": "nope", "type": "error"}})

    async with _client(handler) as http:
        provider = OpenAICompatibleProvider(name="OpenAI", api_key="sk-test", model="gpt-4o-mini", http_client=http)
        with pytest.raises(exc_type) as exc_info:
            await provider.generate(HISTORY, "sys")

    assert friendly_provider_error("OpenAI", exc_info.value) == expected
