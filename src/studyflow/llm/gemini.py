# src/studyflow/llm/gemini.py

from __future__ import annotations

import contextlib
import logging
from typing import Any

import httpx

from ..core.ports import ChatMessage
from .errors import ProviderError

logger = logging.getLogger(__name__)

SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


def build_contents(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    """Gemini calls the assistant side 'model'."""
    return [
        {
            "role": "model" if m["role"] == "assistant" else "user",
            "parts": [{"text": m["content"]}],
        }
        for m in messages
    ]


def extract_text(data: Any) -> str:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise ProviderError("Invalid response from Gemini API") from e
    if not isinstance(text, str) or not text.strip():
        raise ProviderError("Gemini returned no content")
    return text


class GeminiProvider:
    """Google Gemini `generateContent` over plain REST."""

    name = "Gemini"

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        temperature: float = 0.7,
        max_output_tokens: int = 500,
        timeout: httpx.Timeout | float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValueError("Gemini: API key is required")
        self._api_key = api_key.strip()
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._timeout = timeout
        self._http_client = http_client

    def _payload(self, messages: list[ChatMessage], system_prompt: str) -> dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": build_contents(messages),
            "generationConfig": {
                "temperature": self._temperature,
                "topK": 40,
                "topP": 0.95,
                "maxOutputTokens": self._max_output_tokens,
            },
            "safetySettings": SAFETY_SETTINGS,
        }

    async def generate(self, messages: list[ChatMessage], system_prompt: str) -> str:
        url = f"{self._base_url}/models/{self._model}:generateContent"
        headers = {"x-goog-api-key": self._api_key}
        logger.info("LLM: Gemini model=%s turns=%s", self._model, len(messages))

        async with contextlib.AsyncExitStack() as stack:
            client = self._http_client
            if client is None:
                client = await stack.enter_async_context(httpx.AsyncClient(timeout=self._timeout))

            response = await client.post(url, json=self._payload(messages, system_prompt), headers=headers)
            if response.is_error:
                logger.error("Gemini API error %s: %s", response.status_code, response.text[:500])
            response.raise_for_status()

            try:
                data = response.json()
            except ValueError as e:
                raise ProviderError("Gemini returned non-JSON body") from e

        return extract_text(data)
