# src/studyflow/llm/client.py

"""
OpenAI-compatible provider (OpenAI itself and OpenRouter).

One request per call: automatic SDK retries are disabled, no streaming.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from openai import AsyncOpenAI

from ..core.ports import ChatMessage
from .errors import ProviderError

logger = logging.getLogger(__name__)


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


class OpenAICompatibleProvider:
    def __init__(
        self,
        *,
        name: str,
        api_key: str,
        model: str,
        base_url: str | None = None,
        extra_headers: dict[str, str] | None = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
        timeout: httpx.Timeout | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValueError(f"{name}: API key is required")
        if not model or not model.strip():
            raise ValueError(f"{name}: model is required")

        self.name = name
        self._api_key = api_key.strip()
        self._model = model.strip()
        self._base_url = base_url
        self._extra_headers = dict(extra_headers or {})
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout or make_timeout(5.0, 30.0)
        self._http_client = http_client

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "api_key": self._api_key,
            "timeout": self._timeout,
            "max_retries": 0,
        }
        if self._base_url:
            kwargs["base_url"] = self._base_url
        if self._extra_headers:
            kwargs["default_headers"] = self._extra_headers
        if self._http_client is not None:
            kwargs["http_client"] = self._http_client
        return kwargs

    async def generate(self, messages: list[ChatMessage], system_prompt: str) -> str:
        logger.info("LLM: %s model=%s turns=%s", self.name, self._model, len(messages))
        t0 = time.monotonic()

        client = AsyncOpenAI(**self._client_kwargs())
        try:
            completion = await client.chat.completions.create(
                model=self._model,
                messages=[{"role": "system", "content": system_prompt}, *messages],  # type: ignore[list-item]
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        finally:
            # An injected http client stays open for its owner.
            if self._http_client is None:
                await client.close()

        try:
            content = completion.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ProviderError(f"Invalid response from {self.name}") from e

        if not content or not content.strip():
            raise ProviderError(f"{self.name} returned no content")

        logger.debug("LLM: %s completed in %.2fs", self.name, time.monotonic() - t0)
        return content
