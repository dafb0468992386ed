# src/studyflow/llm/huggingface.py

from __future__ import annotations

import contextlib
import logging
from typing import Any

import httpx

from ..core.ports import ChatMessage
from .errors import ProviderError

logger = logging.getLogger(__name__)

EMPTY_GENERATION_TEXT = "I apologize, but I couldn't generate a response."


def build_prompt(messages: list[ChatMessage], system_prompt: str) -> str:
    """
    Mistral-instruct framing: prior turns as [INST] user [/INST] assistant</s>,
    then the system context folded into the final instruction.
    """
    *prior, last = messages
    prompt = "<s>"
    for m in prior:
        if m["role"] == "user":
            prompt += f"[INST] {m['content']} [/INST]"
        else:
            prompt += f" {m['content']}</s>"
    prompt += f"[INST] {system_prompt}\n\n{last['content']} [/INST]"
    return prompt


class HuggingFaceProvider:
    """Hugging Face serverless inference (text-generation task)."""

    name = "Hugging Face"

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "mistralai/Mistral-7B-Instruct-v0.2",
        base_url: str = "https://api-inference.huggingface.co/models",
        temperature: float = 0.7,
        max_new_tokens: int = 500,
        timeout: httpx.Timeout | float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValueError("Hugging Face: API key is required")
        self._api_key = api_key.strip()
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._temperature = temperature
        self._max_new_tokens = max_new_tokens
        self._timeout = timeout
        self._http_client = http_client

    async def generate(self, messages: list[ChatMessage], system_prompt: str) -> str:
        if not messages:
            raise ProviderError("Hugging Face: nothing to send")

        body: dict[str, Any] = {
            "inputs": build_prompt(messages, system_prompt),
            "parameters": {
                "max_new_tokens": self._max_new_tokens,
                "temperature": self._temperature,
                "top_p": 0.95,
                "return_full_text": False,
            },
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        logger.info("LLM: Hugging Face model=%s turns=%s", self._model, len(messages))

        async with contextlib.AsyncExitStack() as stack:
            client = self._http_client
            if client is None:
                client = await stack.enter_async_context(httpx.AsyncClient(timeout=self._timeout))

            response = await client.post(f"{self._base_url}/{self._model}", json=body, headers=headers)
            if response.is_error:
                logger.error("Hugging Face API error %s: %s", response.status_code, response.text[:500])
            response.raise_for_status()

            try:
                data = response.json()
            except ValueError as e:
                raise ProviderError("Hugging Face returned non-JSON body") from e

        text = None
        if isinstance(data, list) and data and isinstance(data[0], dict):
            text = data[0].get("generated_text")
        return text or EMPTY_GENERATION_TEXT
