# src/studyflow/llm/registry.py

"""
Provider selection.

An ordered list of (credential check, factory) pairs: the first provider whose
credential is present wins. Exactly one provider serves a request.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from ..core.ports import ChatProvider
from .client import OpenAICompatibleProvider, make_timeout
from .gemini import GeminiProvider
from .huggingface import HuggingFaceProvider

ProviderFactory = Callable[[Any, str, httpx.AsyncClient | None], ChatProvider]


@dataclass(frozen=True, slots=True)
class ProviderSpec:
    name: str
    credential_env: str
    credential: Callable[[Any], str | None]
    factory: ProviderFactory


def _timeout(settings: Any) -> httpx.Timeout:
    return make_timeout(
        float(getattr(settings, "llm_connect_timeout_seconds", 5.0)),
        float(getattr(settings, "llm_read_timeout_seconds", 30.0)),
    )


def _gemini(settings: Any, api_key: str, http_client: httpx.AsyncClient | None) -> ChatProvider:
    return GeminiProvider(
        api_key=api_key,
        model=getattr(settings, "gemini_model", "gemini-1.5-flash"),
        base_url=getattr(settings, "gemini_base_url", "https://generativelanguage.googleapis.com/v1beta"),
        temperature=float(getattr(settings, "llm_temperature", 0.7)),
        max_output_tokens=int(getattr(settings, "llm_max_output_tokens", 500)),
        timeout=_timeout(settings),
        http_client=http_client,
    )


def _openai(settings: Any, api_key: str, http_client: httpx.AsyncClient | None) -> ChatProvider:
    return OpenAICompatibleProvider(
        name="OpenAI",
        api_key=api_key,
        model=getattr(settings, "openai_model", "gpt-4o-mini"),
        temperature=float(getattr(settings, "llm_temperature", 0.7)),
        max_tokens=int(getattr(settings, "llm_max_output_tokens", 500)),
        timeout=_timeout(settings),
        http_client=http_client,
    )


def _openrouter(settings: Any, api_key: str, http_client: httpx.AsyncClient | None) -> ChatProvider:
    return OpenAICompatibleProvider(
        name="OpenRouter",
        api_key=api_key,
        model=getattr(settings, "openrouter_model", "qwen/qwen-2.5-72b-instruct:free"),
        base_url=getattr(settings, "openrouter_base_url", "https://openrouter.ai/api/v1"),
        extra_headers=dict(getattr(settings, "extra_headers", {}) or {}),
        temperature=float(getattr(settings, "llm_temperature", 0.7)),
        max_tokens=int(getattr(settings, "llm_max_output_tokens", 500)),
        timeout=_timeout(settings),
        http_client=http_client,
    )


def _huggingface(settings: Any, api_key: str, http_client: httpx.AsyncClient | None) -> ChatProvider:
    return HuggingFaceProvider(
        api_key=api_key,
        model=getattr(settings, "huggingface_model", "mistralai/Mistral-7B-Instruct-v0.2"),
        base_url=getattr(settings, "huggingface_base_url", "https://api-inference.huggingface.co/models"),
        temperature=float(getattr(settings, "llm_temperature", 0.7)),
        max_new_tokens=int(getattr(settings, "llm_max_output_tokens", 500)),
        timeout=_timeout(settings),
        http_client=http_client,
    )


DEFAULT_PROVIDERS: tuple[ProviderSpec, ...] = (
    ProviderSpec("Gemini", "GEMINI_API_KEY", lambda s: getattr(s, "gemini_api_key", None), _gemini),
    ProviderSpec("OpenAI", "OPENAI_API_KEY", lambda s: getattr(s, "openai_api_key", None), _openai),
    ProviderSpec(
        "OpenRouter", "OPENROUTER_API_KEY", lambda s: getattr(s, "openrouter_api_key", None), _openrouter
    ),
    ProviderSpec(
        "Hugging Face",
        "HUGGINGFACE_API_KEY",
        lambda s: getattr(s, "huggingface_api_key", None),
        _huggingface,
    ),
)


def select_provider(settings: Any, providers: Sequence[ProviderSpec]) -> tuple[ProviderSpec, str] | None:
    """Return the first spec with a non-blank credential, plus that credential."""
    for spec in providers:
        key = spec.credential(settings)
        if key and str(key).strip():
            return spec, str(key).strip()
    return None
