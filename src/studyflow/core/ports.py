# src/studyflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the stores and the relay.

The core depends on Protocols instead of concrete implementations.
This keeps storage/relay/LLM providers swappable and makes testing easier.
"""

from typing import Protocol

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class KeyValueStorage(Protocol):
    """
    String key -> string value storage (the local-storage contract).

    Stores write one JSON array per key and never share keys.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class ChatProvider(Protocol):
    """One upstream text-generation provider (Gemini, OpenAI, ...)."""

    name: str

    async def generate(self, messages: list[ChatMessage], system_prompt: str) -> str: ...


class RelayClient(Protocol):
    """
    Client-side view of the chat relay.

    `history` is the prior conversation, not including `message`.
    Implementations raise RelayError on any failure.
    """

    async def ask(self, message: str, history: list[ChatMessage]) -> str: ...
