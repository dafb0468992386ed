# src/studyflow/chat/relay_client.py

"""
Client side of the chat relay.

Two implementations of the RelayClient port:
- HttpRelayClient talks to a running relay over HTTP (POST /api/chat);
- InProcessRelayClient calls the relay service directly (console without a server).

Both raise RelayError on any failure so the chat store has one thing to catch.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from ..core.ports import ChatMessage

if TYPE_CHECKING:
    from ..relay.service import ChatRelay

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"


class RelayError(RuntimeError):
    """Relay call failed (transport error, non-2xx, or malformed body)."""


class HttpRelayClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def ask(self, message: str, history: list[ChatMessage]) -> str:
        body = {"message": message, "history": history}

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(CHAT_PATH, json=body)
        except httpx.HTTPError as e:
            raise RelayError(f"Relay unreachable: {e.__class__.__name__}") from e

        try:
            data: Any = response.json()
        except ValueError as e:
            raise RelayError(f"Relay returned non-JSON body (status {response.status_code})") from e

        if not response.is_success:
            err = data.get("error") if isinstance(data, dict) else None
            raise RelayError(err or f"Relay error: {response.status_code}")

        text = data.get("message") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise RelayError("Relay response has no message")
        return text


class InProcessRelayClient:
    def __init__(self, relay: ChatRelay) -> None:
        self._relay = relay

    async def ask(self, message: str, history: list[ChatMessage]) -> str:
        try:
            reply = await self._relay.handle(message, history)
        except Exception as e:
            raise RelayError(f"Relay crashed: {e.__class__.__name__}") from e
        if reply.error is not None:
            raise RelayError(reply.error)
        return reply.message or ""
