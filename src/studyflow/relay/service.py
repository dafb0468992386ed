# src/studyflow/relay/service.py

"""
Stateless chat relay: one user message (+ optional history) in, one reply out.

Per request:
1) pick the first configured provider (fixed precedence);
2) no provider -> setup instructions as a normal 200 reply, no network call;
3) frame the conversation with the study-assistant persona and call it once;
4) upstream failure -> friendly error with a 502 status.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from ..core.persona import get_system_prompt
from ..core.ports import ChatMessage
from ..llm.errors import UPSTREAM_ERRORS, friendly_provider_error
from ..llm.offline import setup_instructions
from ..llm.registry import DEFAULT_PROVIDERS, ProviderSpec, select_provider

logger = logging.getLogger(__name__)

_ALLOWED_ROLES = ("user", "assistant")


@dataclass(frozen=True, slots=True)
class RelayReply:
    status_code: int
    message: str | None = None
    error: str | None = None


def clean_history(history: Sequence[Any] | None) -> list[ChatMessage]:
    """Keep well-formed {role, content} turns; unknown roles are dropped."""
    out: list[ChatMessage] = []
    for m in history or []:
        if not isinstance(m, dict):
            continue
        role = m.get("role")
        content = m.get("content")
        if role not in _ALLOWED_ROLES or not isinstance(content, str):
            continue
        out.append({"role": str(role), "content": content})
    return out


class ChatRelay:
    def __init__(
        self,
        settings: Any,
        *,
        providers: Sequence[ProviderSpec] = DEFAULT_PROVIDERS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._providers = tuple(providers)
        self._http_client = http_client

    @property
    def setup_message(self) -> str:
        return setup_instructions(p.credential_env for p in self._providers)

    def configured_provider(self) -> str | None:
        selected = select_provider(self._settings, self._providers)
        return selected[0].name if selected else None

    async def handle(self, message: str, history: Sequence[Any] | None = None) -> RelayReply:
        text = (message or "").strip() if isinstance(message, str) else ""
        if not text:
            return RelayReply(status_code=400, error="message is required")

        selected = select_provider(self._settings, self._providers)
        if selected is None:
            logger.info("Relay: no provider credential configured; returning setup instructions.")
            return RelayReply(status_code=200, message=self.setup_message)

        spec, api_key = selected
        messages = [*clean_history(history), {"role": "user", "content": text}]

        try:
            provider = spec.factory(self._settings, api_key, self._http_client)
            reply = await provider.generate(messages, get_system_prompt())
        except UPSTREAM_ERRORS as e:
            logger.warning("Relay: %s failed (%s)", spec.name, e.__class__.__name__, exc_info=True)
            return RelayReply(status_code=502, error=friendly_provider_error(spec.name, e))
        except Exception:
            # Misconfiguration (factory ValueError) or an unexpected SDK payload.
            logger.exception("Relay: %s crashed", spec.name)
            return RelayReply(status_code=502, error=f"{spec.name} request failed.")

        logger.info("Relay: %s replied (%s chars)", spec.name, len(reply))
        return RelayReply(status_code=200, message=reply)
