# src/studyflow/chat/chat_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..core.dates import parse_datetime
from ..core.ports import ChatMessage

DEFAULT_SESSION_TITLE = "New Chat"
TITLE_MAX_CHARS = 30


class Role(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


def title_from_message(content: str) -> str:
    """First 30 characters, with '...' appended when the message was longer."""
    if len(content) > TITLE_MAX_CHARS:
        return content[:TITLE_MAX_CHARS] + "..."
    return content


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    content: str
    role: Role
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "role": self.role.value,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Message:
        return cls(
            id=str(raw["id"]),
            content=str(raw.get("content", "")),
            role=Role(raw["role"]),
            timestamp=parse_datetime(raw["timestamp"]),
        )

    def to_history(self) -> ChatMessage:
        return {"role": self.role.value, "content": self.content}


@dataclass(slots=True)
class ChatSession:
    id: str
    title: str
    created_at: datetime
    last_updated: datetime
    messages: tuple[Message, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "messages": [m.to_dict() for m in self.messages],
            "createdAt": self.created_at.isoformat(),
            "lastUpdated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ChatSession:
        return cls(
            id=str(raw["id"]),
            title=str(raw.get("title") or DEFAULT_SESSION_TITLE),
            created_at=parse_datetime(raw["createdAt"]),
            last_updated=parse_datetime(raw.get("lastUpdated") or raw["createdAt"]),
            messages=tuple(Message.from_dict(m) for m in raw.get("messages") or []),
        )

    def history(self) -> list[ChatMessage]:
        return [m.to_history() for m in self.messages]
