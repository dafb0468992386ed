# src/studyflow/chat/chat_store.py

from __future__ import annotations

import logging
from dataclasses import replace

from ..core.dates import new_id, utc_now
from ..core.ports import KeyValueStorage, RelayClient
from ..storage.collection import CollectionStore
from .chat_models import DEFAULT_SESSION_TITLE, ChatSession, Message, Role, title_from_message
from .relay_client import RelayError

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I'm sorry, I encountered an error. Please try again."


class ChatStore(CollectionStore[ChatSession]):
    """
    Conversation sessions, newest first, plus the id of the active one.

    Key invariants:
    - the session title is set once, from the first user message;
    - the relay receives the history as it was before the new user message;
    - a relay failure never propagates: it becomes a fallback assistant message.
    """

    storage_key = "studyflow-chat-sessions"

    _decode = staticmethod(ChatSession.from_dict)
    _encode = staticmethod(ChatSession.to_dict)

    def __init__(self, storage: KeyValueStorage) -> None:
        super().__init__(storage)
        self.current_session_id: str | None = None
        if self._items:
            most_recent = max(self._items, key=lambda s: s.last_updated)
            self.current_session_id = most_recent.id

    @property
    def current_session(self) -> ChatSession | None:
        if self.current_session_id is None:
            return None
        return self.get(self.current_session_id)

    def create_session(self) -> ChatSession:
        now = utc_now()
        session = ChatSession(
            id=new_id(),
            title=DEFAULT_SESSION_TITLE,
            created_at=now,
            last_updated=now,
        )
        self._commit([session, *self._items])
        self.current_session_id = session.id
        logger.debug("Chat session created id=%s", session.id)
        return session

    def select_session(self, session_id: str) -> ChatSession | None:
        session = self.get(session_id)
        if session is not None:
            self.current_session_id = session.id
        return session

    def delete_session(self, session_id: str) -> bool:
        if not self.delete(session_id):
            return False
        if self.current_session_id == session_id:
            self.current_session_id = self._items[0].id if self._items else None
        return True

    def add_message(self, content: str, role: Role | str, session_id: str | None = None) -> Message | None:
        session_id = session_id or self.current_session_id
        if session_id is None:
            return None

        message = Message(id=new_id(), content=content, role=Role(role), timestamp=utc_now())

        def append(session: ChatSession) -> ChatSession:
            title = session.title
            if message.role is Role.USER and not session.messages:
                title = title_from_message(content)
            return replace(
                session,
                messages=(*session.messages, message),
                title=title,
                last_updated=message.timestamp,
            )

        if self._replace(session_id, append) is None:
            return None
        return message

    async def send_message(self, text: str, relay: RelayClient) -> str | None:
        """
        Send one user message and record the assistant reply.

        Returns the assistant text (the fallback on relay failure), or None for blank input.
        """
        text = (text or "").strip()
        if not text:
            return None

        session = self.current_session or self.create_session()
        history = session.history()

        self.add_message(text, Role.USER, session.id)

        try:
            reply = await relay.ask(text, history)
        except RelayError as e:
            logger.warning("Chat relay failed (session=%s): %s", session.id, e)
            reply = FALLBACK_REPLY

        self.add_message(reply, Role.ASSISTANT, session.id)
        return reply
