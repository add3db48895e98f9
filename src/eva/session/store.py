"""In-process, append-only session store."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from blinker import Signal
from loguru import logger

from eva.session.models import Message

AppendHandler = Callable[[str, Message], None]


@dataclass
class Session:
    """Ordered message log for one conversation."""

    session_id: str
    messages: list[Message] = field(default_factory=list)


class SessionStore:
    """Per-session message logs keyed by session id.

    Sessions are created lazily on first append and live for the process
    lifetime. Appends run on the owning event loop, so readers never see a
    partially written entry.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self.message_appended = Signal("eva.session.message_appended")

    def append(self, session_id: str, message: Message) -> Message:
        session = self._sessions.get(session_id)
        if session is None:
            session = Session(session_id)
            self._sessions[session_id] = session
            logger.debug("session.created id={}", session_id)
        session.messages.append(message)
        logger.debug("session.append id={} type={} size={}", session_id, message.type.value, len(session.messages))
        try:
            self.message_appended.send(self, session_id=session_id, message=message)
        except Exception:
            # A failing subscriber must not interrupt the caller's append.
            logger.exception("session.subscriber_failed id={} type={}", session_id, message.type.value)
        return message

    def get_messages(self, session_id: str) -> tuple[Message, ...]:
        session = self._sessions.get(session_id)
        if session is None:
            return ()
        return tuple(session.messages)

    def count(self, session_id: str) -> int:
        session = self._sessions.get(session_id)
        return len(session.messages) if session is not None else 0

    def has_session(self, session_id: str) -> bool:
        return session_id in self._sessions

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    def on_append(self, handler: AppendHandler) -> Callable[[], None]:
        """Subscribe to new messages; returns an unsubscribe callable."""

        def _receiver(sender: Any, *, session_id: str, message: Message) -> None:
            handler(session_id, message)

        self.message_appended.connect(_receiver, weak=False)
        return lambda: self.message_appended.disconnect(_receiver)
