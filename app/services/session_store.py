"""
Session store.

Maps chat ids to ``ChatSession`` objects. Sessions are created lazily on the
first event of a chat and are never evicted.
"""

from abc import ABC, abstractmethod

from loguru import logger

from app.models.session import ChatSession


class SessionStore(ABC):
    """Storage backend for chat sessions."""

    @abstractmethod
    async def get(self, chat_id: int) -> ChatSession:
        """Return the chat's session, creating an empty one if needed."""

    @abstractmethod
    async def save(self, session: ChatSession) -> None:
        """Persist a (possibly mutated) session."""

    @abstractmethod
    async def all(self) -> list[ChatSession]:
        """Return every known session."""


class MemorySessionStore(SessionStore):
    """Process-memory session store."""

    def __init__(self) -> None:
        self._sessions: dict[int, ChatSession] = {}

    async def get(self, chat_id: int) -> ChatSession:
        session = self._sessions.get(chat_id)
        if session is None:
            session = ChatSession(chat_id=chat_id)
            self._sessions[chat_id] = session
            logger.debug(f"Created session for chat {chat_id}")
        return session

    async def save(self, session: ChatSession) -> None:
        self._sessions[session.chat_id] = session

    async def all(self) -> list[ChatSession]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)
