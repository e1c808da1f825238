"""
Per-connection chat session history.

Sessions are kept newest first, keyed by connection name. Every mutation is a
read-modify-write against the latest in-memory list for that connection and
merges on session id, so a background title update and a foreground overwrite
of the same connection never lose each other's changes. Persistence to the
optional store happens after the in-memory step.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from askdb.chat.store import ChatSessionStore
from askdb.generation.auxiliary import TitleGenerator
from askdb.models.chat import ChatSession

logger = logging.getLogger(__name__)


class SessionHistory:
    """Connection-scoped collections of chat sessions."""

    def __init__(self, store: ChatSessionStore | None = None) -> None:
        self.store = store
        self._sessions: dict[str, list[ChatSession]] = {}
        self._loaded: set[str] = set()

    async def _ensure_loaded(self, connection: str) -> None:
        if self.store is None or connection in self._loaded:
            return
        stored = await self.store.list_sessions(connection)
        self._loaded.add(connection)
        current = self._sessions.get(connection, [])
        known = {session.id for session in current}
        merged = current + [session for session in stored if session.id not in known]
        merged.sort(key=lambda session: session.created, reverse=True)
        self._sessions[connection] = merged

    async def list(self, connection: str) -> list[ChatSession]:
        await self._ensure_loaded(connection)
        return list(self._sessions.get(connection, []))

    async def find(self, connection: str, session_id: str) -> ChatSession | None:
        await self._ensure_loaded(connection)
        for session in self._sessions.get(connection, []):
            if session.id == session_id:
                return session
        return None

    async def add(self, connection: str, session: ChatSession) -> ChatSession:
        await self._ensure_loaded(connection)
        self._sessions[connection] = [session, *self._sessions.get(connection, [])]
        logger.info(
            "Chat session created",
            extra={"connection": connection, "session_id": session.id},
        )
        await self._persist(connection, session)
        return session

    async def update(self, connection: str, session_id: str, **changes: Any) -> ChatSession | None:
        """Merge ``changes`` into one session; returns None for an unknown id."""
        await self._ensure_loaded(connection)
        updated: ChatSession | None = None
        sessions = []
        for session in self._sessions.get(connection, []):
            if session.id == session_id:
                session = session.model_copy(update=changes)
                updated = session
            sessions.append(session)
        if updated is None:
            return None
        self._sessions[connection] = sessions
        await self._persist(connection, updated)
        return updated

    async def attach_title(self, connection: str, session_id: str, title: str) -> ChatSession | None:
        updated = await self.update(connection, session_id, title=title)
        if updated is None:
            logger.debug(
                "Dropping title for missing session",
                extra={"connection": connection, "session_id": session_id},
            )
        return updated

    async def clear(self, connection: str) -> None:
        self._sessions.pop(connection, None)
        if self.store is not None:
            deleted = await self.store.delete_sessions(connection)
            self._loaded.add(connection)
            logger.info(
                "Chat history cleared",
                extra={"connection": connection, "deleted": deleted},
            )

    async def _persist(self, connection: str, session: ChatSession) -> None:
        if self.store is not None:
            await self.store.upsert_session(connection, session)


TitleCallback = Callable[[str, str, str], Awaitable[Any]]


class TitleScheduler:
    """
    Fire-and-forget title derivation.

    Each session id is summarized at most once. The result is delivered
    through ``on_title(connection, session_id, title)``; failures leave the
    session untitled.
    """

    def __init__(self, generator: TitleGenerator, on_title: TitleCallback) -> None:
        self.generator = generator
        self.on_title = on_title
        self._requested: set[str] = set()
        self._tasks: set[asyncio.Task] = set()

    def request(self, connection: str, session: ChatSession) -> bool:
        if session.title or not session.messages or session.id in self._requested:
            return False
        self._requested.add(session.id)
        task = asyncio.create_task(self._derive(connection, session.id, list(session.messages)))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    def forget(self, session_ids: Iterable[str]) -> None:
        """Drop bookkeeping for sessions that no longer exist."""
        self._requested.difference_update(session_ids)

    async def _derive(self, connection: str, session_id: str, messages: list) -> None:
        try:
            title = await self.generator.generate(messages)
            if title:
                await self.on_title(connection, session_id, title)
        except Exception as exc:
            logger.warning(
                "Title derivation failed",
                extra={"connection": connection, "session_id": session_id, "error": str(exc)},
            )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for in-flight title tasks (shutdown and tests)."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
