"""Durable storage for chat sessions in the system database."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import asyncpg

from askdb.connectors.postgres import normalize_dsn
from askdb.models.chat import ChatSession

MAX_SESSION_MESSAGES = 50

_CREATE_SESSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS chat_sessions (
    session_id TEXT PRIMARY KEY,
    connection_name TEXT NOT NULL,
    title TEXT,
    messages JSONB NOT NULL,
    sql TEXT,
    sql_editable TEXT,
    result JSONB,
    created_at TIMESTAMPTZ NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL
);
"""

_CREATE_SESSIONS_CONNECTION_INDEX = """
CREATE INDEX IF NOT EXISTS chat_sessions_connection_created_idx
ON chat_sessions (connection_name, created_at DESC);
"""


class ChatSessionStore:
    """Persist chat sessions, one row per session id."""

    def __init__(self, database_url: str) -> None:
        self._database_url = database_url
        self._pool: asyncpg.Pool | None = None

    async def initialize(self) -> None:
        if self._pool is None:
            if not self._database_url:
                raise ValueError("SYSTEM_DATABASE_URL must be set for chat session storage.")
            self._pool = await asyncpg.create_pool(
                dsn=normalize_dsn(self._database_url), min_size=1, max_size=5
            )
        await self._pool.execute(_CREATE_SESSIONS_TABLE)
        await self._pool.execute(_CREATE_SESSIONS_CONNECTION_INDEX)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def list_sessions(self, connection_name: str) -> list[ChatSession]:
        """Sessions of one connection, newest first."""
        self._ensure_pool()
        rows = await self._pool.fetch(
            """
            SELECT session_id, title, messages, sql, sql_editable, result, created_at
            FROM chat_sessions
            WHERE connection_name = $1
            ORDER BY created_at DESC
            """,
            connection_name,
        )
        return [self._row_to_session(row) for row in rows]

    async def upsert_session(self, connection_name: str, session: ChatSession) -> None:
        self._ensure_pool()
        payload = session.model_dump(mode="json")
        await self._pool.execute(
            """
            INSERT INTO chat_sessions (
                session_id,
                connection_name,
                title,
                messages,
                sql,
                sql_editable,
                result,
                created_at,
                updated_at
            ) VALUES (
                $1, $2, $3, $4::jsonb, $5, $6, $7::jsonb, $8, $9
            )
            ON CONFLICT (session_id) DO UPDATE SET
                title = COALESCE(EXCLUDED.title, chat_sessions.title),
                messages = EXCLUDED.messages,
                sql = EXCLUDED.sql,
                sql_editable = EXCLUDED.sql_editable,
                result = EXCLUDED.result,
                updated_at = EXCLUDED.updated_at
            WHERE EXCLUDED.updated_at >= chat_sessions.updated_at
            """,
            session.id,
            connection_name,
            session.title,
            json.dumps(payload["messages"][-MAX_SESSION_MESSAGES:]),
            session.sql,
            session.sql_editable,
            json.dumps(payload["result"]) if payload["result"] is not None else None,
            session.created,
            datetime.now(UTC),
        )

    async def delete_sessions(self, connection_name: str) -> int:
        self._ensure_pool()
        result = await self._pool.execute(
            "DELETE FROM chat_sessions WHERE connection_name = $1",
            connection_name,
        )
        try:
            return int(str(result).split()[-1])
        except (ValueError, IndexError):
            return 0

    def _ensure_pool(self) -> None:
        if self._pool is None:
            raise RuntimeError("ChatSessionStore not initialized")

    @staticmethod
    def _decode_json_field(value: Any) -> Any:
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return None
        return value

    @classmethod
    def _row_to_session(cls, row: asyncpg.Record) -> ChatSession:
        return ChatSession(
            id=str(row["session_id"]),
            title=row["title"],
            messages=cls._decode_json_field(row["messages"]) or [],
            sql=row["sql"],
            sql_editable=row["sql_editable"],
            result=cls._decode_json_field(row["result"]),
            created=row["created_at"],
        )
