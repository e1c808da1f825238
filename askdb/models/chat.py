"""
Conversation and chat session models.
"""

from datetime import UTC, datetime
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field


class Message(BaseModel):
    """One turn of the dialogue transcript sent to the model."""

    role: Literal["user", "assistant"] = Field(..., description="Message role")
    content: str = Field(..., description="Message content")


class QueryResult(BaseModel):
    """Result of executing a statement against the target database."""

    columns: list[str] = Field(default_factory=list, description="Column names")
    rows: list[dict[str, Any]] = Field(default_factory=list, description="Rows keyed by column")
    row_count: int = Field(default=0, ge=0, description="Number of rows returned")
    execution_time_ms: float = Field(default=0.0, ge=0.0, description="Execution time in ms")


def new_session_id() -> str:
    return uuid4().hex


class ChatSession(BaseModel):
    """
    Persisted record of one conversation thread for a named connection.

    Sessions are created on the first successful generation, overwritten in
    place on later turns and only removed by an explicit clear.
    """

    id: str = Field(default_factory=new_session_id, description="Opaque unique token")
    messages: list[Message] = Field(default_factory=list)
    created: datetime = Field(default_factory=lambda: datetime.now(UTC))
    title: str | None = Field(None, description="Short derived label")
    sql: str | None = Field(None, description="Last generated SQL")
    sql_editable: str | None = Field(None, description="Last SQL as edited by the user")
    result: QueryResult | None = Field(None, description="Last query result")
