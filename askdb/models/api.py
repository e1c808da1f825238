"""
API Request/Response Models

Pydantic models for FastAPI endpoints.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from askdb.models.chat import ChatSession, Message, QueryResult
from askdb.models.schema import Table


class GenerateRequest(BaseModel):
    """Request model for SQL generation."""

    messages: list[Message] | None = Field(
        default=None, description="Prior conversation, oldest first"
    )
    prompt: str | None = Field(default=None, description="New user question")
    schema_: list[Table] = Field(
        default_factory=list,
        validation_alias=AliasChoices("schema", "schema_"),
        serialization_alias="schema",
        description="Schema snapshot of the target database",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "prompt": "How many orders were placed last week?",
                "schema": [
                    {
                        "name": "orders",
                        "columns": [{"name": "id", "type": "integer"}],
                    }
                ],
            }
        },
    )


class GenerateResponse(BaseModel):
    """Response model for SQL generation."""

    sql: str = Field(..., description="Generated SQL statement")


class TitleRequest(BaseModel):
    messages: list[Message] = Field(default_factory=list)


class TitleResponse(BaseModel):
    title: str


class SampleQuestionsRequest(BaseModel):
    schema_: list[Table] = Field(
        default_factory=list,
        validation_alias=AliasChoices("schema", "schema_"),
        serialization_alias="schema",
    )

    model_config = ConfigDict(populate_by_name=True)


class SampleQuestionsResponse(BaseModel):
    suggestions: list[str] = Field(default_factory=list)


class QuotaResetResponse(BaseModel):
    success: bool


class QuotaStatusResponse(BaseModel):
    """Current usage of the shared request counter."""

    count: int
    limit: int
    remaining: int
    ttl: int | None = Field(default=None, description="Seconds until the window resets")


class SchemaRequest(BaseModel):
    uri: str = Field(..., min_length=1, description="Connection string of the target database")
    include_samples: bool = False


class QueryRequest(BaseModel):
    uri: str = Field(..., min_length=1)
    sql: str = Field(..., min_length=1)


class ChatTurnRequest(BaseModel):
    """A user turn for a named connection's chat."""

    prompt: str
    uri: str | None = Field(default=None, description="Executes generated SQL when given")
    schema_: list[Table] | None = Field(
        default=None,
        validation_alias=AliasChoices("schema", "schema_"),
        serialization_alias="schema",
        description="Replaces the controller's schema snapshot when given",
    )

    model_config = ConfigDict(populate_by_name=True)


class ChatActionRequest(BaseModel):
    """Regenerate, auto-fix, run and load requests."""

    uri: str | None = None
    sql: str | None = Field(default=None, description="Edited SQL to run")
    schema_: list[Table] | None = Field(
        default=None,
        validation_alias=AliasChoices("schema", "schema_"),
        serialization_alias="schema",
    )
    error: str | None = Field(default=None, description="Execution error for auto-fix")

    model_config = ConfigDict(populate_by_name=True)


class ChatStateResponse(BaseModel):
    connection: str
    session_id: str | None = None
    messages: list[Message] = Field(default_factory=list)
    sql: str | None = None
    sql_editable: str | None = None
    result: QueryResult | None = None
    error: str | None = None
    execution_error: str | None = None
    changed: bool = True


class ChatSessionsResponse(BaseModel):
    sessions: list[ChatSession] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="Current timestamp (ISO 8601)")
    checks: dict[str, bool] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: str
    current: int | None = None
    limit: int | None = None
    details: dict[str, Any] | None = None
