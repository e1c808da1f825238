"""
AskDB Models Module

Pydantic models for type-safe data validation throughout the application.

Available Models:
    Schema Models:
        - Table: One table of a schema snapshot
        - Column: Column name and optional type

    Chat Models:
        - Message: Conversation message (user or assistant)
        - ChatSession: Persisted conversation thread for one connection
        - QueryResult: Columns and rows returned by the target database

    API Models (askdb.models.api):
        - GenerateRequest / GenerateResponse
        - TitleRequest / TitleResponse
        - SampleQuestionsRequest / SampleQuestionsResponse
        - SchemaRequest, QueryRequest, QuotaStatusResponse, chat payloads
"""

from askdb.models.chat import ChatSession, Message, QueryResult, new_session_id
from askdb.models.schema import MAX_SAMPLE_ROWS, Column, Table

__all__ = [
    "MAX_SAMPLE_ROWS",
    "ChatSession",
    "Column",
    "Message",
    "QueryResult",
    "Table",
    "new_session_id",
]
