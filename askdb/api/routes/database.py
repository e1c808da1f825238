"""
Database Routes

Schema introspection and statement execution against a caller-supplied
connection string. Connector failures are mapped by the app's handlers.
"""

import logging

from fastapi import APIRouter

from askdb.connectors.postgres import execute_sql, fetch_schema
from askdb.models.api import QueryRequest, SchemaRequest
from askdb.models.chat import QueryResult
from askdb.models.schema import Table

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/schema", response_model=list[Table])
async def schema(request: SchemaRequest) -> list[Table]:
    """Introspect the public schema, optionally with up to five sample rows per table."""
    return await fetch_schema(request.uri, include_samples=request.include_samples)


@router.post("/query", response_model=QueryResult)
async def query(request: QueryRequest) -> QueryResult:
    """Run one statement and return its columns and rows."""
    result = await execute_sql(request.uri, request.sql)
    logger.info(
        "Executed query",
        extra={"row_count": result.row_count, "execution_time_ms": result.execution_time_ms},
    )
    return result
