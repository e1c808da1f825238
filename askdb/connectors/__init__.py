"""
Target database connectors (schema introspection and query execution).
"""

from askdb.connectors.base import (
    BaseConnector,
    ConnectionError,
    ConnectorError,
    ExecutionError,
    SchemaError,
)
from askdb.connectors.postgres import PostgresConnector, execute_sql, fetch_schema

__all__ = [
    "BaseConnector",
    "ConnectionError",
    "ConnectorError",
    "ExecutionError",
    "PostgresConnector",
    "SchemaError",
    "execute_sql",
    "fetch_schema",
]
