"""
Base Database Connector

Abstract interface for the target database: schema introspection
(SchemaProvider) and statement execution (QueryExecutor).

All connectors must implement:
- connect(): Establish connection
- execute(): Run a statement and return columns + rows
- get_schema(): Introspect tables, typed columns and optional sample rows
- close(): Clean up connections
"""

import logging
from abc import ABC, abstractmethod

from askdb.errors import ConnectionError, ConnectorError, ExecutionError, SchemaError
from askdb.models.chat import QueryResult
from askdb.models.schema import Table

logger = logging.getLogger(__name__)

__all__ = [
    "BaseConnector",
    "ConnectionError",
    "ConnectorError",
    "ExecutionError",
    "SchemaError",
]


class BaseConnector(ABC):
    """
    Abstract base class for target database connectors.

    Usage:
        async with PostgresConnector(uri) as connector:
            tables = await connector.get_schema()
            result = await connector.execute("SELECT 1")
    """

    def __init__(self, dsn: str, timeout: int = 30, **kwargs):
        """
        Initialize connector.

        Args:
            dsn: Connection string of the target database
            timeout: Statement timeout in seconds
            **kwargs: Additional connector-specific parameters
        """
        self.dsn = dsn
        self.timeout = timeout
        self.kwargs = kwargs

        self._connection = None
        self._connected = False

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish database connection. Idempotent.

        Raises:
            ConnectionError: If connection fails
        """

    @abstractmethod
    async def execute(self, query: str) -> QueryResult:
        """
        Execute a SQL statement.

        Raises:
            ExecutionError: If the statement fails
            ConnectionError: If not connected
        """

    @abstractmethod
    async def get_schema(self, include_samples: bool = False) -> list[Table]:
        """
        Introspect the target schema.

        Raises:
            SchemaError: If introspection fails
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the connection. Safe to call multiple times."""

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    def __repr__(self) -> str:
        status = "connected" if self._connected else "disconnected"
        return f"<{self.__class__.__name__} ({status})>"
