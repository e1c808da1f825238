"""
Chat session lifecycle for one named connection.

States:
    NONE       no active session id, nothing recorded yet
    ACTIVE     messages accumulated in memory for the current turn
    PERSISTED  the conversation is recorded in the connection's session list

A successful turn without an active session creates one (NONE -> PERSISTED)
and schedules a background title; later turns overwrite it in place.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence

from pydantic import BaseModel, Field

from askdb.chat.history import SessionHistory, TitleScheduler
from askdb.connectors.base import ConnectorError
from askdb.errors import AskDBError, EmptyRequest
from askdb.generation.generator import SQLGenerator, auto_fix_message
from askdb.models.chat import ChatSession, Message, QueryResult
from askdb.models.schema import Table

logger = logging.getLogger(__name__)

QueryExecutor = Callable[[str], Awaitable[QueryResult]]


class ChatState(BaseModel):
    """Snapshot of the in-memory conversation of one connection."""

    connection: str
    session_id: str | None = None
    messages: list[Message] = Field(default_factory=list)
    sql: str | None = None
    sql_editable: str | None = None
    result: QueryResult | None = None
    error: str | None = None
    execution_error: str | None = None


class ChatController:
    """
    Owns the active conversation of one connection.

    Attributes:
        connection: Connection name the sessions are scoped to
        schema: Current schema snapshot sent with every generation
        executor: Runs generated SQL; None leaves results empty
    """

    def __init__(
        self,
        connection: str,
        generator: SQLGenerator,
        history: SessionHistory,
        titles: TitleScheduler,
        schema: Sequence[Table] | None = None,
        executor: QueryExecutor | None = None,
    ) -> None:
        self.connection = connection
        self.generator = generator
        self.history = history
        self.titles = titles
        self.schema: list[Table] = list(schema or [])
        self.executor = executor
        self._reset_state()

    def _reset_state(self) -> None:
        self.session_id: str | None = None
        self.messages: list[Message] = []
        self.sql: str | None = None
        self.sql_editable: str | None = None
        self.result: QueryResult | None = None
        self.error: str | None = None
        self.execution_error: str | None = None

    @property
    def state(self) -> ChatState:
        return ChatState(
            connection=self.connection,
            session_id=self.session_id,
            messages=list(self.messages),
            sql=self.sql,
            sql_editable=self.sql_editable,
            result=self.result,
            error=self.error,
            execution_error=self.execution_error,
        )

    def _clear_outputs(self) -> None:
        self.sql = None
        self.sql_editable = None
        self.result = None
        self.error = None
        self.execution_error = None

    async def submit(self, prompt: str) -> ChatState:
        """
        Run a new user turn.

        Raises:
            EmptyRequest: Blank prompt (no quota is consumed)
            AskDBError: Generation failures, after recording them in ``error``
        """
        if not prompt or not prompt.strip():
            raise EmptyRequest()

        self._clear_outputs()
        history = [*self.messages, Message(role="user", content=prompt)]
        self.messages = history
        sql = await self._generate(history)
        await self._complete_turn(history, sql)
        return self.state

    async def regenerate(self) -> bool:
        """
        Replace the last assistant answer with a fresh one.

        Returns:
            False (and changes nothing) unless the last message is from the assistant
        """
        if not self.messages or self.messages[-1].role != "assistant":
            return False

        remaining = self.messages[:-1]
        self.error = None
        sql = await self._generate(remaining)
        self.execution_error = None
        await self._complete_turn(remaining, sql)
        return True

    async def auto_fix(self, error_text: str | None = None) -> bool:
        """
        Ask the model to correct the last SQL after an execution failure.

        Args:
            error_text: Error to report; defaults to the last execution error

        Returns:
            False when there is no execution error to fix
        """
        error_text = error_text or self.execution_error
        if not error_text:
            return False

        prior = list(self.messages)
        history = [*prior, auto_fix_message(error_text)]
        self.messages = history
        self._clear_outputs()
        try:
            sql = await self.generator.auto_fix(self.schema, prior, error_text)
        except AskDBError as exc:
            self.error = exc.message
            raise
        await self._complete_turn(history, sql)
        return True

    async def run(self, sql: str | None = None) -> ChatState:
        """Execute (optionally edited) SQL and record the outcome on the session."""
        if sql is not None:
            self.sql_editable = sql
        statement = self.sql_editable or self.sql
        if statement:
            await self._execute(statement)
            # Only a successful generation creates a session
            if self.session_id is not None:
                await self._sync_session(create=False)
        return self.state

    def new_chat(self) -> None:
        """Detach from the active session; persisted history is untouched."""
        self._reset_state()

    async def load(self, session_id: str) -> bool:
        """Restore a stored session; an unknown id changes nothing."""
        session = await self.history.find(self.connection, session_id)
        if session is None:
            return False

        self.session_id = session.id
        self.messages = list(session.messages)
        self.sql = session.sql
        self.sql_editable = session.sql_editable
        self.result = session.result
        self.error = None
        self.execution_error = None
        self.titles.request(self.connection, session)
        return True

    async def sessions(self) -> list[ChatSession]:
        return await self.history.list(self.connection)

    async def clear_history(self) -> None:
        cleared = await self.history.list(self.connection)
        await self.history.clear(self.connection)
        self.titles.forget(session.id for session in cleared)
        self.session_id = None

    async def _generate(self, messages: list[Message]) -> str:
        try:
            return await self.generator.generate(self.schema, messages=messages)
        except AskDBError as exc:
            self.error = exc.message
            raise

    async def _complete_turn(self, history: list[Message], sql: str) -> None:
        self.sql = sql
        self.sql_editable = sql
        self.messages = [*history, Message(role="assistant", content=sql)]
        await self._execute(sql)
        await self._sync_session()

    async def _execute(self, sql: str) -> None:
        self.result = None
        self.execution_error = None
        if self.executor is None:
            return
        try:
            self.result = await self.executor(sql)
        except ConnectorError as exc:
            self.execution_error = str(exc)
            self.error = self.execution_error
            logger.info(
                "Generated SQL failed to execute",
                extra={"connection": self.connection, "error": self.execution_error},
            )

    async def _sync_session(self, create: bool = True) -> None:
        if not self.messages:
            return

        changes = {
            "messages": list(self.messages),
            "sql": self.sql,
            "sql_editable": self.sql_editable,
            "result": self.result,
        }
        if self.session_id is not None:
            updated = await self.history.update(self.connection, self.session_id, **changes)
            if updated is not None or not create:
                return

        session = ChatSession(**changes)
        await self.history.add(self.connection, session)
        self.session_id = session.id
        self.titles.request(self.connection, session)


class ChatRegistry:
    """Lazily created controllers, one per connection name."""

    def __init__(
        self,
        generator: SQLGenerator,
        history: SessionHistory,
        titles: TitleScheduler,
    ) -> None:
        self.generator = generator
        self.history = history
        self.titles = titles
        self._controllers: dict[str, ChatController] = {}

    def get(self, connection: str) -> ChatController:
        controller = self._controllers.get(connection)
        if controller is None:
            controller = ChatController(connection, self.generator, self.history, self.titles)
            self._controllers[connection] = controller
        return controller
