"""
Chat Routes

Session lifecycle endpoints for one named connection: new turns, regenerate,
auto-fix, running edited SQL, and loading or clearing stored sessions.
"""

import logging
from functools import partial

from fastapi import APIRouter

from askdb.chat.controller import ChatController
from askdb.connectors.postgres import execute_sql, fetch_schema
from askdb.models.api import (
    ChatActionRequest,
    ChatSessionsResponse,
    ChatStateResponse,
    ChatTurnRequest,
)
from askdb.models.schema import Table

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/connections/{name}/chat")


async def _controller(
    name: str,
    uri: str | None = None,
    schema: list[Table] | None = None,
    generates: bool = False,
) -> ChatController:
    """
    Look up the connection's controller and apply per-request overrides.

    A generating request that names a database but sends no schema uses the
    controller's snapshot, introspecting ``uri`` when there is none yet.
    """
    from askdb.api.main import get_services

    controller = get_services().chats.get(name)
    if uri:
        controller.executor = partial(execute_sql, uri)
    if schema is not None:
        controller.schema = list(schema)
    elif generates and uri and not controller.schema:
        controller.schema = await fetch_schema(uri)
        logger.info(
            "Loaded schema for chat",
            extra={"connection": name, "table_count": len(controller.schema)},
        )
    return controller


def _state(controller: ChatController, changed: bool = True) -> ChatStateResponse:
    return ChatStateResponse(**controller.state.model_dump(), changed=changed)


@router.get("", response_model=ChatStateResponse)
async def get_state(name: str) -> ChatStateResponse:
    return _state(await _controller(name))


@router.post("/messages", response_model=ChatStateResponse)
async def send_message(name: str, request: ChatTurnRequest) -> ChatStateResponse:
    """
    Run a new user turn.

    The generated SQL is executed when a connection string is known for this
    chat; an execution failure is reported in ``execution_error``.
    """
    controller = await _controller(name, request.uri, request.schema_, generates=True)
    await controller.submit(request.prompt)
    return _state(controller)


@router.post("/regenerate", response_model=ChatStateResponse)
async def regenerate(name: str, request: ChatActionRequest | None = None) -> ChatStateResponse:
    request = request or ChatActionRequest()
    controller = await _controller(name, request.uri, request.schema_, generates=True)
    changed = await controller.regenerate()
    return _state(controller, changed)


@router.post("/auto-fix", response_model=ChatStateResponse)
async def auto_fix(name: str, request: ChatActionRequest | None = None) -> ChatStateResponse:
    """Correct the last SQL using ``error`` or the last execution error."""
    request = request or ChatActionRequest()
    controller = await _controller(name, request.uri, request.schema_, generates=True)
    changed = await controller.auto_fix(request.error)
    return _state(controller, changed)


@router.post("/run", response_model=ChatStateResponse)
async def run(name: str, request: ChatActionRequest | None = None) -> ChatStateResponse:
    """Execute the (optionally edited) SQL of the active session."""
    request = request or ChatActionRequest()
    controller = await _controller(name, request.uri, request.schema_)
    await controller.run(request.sql)
    return _state(controller)


@router.post("/new", response_model=ChatStateResponse)
async def new_chat(name: str) -> ChatStateResponse:
    controller = await _controller(name)
    controller.new_chat()
    return _state(controller)


@router.post("/load/{session_id}", response_model=ChatStateResponse)
async def load_session(name: str, session_id: str) -> ChatStateResponse:
    """Restore a stored session; an unknown id leaves the state unchanged."""
    controller = await _controller(name)
    changed = await controller.load(session_id)
    return _state(controller, changed)


@router.get("/sessions", response_model=ChatSessionsResponse)
async def list_sessions(name: str) -> ChatSessionsResponse:
    controller = await _controller(name)
    return ChatSessionsResponse(sessions=await controller.sessions())


@router.delete("/sessions", response_model=ChatSessionsResponse)
async def clear_sessions(name: str) -> ChatSessionsResponse:
    controller = await _controller(name)
    await controller.clear_history()
    logger.info("Chat history cleared via API", extra={"connection": name})
    return ChatSessionsResponse(sessions=[])
