"""
Health Check Routes

FastAPI endpoints for service liveness.
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, status

from askdb import __version__
from askdb.models.api import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health() -> HealthResponse:
    """
    Basic liveness check.

    Returns 200 OK if the service is running. ``checks`` reports whether the
    services are wired and a model credential is configured.
    """
    from askdb.api.main import app_state

    services = app_state.get("services")
    checks = {
        "services": services is not None,
        "llm_configured": bool(services and services.completion.is_configured),
        "session_store": bool(services and services.session_store is not None),
    }
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
        checks=checks,
    )
