"""
Quota Routes

Inspect and reset the system-wide request counter.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from askdb.models.api import QuotaResetResponse, QuotaStatusResponse
from askdb.quota.limiter import reset_password_matches

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_services():
    from askdb.api.main import get_services

    return get_services()


@router.get("/quota", response_model=QuotaStatusResponse)
async def quota_status() -> QuotaStatusResponse:
    services = _get_services()
    return QuotaStatusResponse(**await services.rate_limiter.usage())


@router.post("/quota/reset", response_model=QuotaResetResponse)
async def reset_quota(password: str = "") -> QuotaResetResponse | JSONResponse:
    """
    Zero the counter when ``password`` matches the configured reset secret.

    With no secret configured every call is rejected.
    """
    services = _get_services()
    if not reset_password_matches(services.settings.quota.reset_password, password):
        logger.warning("Rejected quota reset with invalid password")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Unauthorized"},
        )

    await services.rate_limiter.reset()
    logger.info("Quota counter reset")
    return QuotaResetResponse(success=True)
