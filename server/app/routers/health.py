"""Health check router."""

import logging
from datetime import datetime

from fastapi import APIRouter

from ..schemas.health import HealthResponse, HealthStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/health", tags=["health"])


@router.post("/ping", response_model=HealthResponse)
async def health_ping() -> HealthResponse:
    """
    Liveness ping for API clients.

    Returns current service status and timestamp without touching the database.
    """
    response = HealthResponse(status=HealthStatus.HEALTHY, timestamp=datetime.utcnow())
    logger.debug("Health ping", extra={"timestamp": response.timestamp.isoformat()})
    return response
