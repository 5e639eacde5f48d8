"""
CatTrack Backend — Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer checks.
How:   Pings the document store and reports version and uptime.
Who:   Docker health checks, load balancers, monitoring.

Status levels:
    - healthy:   Store reachable (HTTP 200)
    - unhealthy: Store unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from cattrack import __version__
from cattrack.dependencies import get_user_store
from cattrack.schemas.common import HealthResponse
from cattrack.services.store_base import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    store: DocumentStore = Depends(get_user_store),
) -> HealthResponse:
    if await store.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"
        response.status_code = 503
        logger.warning("Health check: document store unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
