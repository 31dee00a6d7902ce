"""
Leisure Catalog API — Health Check Route
==========================================

What:  Health check endpoint for monitoring and load balancer checks.
How:   Pings the database through the shared pool and reports the result.
       Always answers 200; the body carries the status.

Status levels:
    - healthy:   Database answered SELECT 1
    - unhealthy: Database unreachable (catalog endpoints will answer 500)
"""

import logging
import time

from fastapi import APIRouter, Depends

from leisure import __version__
from leisure.database import Database, get_database
from leisure.schemas.catalog import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(database: Database = Depends(get_database)) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await database.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
