"""
Post Service: Health Check Route
==================================

What:  Health check endpoint for monitoring and load balancer health checks.
How:   Runs SELECT 1 on the shared engine and reports the result.
Who:   Called by container health checks, load balancers, and monitoring.

Status levels:
    - healthy:   Database reachable
    - unhealthy: Database unreachable

The endpoint always answers 200 so checkers can read the body.
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from post_api import __version__
from post_api.database import engine
from post_api.schemas.post import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    """
    Check database connectivity and return aggregate status.

    SELECT 1 verifies both the pool checkout and query execution without
    touching the Post table.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
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
