"""
Cursebreakers Backend - Health Check Route
===========================================

What:  Liveness and database readiness for monitors and load balancers.
How:   Runs SELECT 1 through the request's session and reports the result.

Status levels:
    - healthy:   database reachable
    - degraded:  process is up but the database did not answer
    Both return HTTP 200 with `message: "Server: OK (200)"`, since the
    process itself is serving.
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from cursebreakers import __version__
from cursebreakers.database import get_db_session
from cursebreakers.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(db: AsyncSession = Depends(get_db_session)) -> HealthResponse:
    """Probe the database and return aggregate status and uptime."""
    db_status = "connected"
    overall = "healthy"

    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "degraded"
        await db.rollback()
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        message="Server: OK (200)",
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
