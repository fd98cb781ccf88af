"""
Campus Roster Backend — Health Check Routes
============================================

What:  Liveness (/healthz) and readiness (/readyz) probes.
Who:   Called by Docker health checks, Kubernetes probes and load balancers.

Probe Semantics:
    /healthz  Always 200 while the process can serve HTTP. Never touches the
              database, so a database outage does not get the process killed.
    /readyz   Runs SELECT 1 on a pooled connection. 200 "ready" when it
              succeeds, 503 "not ready" otherwise, so traffic is held back
              until the store is reachable again.
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from roster import __version__
from roster.database import ping_database
from roster.schemas.roster import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Process start, for uptime reporting
_start_time = time.time()


@router.get(
    "/healthz",
    response_model=HealthResponse,
    summary="Liveness probe",
)
async def liveness() -> HealthResponse:
    """Report that the process is up. Unconditionally 200."""
    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )


@router.get(
    "/readyz",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessResponse}},
    summary="Readiness probe",
)
async def readiness():
    """
    Check that the database answers a trivial query.

    Returns:
        200 {"status": "ready"} or 503 {"status": "not ready"}
    """
    try:
        await ping_database()
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Readiness check: database unreachable: %s", str(e))
        return JSONResponse(status_code=503, content={"status": "not ready"})

    return ReadinessResponse(status="ready")
