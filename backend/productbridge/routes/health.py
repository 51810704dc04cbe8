"""
ProductBridge Backend — Health Check Route
============================================

What:  Liveness/readiness probe for Docker and load balancers.
How:   Runs SELECT 1 through the datastore. The only dependency is the
       database, so the service is either healthy or unhealthy.
"""

import logging
import time

from fastapi import APIRouter, Depends, Response
from sqlalchemy.exc import SQLAlchemyError

from productbridge import __version__
from productbridge.schemas.product import HealthResponse
from productbridge.services.datastore import Datastore, get_datastore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    datastore: Datastore = Depends(get_datastore),
) -> HealthResponse:
    """Returns 200 when the database answers, 503 otherwise."""
    db_status = "connected"
    overall = "healthy"

    try:
        await datastore.ping()
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
