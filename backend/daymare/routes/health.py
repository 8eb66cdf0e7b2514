"""
Daymare Backend: Health Check Route
====================================

What:  Liveness/readiness probe for Docker health checks and load balancers.
How:   Pings MongoDB through the application's ArticleStore.
       healthy   → 200, store answered
       unhealthy → 503, store unreachable
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from daymare import __version__
from daymare.exceptions import StoreUnavailableError
from daymare.schemas.article import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "MongoDB unreachable", "model": HealthResponse}},
)
async def health_check(request: Request) -> JSONResponse:
    db_status = "connected"
    overall = "healthy"

    store = getattr(request.app.state, "store", None)
    if store is None:
        db_status = "disconnected"
        overall = "unhealthy"
    else:
        try:
            await store.ping()
        except StoreUnavailableError as e:
            db_status = "disconnected"
            overall = "unhealthy"
            logger.warning("Health check: MongoDB unreachable: %s", e.context.get("error", e.message))

    report = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=report.model_dump(),
    )
