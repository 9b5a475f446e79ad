"""
Users API: Health Check Route
===============================

What:  Liveness/readiness probe for orchestrators and load balancers.
How:   Runs SELECT 1 through the UserStore.

Status levels:
    healthy:   store reachable (HTTP 200)
    unhealthy: store unreachable (HTTP 503)
"""

import time

from fastapi import APIRouter, Depends, Response

from users_api import __version__
from users_api.dependencies import get_user_store
from users_api.schemas.user import HealthResponse
from users_api.services.user_store import UserStore

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    store: UserStore = Depends(get_user_store),
) -> HealthResponse:
    reachable = await store.ping()
    if not reachable:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        database="connected" if reachable else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
