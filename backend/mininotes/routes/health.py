"""
Mini Notes Backend — Health Check Route
=========================================

What:  Health check endpoint for container and load balancer probes.
Why:   A backend that cannot reach its key-value store cannot serve a single
       authenticated request, so "process is up" is not enough.
How:   Pings both storage namespaces; 200 when both answer, 503 otherwise.
Who:   Docker HEALTHCHECK, load balancers, uptime monitors.

This route is served by FastAPI directly (not the notes router), so it
stays reachable with its own docs entry at /docs.
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from mininotes import __version__
from mininotes.schemas.health import HealthResponse
from mininotes.storage.base import StorageBackends

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Storage unreachable", "model": HealthResponse}},
)
async def health_check(request: Request) -> JSONResponse:
    """Ping the notes and users namespaces and report aggregate status."""
    storage: StorageBackends = request.app.state.storage

    reachable = True
    for name, store in (("notes", storage.notes), ("users", storage.users)):
        if not await store.ping():
            logger.warning("Health check: %s storage unreachable", name)
            reachable = False

    body = HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        storage="connected" if reachable else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=200 if reachable else 503, content=body.model_dump())
