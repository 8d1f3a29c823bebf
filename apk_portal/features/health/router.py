"""Health check endpoint.

Reports whether the storage backend is reachable, for load balancer and
container orchestrator probes.
"""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

# Must stay a runtime import so FastAPI resolves the Depends() metadata
from apk_portal.features.packages.dependencies import PackageServiceDep  # noqa: TC001

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: Literal["healthy", "unhealthy"]
    backend: str


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Storage health check",
    responses={503: {"model": HealthResponse, "description": "Storage unreachable"}},
)
async def health_check(service: PackageServiceDep, response: Response) -> HealthResponse:
    backend = service.backend
    healthy = await backend.health_check()
    if not healthy:
        logger.warning("Health check failed", extra={"backend": backend.backend_name})
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        backend=backend.backend_name,
    )
