"""
Health check endpoints.

Provides liveness and readiness checks. The service is ready once the
card catalog fetch has finished, whether or not it succeeded.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from talingchan.api.dependencies import get_catalog
from talingchan.services.catalog import CardCatalog

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    catalog: str | None = None
    cards: int | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness check.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
) -> HealthResponse:
    """
    Readiness check.

    Returns 503 while the catalog is still loading. A failed fetch is
    reported as `catalog="unavailable"` with an empty card list.
    """
    if not catalog.loaded:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", catalog="loading")

    catalog_state = "unavailable" if catalog.error is not None else "loaded"
    return HealthResponse(status="ready", catalog=catalog_state, cards=len(catalog))
