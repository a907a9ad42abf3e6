"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from flowsight import __version__
from flowsight.config import Settings
from flowsight.dependencies import get_settings
from flowsight.engine.registry import get_registry
from flowsight.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        environment=settings.flowsight_env,
        stages_registered=get_registry().count,
    )
