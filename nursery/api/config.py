from fastapi import APIRouter
from pydantic import BaseModel

from nursery.core.config import get_settings

router = APIRouter(prefix="/api", tags=["config"])

VERSION = "0.1.0"


class HealthResponse(BaseModel):
    status: str
    version: str


class ConfigResponse(BaseModel):
    db_path: str
    tz: str
    analysis_window_days: int
    minimum_sample_size: int
    refresh_interval_minutes: int
    snooze_minutes: int
    debug: bool


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", version=VERSION)


@router.get("/config", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Get current service configuration."""
    settings = get_settings()
    return ConfigResponse(
        db_path=settings.db_path,
        tz=settings.tz,
        analysis_window_days=settings.analysis_window_days,
        minimum_sample_size=settings.minimum_sample_size,
        refresh_interval_minutes=settings.refresh_interval_minutes,
        snooze_minutes=settings.snooze_minutes,
        debug=settings.debug,
    )
