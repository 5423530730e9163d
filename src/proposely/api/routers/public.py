"""Health and liveness routes."""

from fastapi import APIRouter, Depends

from proposely.api.deps import get_settings
from proposely.config import Settings

router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/health/mode")
def health_mode(settings: Settings = Depends(get_settings)) -> dict:
    """Report whether simulated payments are live (no credentials exposed)."""
    return {
        "status": "ok",
        "env": settings.app_env,
        "paymentSimulation": settings.simulation_enabled,
    }
