"""Health check endpoints."""

from fastapi import APIRouter

from blogcraft.core.config import settings
from blogcraft.models.base import utcnow

router = APIRouter()


@router.get("")
async def health_check() -> dict[str, str]:
    """Basic health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.app_env,
        "timestamp": utcnow().isoformat(),
    }
