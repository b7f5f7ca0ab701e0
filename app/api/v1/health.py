from fastapi import APIRouter

from app.core.config import settings
from app.features.patterns import get_default_engine_config

router = APIRouter()


@router.get("/health", summary="Health Check", description="Report service status and loaded scoring tables.")
async def health_check():
    config = get_default_engine_config()
    return {
        "status": "healthy",
        "industries": sorted(config.industries),
        "levels": list(config.levels),
        "historyEnabled": settings.history_enabled,
    }
