from fastapi import APIRouter, Depends

from config.settings import AppSettings
from routers.deps import get_settings
from services.ai.market_analysis.analysis_service import utc_timestamp

router = APIRouter(tags=["ops"])


@router.get("/health")
async def health(settings: AppSettings = Depends(get_settings)):
    """Liveness only, never calls the inference provider."""
    return {
        "status": "OK",
        "model": settings.model,
        "timestamp": utc_timestamp(),
    }
