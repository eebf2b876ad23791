from fastapi import APIRouter

from screener.core.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "healthy",
        "scoring_endpoint": settings.scoring_endpoint_url,
        "version": settings.app_version,
    }


@router.get("/status")
async def liveness() -> dict[str, str]:
    return {"status": "ok"}
