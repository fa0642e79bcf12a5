from fastapi import APIRouter

from app.config import settings

router = APIRouter()


@router.get("/health")
def health_check() -> dict:
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "geocoding_configured": bool(settings.mapbox_token),
    }
