from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from questionbank.config.settings import Settings, get_settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_check(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Basic health endpoint."""
    return {
        "status": "UP",
        "message": f"{settings.app_name} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.version,
    }


@router.get("/ping", response_class=PlainTextResponse)
def ping() -> str:
    return "pong"
