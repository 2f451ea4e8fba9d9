from fastapi import APIRouter, Depends, status

from app.platform.config import Settings, get_settings
from app.platform.response import envelope_response


router = APIRouter()

@router.get("/health", tags=["health"])
async def health_check(settings: Settings = Depends(get_settings)):
    return envelope_response(
        data={"status": "ok", "service": settings.APP_NAME},
        message="Service is healthy",
        status_code=status.HTTP_200_OK,
    )
