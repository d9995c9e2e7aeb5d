from fastapi import APIRouter, status

from app.platform.config import settings
from app.platform.response import api_response


router = APIRouter()

@router.get("/health", tags=["health"])
async def health_check():
    return api_response(
        data={
            "status": "ok",
            "service": settings.APP_NAME,
            "pagespeed_configured": bool(settings.PSI_API_KEY)
            and settings.PSI_API_KEY != settings.PSI_PLACEHOLDER_API_KEY,
        },
        message="Service is healthy",
        status_code=status.HTTP_200_OK,
        headers={"Cache-Control": "no-store"},
    )
