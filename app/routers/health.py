"""
routers/health.py
Kubernetes / Docker / load balancer health check.
"""

from fastapi import APIRouter, Depends
from app.models.response import HealthResponse
from app.core.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)):
    return HealthResponse(
        status="ok",
        version=settings.APP_VERSION,
        completion_model=settings.COMPLETION_MODEL,
        transcription_model=settings.TRANSCRIPTION_MODEL,
        speech_configured=settings.speech_configured,
    )
