import logging
from fastapi import APIRouter

from app.config import SERVICE_NAME, SERVICE_VERSION, GEMINI_MODEL
from app.services.services import is_vision_configured

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def root():
    return {
        "status": "online",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "features": [
            "Plant Identification",
            "Plant Disease Detection",
        ]
    }


@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": SERVICE_VERSION,
        "model": GEMINI_MODEL,
        "services": {
            "gemini": is_vision_configured()
        }
    }
