# Plant Vision API v1.0.0
import logging
import os
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.config import (
    GEMINI_MODEL,
    APP_ENV,
    ALLOWED_ORIGINS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_HEADERS,
    LOG_LEVEL,
    SERVICE_NAME,
    SERVICE_VERSION,
)
from app.routers import analyze, health
from app.services.services import is_vision_configured, close_vision_client

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# ============================================================================#
# Lifespan Events
# ============================================================================#

@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {SERVICE_NAME} v{SERVICE_VERSION} ({APP_ENV})")
    logger.info(f"Gemini API key: {'✓' if is_vision_configured() else '✗'}")
    logger.info(f"Vision model: {GEMINI_MODEL}")
    logger.info(f"Allowed origins: {', '.join(ALLOWED_ORIGINS)}")
    logger.info("=" * 60)
    if not is_vision_configured():
        logger.error("GEMINI_API_KEY environment variable is missing - every analysis request will fail")

    yield

    # Shutdown
    logger.info("Shutting down gracefully...")
    await close_vision_client()


# Initialize FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Plant identification and disease detection with Gemini vision",
    version=SERVICE_VERSION,
    lifespan=lifespan
)

# CORS for the browser front-end
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
)

app.include_router(health.router)
app.include_router(analyze.router)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    uvicorn.run('app.main:app', host='0.0.0.0', port=port, reload=APP_ENV != "production")
