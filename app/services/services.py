import logging
from typing import Optional

import httpx
from openai import AsyncOpenAI

from app.config import (
    GEMINI_API_KEY,
    GEMINI_BASE_URL,
    GEMINI_MODEL,
    API_TIMEOUT,
    API_CONNECT_TIMEOUT,
)
from app.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Process-wide Gemini client, created on first use
_vision_client: Optional[AsyncOpenAI] = None


def is_vision_configured() -> bool:
    return bool(GEMINI_API_KEY)


def get_vision_client() -> AsyncOpenAI:
    """Return the shared Gemini (OpenAI-compatible) client.

    Raises ``ConfigurationError`` when the credential is missing or the client
    cannot be built, so no network call is attempted.
    """
    global _vision_client
    if _vision_client is not None:
        return _vision_client

    if not GEMINI_API_KEY:
        logger.error("GEMINI_API_KEY not configured")
        raise ConfigurationError()

    try:
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=API_CONNECT_TIMEOUT,
                read=API_TIMEOUT,
                write=API_TIMEOUT,
                pool=API_TIMEOUT
            )
        )
        _vision_client = AsyncOpenAI(
            base_url=GEMINI_BASE_URL,
            api_key=GEMINI_API_KEY,
            http_client=http_client,
            max_retries=0,
        )
    except Exception as e:
        logger.error(f"Failed to initialize Gemini client: {e}")
        raise ConfigurationError(f"Failed to initialize Gemini client: {e}") from e

    logger.info(f"Gemini client initialized ({GEMINI_MODEL}, {API_TIMEOUT}s timeout)")
    return _vision_client


async def close_vision_client():
    global _vision_client
    if _vision_client is not None:
        await _vision_client.close()
        _vision_client = None
        logger.info("Gemini client closed")
