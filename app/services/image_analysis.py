import logging
import math
import random
from typing import Any, Dict

import httpx
import openai

from app.config import (
    GEMINI_MODEL,
    CONFIDENCE_MIN,
    CONFIDENCE_MAX,
    OVERWRITE_CONFIDENCE,
    USE_STRUCTURED_OUTPUT,
    MAX_OUTPUT_TOKENS,
)
from app.errors import UpstreamCallFailure, UpstreamFormatError
from app.models import AnalysisRequest
from app.services.prompts import build_prompt
from app.services.services import get_vision_client
from app.utils.image import resolve_image
from app.utils.text_processing import extract_json_object

logger = logging.getLogger(__name__)


def synthesize_confidence() -> float:
    """Uniform in [CONFIDENCE_MIN, CONFIDENCE_MAX)"""
    return CONFIDENCE_MIN + random.random() * (CONFIDENCE_MAX - CONFIDENCE_MIN)


def apply_confidence(result: Dict[str, Any], overwrite: bool = False) -> Dict[str, Any]:
    """Fill ``confidence`` when the model did not report a finite number, or always when ``overwrite``."""
    current = result.get("confidence")
    if isinstance(current, float):
        has_confidence = math.isfinite(current)
    else:
        has_confidence = isinstance(current, int) and not isinstance(current, bool)
    if overwrite or not has_confidence:
        result["confidence"] = synthesize_confidence()
    return result


async def analyze_image(request: AnalysisRequest) -> Dict[str, Any]:
    """Identify a plant or detect plant disease in an image with the Gemini vision model.

    1. Resolves the image MIME type and the shared Gemini client.
    2. Builds the mode-specific prompt.
    3. Sends prompt + inline image in a single chat completion call.
    4. Extracts the JSON object from the reply and fills in ``confidence``.

    Raises ``AnalysisError`` subclasses; nothing is retried.
    """
    mode = request.analysis_mode
    mime_type, payload = resolve_image(request.image, request.mime_type)

    # Fails before any network call when GEMINI_API_KEY is missing
    client = get_vision_client()

    prompt = build_prompt(mode)
    logger.info(f"Starting {mode} analysis with {GEMINI_MODEL} ({mime_type})")

    extra_args = {}
    if USE_STRUCTURED_OUTPUT:
        extra_args["response_format"] = {"type": "json_object"}

    try:
        response = await client.chat.completions.create(
            model=GEMINI_MODEL,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{payload}"},
                        },
                    ],
                }
            ],
            max_tokens=MAX_OUTPUT_TOKENS,
            **extra_args,
        )
    except (openai.APIError, httpx.HTTPError) as e:
        logger.error(f"Gemini API call failed: {e}")
        raise UpstreamCallFailure(f"Vision model call failed: {e}") from e

    raw_text = response.choices[0].message.content if response.choices else None
    if not raw_text:
        raise UpstreamFormatError("AI response was empty")
    logger.info(f"Gemini raw response: {raw_text[:500]}...")

    result = extract_json_object(raw_text)
    apply_confidence(result, overwrite=OVERWRITE_CONFIDENCE)

    logger.info(f"{mode.capitalize()} analysis complete (confidence: {result['confidence']:.2f})")
    return result
