import logging
import traceback
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from app.config import is_production, CORS_ALLOW_METHODS, CORS_ALLOW_HEADERS
from app.errors import AnalysisError, InternalError, InvalidInput, MalformedRequest
from app.models import AnalysisRequest, ErrorResponse
from app.services.image_analysis import analyze_image

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed request or invalid image data"},
    500: {"model": ErrorResponse, "description": "Configuration, upstream or internal failure"},
}


def parse_analysis_request(body) -> AnalysisRequest:
    if not isinstance(body, dict):
        raise MalformedRequest()
    try:
        return AnalysisRequest.model_validate(body)
    except ValidationError as e:
        if any(err["loc"][:1] == ("image",) for err in e.errors()):
            raise InvalidInput() from e
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedRequest(f"Invalid request fields: {fields}") from e


def error_response(error: AnalysisError, exc: Optional[BaseException] = None) -> JSONResponse:
    body = ErrorResponse(error=error.error, message=error.message)
    if not is_production():
        exc = exc or error
        body.stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(
        status_code=error.status_code,
        content=body.model_dump(exclude_none=True),
    )


@router.post("/api", responses=_ERROR_RESPONSES)
@router.post("/api/{path:path}", responses=_ERROR_RESPONSES)
async def analyze(request: Request):
    """
    Plant identification / disease detection.
    Body: {"image": "<base64>", "mode": "plant" | "disease", "mime_type": "image/png" (optional)}
    """
    try:
        try:
            body = await request.json()
        except ValueError as e:
            raise MalformedRequest(f"Invalid JSON body: {e}") from e

        analysis_request = parse_analysis_request(body)
        result = await analyze_image(analysis_request)
        return JSONResponse(content=result)

    except AnalysisError as e:
        if e.status_code < 500:
            logger.warning(f"Rejected analysis request: {e.error} - {e.message}")
        else:
            logger.error(f"Analysis failed: {e.error} - {e.message}", exc_info=True)
        return error_response(e)
    except Exception as e:
        logger.error(f"API Error: {e}", exc_info=True)
        return error_response(InternalError(str(e)), exc=e)


@router.options("/api")
@router.options("/api/{path:path}")
async def preflight():
    """
    Plain OPTIONS (no Access-Control-Request-Method). Real preflights are
    answered by CORSMiddleware before reaching this route.
    """
    return Response(status_code=204, headers={
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    })
