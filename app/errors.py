"""Failure taxonomy for the analysis endpoint.

Every error raised while handling an analysis request derives from
``AnalysisError`` and knows the HTTP status and the ``error`` category it is
rendered with. The router turns them into an ``ErrorResponse`` body.
"""
from typing import Optional


class AnalysisError(Exception):
    status_code = 500
    error = "Internal Server Error"
    default_message = "Unexpected error while analysing the image"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MalformedRequest(AnalysisError):
    status_code = 400
    error = "Malformed request"
    default_message = "Request body must be a JSON object"


class InvalidInput(AnalysisError):
    status_code = 400
    error = "Invalid image data"
    default_message = "Please provide a valid base64-encoded image"


class ConfigurationError(AnalysisError):
    error = "Configuration error"
    default_message = "GEMINI_API_KEY environment variable is missing"


class UpstreamCallFailure(AnalysisError):
    error = "Upstream call failed"
    default_message = "The vision model could not be reached"


class UpstreamFormatError(AnalysisError):
    error = "Upstream format error"
    default_message = "AI response did not contain valid JSON"


class JsonParseError(AnalysisError):
    error = "JSON parse error"
    default_message = "AI response JSON could not be parsed"


class InternalError(AnalysisError):
    pass
