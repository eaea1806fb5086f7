import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ============================================================================#
# ENVIRONMENT / SERVICES
# ============================================================================#
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
# Gemini exposes an OpenAI-compatible surface, used through AsyncOpenAI
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

# development | production
APP_ENV = os.getenv("APP_ENV", "production").strip().lower()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SERVICE_NAME = "Plant Vision API"
SERVICE_VERSION = "1.0.0"

# CORS allow-list (comma separated, "*" allows any origin)
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()] or ["*"]
CORS_ALLOW_METHODS = ["POST", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type"]

# Timeout configuration for the upstream call (seconds)
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "60"))
API_CONNECT_TIMEOUT = float(os.getenv("API_CONNECT_TIMEOUT", "15"))

# ============================================================================#
# ANALYSIS
# ============================================================================#
MIN_IMAGE_LENGTH = 100  # characters of base64 payload
DEFAULT_MIME_TYPE = "image/jpeg"

# Synthesized confidence range [min, max)
CONFIDENCE_MIN = 0.80
CONFIDENCE_MAX = 1.00

# Always replace a model-supplied confidence instead of filling only when absent
OVERWRITE_CONFIDENCE = _env_flag("OVERWRITE_CONFIDENCE", "0")

# Ask the provider for JSON output mode
USE_STRUCTURED_OUTPUT = _env_flag("USE_STRUCTURED_OUTPUT", "1")

MAX_OUTPUT_TOKENS = int(os.getenv("MAX_OUTPUT_TOKENS", "2048"))


def is_production() -> bool:
    return APP_ENV == "production"
