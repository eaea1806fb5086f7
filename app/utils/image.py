import base64
import binascii
import io
import logging
import re
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from app.config import DEFAULT_MIME_TYPE
from app.errors import InvalidInput

logger = logging.getLogger(__name__)

_DATA_URL = re.compile(r"^data:(image/[\w.+-]+);base64,(.*)$", re.DOTALL)

# Pillow format -> MIME types the vision model accepts. MPO is a JPEG with
# extra embedded frames (common on phone cameras).
MIME_MAP = {
    "JPEG": "image/jpeg",
    "MPO": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "HEIC": "image/heic",
    "HEIF": "image/heif",
}
SUPPORTED_MIME_TYPES = set(MIME_MAP.values())


def split_data_url(image: str) -> Tuple[Optional[str], str]:
    """Split ``data:image/png;base64,...`` into (mime, payload). Plain base64 gives (None, image)."""
    match = _DATA_URL.match(image.strip())
    if not match:
        return None, image.strip()
    return match.group(1).lower(), match.group(2)


def sniff_mime_type(payload: str) -> Optional[str]:
    """Detect a supported image type of a base64 payload with Pillow, None if unknown or unreadable."""
    try:
        raw = base64.b64decode(payload)
        with Image.open(io.BytesIO(raw)) as image:
            return MIME_MAP.get(image.format)
    except (binascii.Error, ValueError, UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        logger.debug(f"Could not sniff image format: {e}")
        return None


def resolve_image(image: str, declared_mime: Optional[str] = None) -> Tuple[str, str]:
    """
    Return (mime_type, base64 payload) for an uploaded image.

    Precedence: declared MIME type, data URL prefix, sniffed format, then
    ``DEFAULT_MIME_TYPE``. A declared type the model does not accept is
    rejected; an unsupported data URL type is ignored.
    """
    declared = (declared_mime or "").strip().lower()
    if declared and declared not in SUPPORTED_MIME_TYPES:
        raise InvalidInput(f"Unsupported mime_type: {declared_mime}")

    url_mime, payload = split_data_url(image)
    if url_mime not in SUPPORTED_MIME_TYPES:
        url_mime = None

    mime_type = declared or url_mime or sniff_mime_type(payload)
    if not mime_type:
        logger.info(f"Image format unknown or unsupported, sending as {DEFAULT_MIME_TYPE}")
        mime_type = DEFAULT_MIME_TYPE
    return mime_type, payload
