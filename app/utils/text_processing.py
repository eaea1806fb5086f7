import json
import logging
from typing import Any, Dict, List

from app.errors import JsonParseError, UpstreamFormatError

logger = logging.getLogger(__name__)


def _scan_object(text: str, start: int) -> int:
    """Return the index just past the object opening at ``text[start]``, or -1 if it never closes."""
    depth = 0
    in_string = False
    escape = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return -1


def find_json_candidates(text: str) -> List[str]:
    """
    Find the top-level balanced ``{...}`` spans of a free-text reply.
    Braces inside JSON strings are ignored. A stray ``{`` that never closes
    is skipped so that an object after it can still be found.
    """
    candidates = []
    pos = text.find("{")
    while pos != -1:
        end = _scan_object(text, pos)
        if end == -1:
            pos = text.find("{", pos + 1)
            continue
        candidates.append(text[pos:end])
        pos = text.find("{", end)
    return candidates


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Extract the single JSON object embedded in a model reply.

    Raises ``UpstreamFormatError`` when the reply holds no complete object or
    more than one, and ``JsonParseError`` when no candidate parses.
    """
    if not text or "{" not in text:
        raise UpstreamFormatError()

    candidates = find_json_candidates(text)
    if not candidates:
        raise UpstreamFormatError("AI response did not contain a complete JSON object")

    parsed = []
    last_error = None
    for candidate in candidates:
        try:
            parsed.append(json.loads(candidate))
        except json.JSONDecodeError as e:
            logger.warning(f"Skipping unparsable JSON candidate ({len(candidate)} chars): {e}")
            last_error = e

    if not parsed:
        raise JsonParseError(f"AI response JSON could not be parsed: {last_error}")
    if len(parsed) > 1:
        raise UpstreamFormatError(f"AI response contained {len(parsed)} JSON objects, expected one")

    return parsed[0]
