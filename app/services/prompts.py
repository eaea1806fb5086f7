from app.models import MODE_PLANT, requested_keys
from app.config import CONFIDENCE_MIN

SYSTEM_INSTRUCTION = """You are a botanist and plant pathologist. Answer with JSON only (no ```json fences, no text before or after the object).
"""

PLANT_PROMPT = """Identify this plant. Provide: common name, scientific name, description, care instructions.
- care_instructions: a list of objects with "title" and "description" (watering, light, soil, ...)
- confidence: a number between {confidence_min:.2f} and 0.99 expressing how sure you are of the identification
Format as JSON with keys: {keys}."""

DISEASE_PROMPT = """Detect plant diseases. Provide: is_healthy (boolean), disease_name, description, treatments.
- disease_name: empty string when the plant is healthy
- treatments: a list of short treatment steps (empty list when healthy)
Format as JSON with keys: {keys}."""


def build_prompt(mode: str) -> str:
    keys = ", ".join(requested_keys(mode))
    if mode == MODE_PLANT:
        return SYSTEM_INSTRUCTION + PLANT_PROMPT.format(keys=keys, confidence_min=CONFIDENCE_MIN)
    return SYSTEM_INSTRUCTION + DISEASE_PROMPT.format(keys=keys)
