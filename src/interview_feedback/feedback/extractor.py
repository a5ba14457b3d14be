"""Best-effort extraction of structured data from free-text model output."""

import json
import math
import re
from typing import Any, Dict

# Greedy: spans from the first "{" to the last "}" in the text.
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class ExtractionError(ValueError):
    """The response did not contain a usable JSON object."""


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Pull the first JSON object out of surrounding prose.

    Args:
        text: Raw model response

    Returns:
        The decoded object

    Raises:
        ExtractionError: If no object is present or it does not decode
    """
    match = _JSON_OBJECT.search(text or "")
    if not match:
        raise ExtractionError("No JSON object found in response")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Invalid JSON in response: {e.msg}") from e

    if not isinstance(parsed, dict):
        raise ExtractionError("Decoded JSON is not an object")

    return parsed


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    # json.loads accepts NaN, Infinity and out-of-range literals like 1e400
    return isinstance(value, float) and math.isfinite(value)


def parse_analysis_payload(text: str) -> Dict[str, Any]:
    """Extract an answer analysis object and check its required fields."""
    parsed = extract_json_object(text)

    if not is_finite_number(parsed.get("score")):
        raise ExtractionError("Field 'score' must be numeric")
    if not isinstance(parsed.get("feedback"), str):
        raise ExtractionError("Field 'feedback' must be a string")
    for field in ("strengths", "improvements"):
        if not isinstance(parsed.get(field), list):
            raise ExtractionError(f"Field '{field}' must be a list")

    return parsed
