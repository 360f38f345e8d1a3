"""Lenient JSON extraction from model output.

The model is asked for JSON only, but answers may still wrap the object in
prose or markdown fences. The parser takes the greedy span from the first
"{" to the last "}" and parses that.

Note:
    This is not a balanced-brace scanner. Two JSON objects in one answer, or
    a stray "}" in the trailing prose, make the span invalid and the attempt
    fails with AI_RESPONSE_ERROR.
"""

import json
import re
from typing import Any, Optional

from src.models.errors import ErrorCode, ErrorReason, GenerationError
from src.utils.logger import logger

JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


def _parsing_error(message: str) -> GenerationError:
    return GenerationError(ErrorCode.AI_RESPONSE_ERROR, message, reason=ErrorReason.PARSING_ERROR)


def extract_json_object(text: Optional[str]) -> Optional[str]:
    """Return the greedy {...} span of `text`, or None if there is none."""
    if not text:
        return None
    match = JSON_OBJECT_PATTERN.search(text)
    return match.group() if match else None


def parse_model_response(text: Optional[str]) -> dict[str, Any]:
    """Parse the JSON object embedded in a model answer.

    Args:
        text: Raw model output (may include text before/after the JSON object).

    Returns:
        Parsed JSON object.

    Raises:
        GenerationError: AI_RESPONSE_ERROR (reason PARSING_ERROR) if no {...}
            span exists or it is not valid JSON.
    """
    json_text = extract_json_object(text)
    if json_text is None:
        logger.warning("No JSON object found in model response")
        raise _parsing_error("Failed to parse AI response: no JSON object found")

    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.warning(f"Model response JSON is malformed: {e}")
        raise _parsing_error(f"Failed to parse AI response: {e}") from e

    logger.debug(f"Parsed model response ({len(json_text)} chars of JSON)")
    return parsed
