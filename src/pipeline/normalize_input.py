"""Input normalization for recipe generation requests.

Handles the three shapes the ingredients field arrives in:
1. A list (JSON body or CLI arguments)
2. A JSON-encoded array string (multipart form field from the web client)
3. A comma-separated string (plain form posts, CLI)

Result: a trimmed, case-insensitively de-duplicated ingredient list in
first-seen order, or an INVALID_REQUEST error.
"""

import json
from typing import Any, Optional

from src.models.errors import invalid_request
from src.models.models import GenerationRequest, ImageAttachment
from src.utils.config import config
from src.utils.images import validate_images
from src.utils.logger import logger


def _split_comma_separated(value: str) -> list[str]:
    return [item.strip() for item in value.split(",")]


def parse_ingredient_input(raw: Any) -> list[str]:
    """Turn raw ingredient input into a list of trimmed strings (may contain empties).

    A string that looks like a JSON array but does not parse, or parses to
    something other than a list, is treated as comma-separated text.
    """
    if raw is None:
        return []

    if isinstance(raw, (list, tuple)):
        return [str(item).strip() for item in raw if item is not None]

    if isinstance(raw, str):
        text = raw.strip()
        if text.startswith("[") and text.endswith("]"):
            try:
                parsed = json.loads(text)
            except (json.JSONDecodeError, ValueError):
                logger.debug("Ingredients look like JSON but failed to parse, splitting on commas")
                return _split_comma_separated(text)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if item is not None]
            logger.debug("Ingredients JSON is not an array, splitting on commas")
        return _split_comma_separated(text)

    return [str(raw).strip()]


def dedupe_case_insensitive(items: list[str]) -> list[str]:
    """Drop empty items and case-insensitive duplicates, keeping the first occurrence."""
    seen: set[str] = set()
    unique = []
    for item in items:
        if not item:
            continue
        key = item.casefold()
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def normalize_ingredients(raw: Any, max_ingredients: Optional[int] = None) -> list[str]:
    """Normalize raw ingredient input.

    Args:
        raw: List, JSON array string or comma-separated string.
        max_ingredients: Upper bound after de-duplication (default: MAX_INGREDIENTS).

    Returns:
        Unique, trimmed, non-empty ingredient names in first-seen order.

    Raises:
        GenerationError: INVALID_REQUEST if nothing is left or the cap is exceeded.
    """
    limit = config.MAX_INGREDIENTS if max_ingredients is None else max_ingredients
    ingredients = dedupe_case_insensitive(parse_ingredient_input(raw))

    if not ingredients:
        raise invalid_request("At least one ingredient is required")
    if len(ingredients) > limit:
        raise invalid_request(f"Too many ingredients (maximum {limit})")

    return ingredients


def normalize_preferences(preferences: Optional[str]) -> Optional[str]:
    """Trim preferences, mapping blank input to None and enforcing the length limit."""
    if preferences is None:
        return None
    preferences = preferences.strip()
    if not preferences:
        return None
    if len(preferences) > config.MAX_PREFERENCES_LENGTH:
        raise invalid_request(f"Preferences must be at most {config.MAX_PREFERENCES_LENGTH} characters")
    return preferences


def build_generation_request(
    ingredients: Any,
    preferences: Optional[str] = None,
    images: Optional[list[ImageAttachment]] = None,
) -> GenerationRequest:
    """Validate and normalize all request fields into a GenerationRequest.

    Raises:
        GenerationError: INVALID_REQUEST on any invalid field.
    """
    images = images or []
    validate_images(images)
    request = GenerationRequest(
        ingredients=normalize_ingredients(ingredients),
        preferences=normalize_preferences(preferences),
        images=images,
    )
    logger.debug(
        f"Normalized request: ingredients={len(request.ingredients)}, "
        f"preferences={'yes' if request.preferences else 'no'}, images={len(request.images)}"
    )
    return request
