"""Heuristic post-processing of validated recipes.

enhance_recipe() is a pure function: it returns a new Recipe with cleaned
text fields, a de-duplicated and grouped ingredient list, renumbered
instructions and clamped numeric fields. Applying it to its own output
changes nothing.

Ingredient grouping is keyword based with a length fallback: any name
shorter than SEASONING_LENGTH_THRESHOLD characters is grouped with the
seasonings, so short main ingredients ("onion", "卵") end up in the
seasoning group.
"""

import re
from typing import Optional

from src.models.models import Recipe
from src.pipeline.normalize_input import dedupe_case_insensitive
from src.utils.logger import logger

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MAX_INGREDIENT_LENGTH = 150
MAX_INSTRUCTION_LENGTH = 300
MIN_INSTRUCTION_LENGTH = 3

COOKING_TIME_RANGE = (5, 480)
SERVINGS_RANGE = (1, 20)

SEASONING_KEYWORDS = (
    "塩", "しょうゆ", "醤油", "味噌", "みそ", "ソース", "砂糖", "みりん",
    "酒", "酢", "胡椒", "コショウ", "油", "オイル", "バター",
)
SEASONING_LENGTH_THRESHOLD = 10

# Hiragana, katakana and CJK unified ideographs
CJK_PATTERN = re.compile(r"[぀-ゟ゠-ヿ一-龯]")
LATIN_PATTERN = re.compile(r"[a-zA-Z]")
TERMINAL_PUNCTUATION = re.compile(r"[。！？.!?]$")
TITLE_TRAILING_PUNCTUATION = re.compile(r"[。、！？.,!?\s]+$")
INGREDIENT_LEADING_MARKERS = re.compile(r"^[・\-*\s]+")
INGREDIENT_TRAILING_PUNCTUATION = re.compile(r"[。、\s]+$")
INSTRUCTION_LEADING_MARKERS = re.compile(r"^[\d.)\s\-*・]+")


def truncate(text: str, max_length: int) -> str:
    """Cut text longer than max_length to max_length characters ending in '...'."""
    if len(text) > max_length:
        return text[: max_length - 3] + "..."
    return text


def add_terminal_punctuation(text: str) -> str:
    """Append '。' to CJK text or '.' to Latin text that lacks sentence-ending punctuation."""
    if not text or TERMINAL_PUNCTUATION.search(text):
        return text
    if CJK_PATTERN.search(text):
        return text + "。"
    if LATIN_PATTERN.search(text):
        return text + "."
    return text


def enhance_title(title: str) -> str:
    enhanced = truncate(title.strip(), MAX_TITLE_LENGTH)
    enhanced = TITLE_TRAILING_PUNCTUATION.sub("", enhanced)
    if enhanced and "a" <= enhanced[0] <= "z":
        enhanced = enhanced[0].upper() + enhanced[1:]
    return enhanced


def enhance_description(description: str) -> str:
    return truncate(add_terminal_punctuation(description.strip()), MAX_DESCRIPTION_LENGTH)


def is_seasoning(ingredient: str) -> bool:
    lowered = ingredient.lower()
    if any(keyword in lowered for keyword in SEASONING_KEYWORDS):
        return True
    return len(ingredient) < SEASONING_LENGTH_THRESHOLD


def sort_ingredients(ingredients: list[str]) -> list[str]:
    """Main ingredients first, then seasonings; each group sorted by code point."""
    main = [ingredient for ingredient in ingredients if not is_seasoning(ingredient)]
    seasonings = [ingredient for ingredient in ingredients if is_seasoning(ingredient)]
    return sorted(main) + sorted(seasonings)


def clean_ingredient(ingredient: str) -> str:
    cleaned = INGREDIENT_LEADING_MARKERS.sub("", ingredient.strip())
    cleaned = INGREDIENT_TRAILING_PUNCTUATION.sub("", cleaned).strip()
    return truncate(cleaned, MAX_INGREDIENT_LENGTH)


def enhance_ingredients(ingredients: list[str]) -> list[str]:
    cleaned = [clean_ingredient(ingredient) for ingredient in ingredients]
    return sort_ingredients(dedupe_case_insensitive(cleaned))


def enhance_instructions(instructions: list[str]) -> list[str]:
    """Drop near-empty steps, then renumber as '1. ...', '2. ...' with terminal punctuation."""
    bodies = []
    for instruction in instructions:
        raw = instruction.strip()
        if len(raw) <= MIN_INSTRUCTION_LENGTH:
            continue
        body = INSTRUCTION_LEADING_MARKERS.sub("", raw).strip()
        if body:
            bodies.append(body)

    enhanced = []
    for body in bodies:
        step = add_terminal_punctuation(f"{len(enhanced) + 1}. {body}")
        step = truncate(step, MAX_INSTRUCTION_LENGTH)
        if len(step) > MIN_INSTRUCTION_LENGTH:
            enhanced.append(step)
    return enhanced


def clamp(value: Optional[float], low: int, high: int) -> Optional[int]:
    """Values below 1 map to `low`, values above `high` map to `high`; the rest
    are only rounded, so 1 to `low` - 1 pass through. None stays None.
    """
    if value is None:
        return None
    if value < 1:
        return low
    if value > high:
        return high
    return round(value)


def enhance_recipe(recipe: Recipe) -> Recipe:
    """Return a cleaned copy of `recipe`. See module docstring for the rules."""
    enhanced = Recipe(
        title=enhance_title(recipe.title),
        description=enhance_description(recipe.description),
        ingredients=enhance_ingredients(recipe.ingredients),
        instructions=enhance_instructions(recipe.instructions),
        cooking_time=clamp(recipe.cooking_time, *COOKING_TIME_RANGE),
        servings=clamp(recipe.servings, *SERVINGS_RANGE),
    )
    logger.debug(
        f"Recipe enhanced: title={enhanced.title!r}, "
        f"ingredients {len(recipe.ingredients)} → {len(enhanced.ingredients)}, "
        f"instructions {len(recipe.instructions)} → {len(enhanced.instructions)}"
    )
    return enhanced
