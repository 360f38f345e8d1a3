"""Advisory quality checks on generated recipes.

Issues are reported to the client next to the recipe; they never cause a
request to fail.
"""

from src.models.models import EnhancementFlags, QualityInfo, Recipe

MIN_TITLE_LENGTH = 3
MIN_DESCRIPTION_LENGTH = 10
MIN_INGREDIENTS = 2
MIN_INSTRUCTIONS = 2


def check_recipe_quality(recipe: Recipe) -> list[str]:
    """Return human-readable warnings for a recipe (empty list if none)."""
    issues = []

    if len(recipe.title.strip()) < MIN_TITLE_LENGTH:
        issues.append("Title is too short")

    if not recipe.ingredients:
        issues.append("Ingredient list is empty")
    elif len(recipe.ingredients) < MIN_INGREDIENTS:
        issues.append("Too few ingredients")

    if not recipe.instructions:
        issues.append("Instruction list is empty")
    elif len(recipe.instructions) < MIN_INSTRUCTIONS:
        issues.append("Too few instructions")

    if len(recipe.description.strip()) < MIN_DESCRIPTION_LENGTH:
        issues.append("Description is too short")

    return issues


def build_quality_info(raw: Recipe, enhanced: Recipe) -> QualityInfo:
    """Quality report for the raw model recipe plus what enhancement changed.

    The ingredient and instruction flags compare list lengths only: a reorder
    or rewrite that keeps the same number of items reports False.
    """
    issues = check_recipe_quality(raw)
    return QualityInfo(
        has_issues=bool(issues),
        issues=issues,
        enhanced=EnhancementFlags(
            title_changed=raw.title != enhanced.title,
            ingredients_reorganized=len(raw.ingredients) != len(enhanced.ingredients),
            instructions_reformatted=len(raw.instructions) != len(enhanced.instructions),
        ),
    )
