"""Prompt templates for recipe generation.

Provides a factory function that renders the single-turn generation prompt
from the normalized ingredients and preferences. The prompt pins the answer
to one JSON object matching the Recipe schema; images, when present, are
attached after the text together with IMAGE_INSTRUCTION.
"""

from typing import Optional

RECIPE_JSON_SHAPE = """{
  "title": "Recipe name",
  "description": "One or two sentences describing the dish",
  "ingredients": ["ingredient with quantity", "..."],
  "instructions": ["step 1", "step 2", "..."],
  "cookingTime": 30,
  "servings": 2
}"""

IMAGE_INSTRUCTION = (
    "The attached images show ingredients that are also available. "
    "Take the pictured ingredients into account when writing the recipe."
)


def build_recipe_prompt(ingredients: list[str], preferences: Optional[str] = None) -> str:
    """Render the generation prompt.

    Args:
        ingredients: Normalized ingredient names (non-empty).
        preferences: Optional free-text preference, included only when set.

    Returns:
        str: Complete prompt text.
    """
    ingredient_lines = "\n".join(f"- {ingredient}" for ingredient in ingredients)
    preference_section = f"\n## Preferences\n\n{preferences}\n" if preferences else ""

    return f"""You are a professional home cook. Create one practical recipe that uses the available ingredients.

## Available Ingredients

{ingredient_lines}
{preference_section}
## Rules

- Use as many of the available ingredients as reasonable; common pantry staples may be added
- List every ingredient with its quantity
- Write each instruction as one clear cooking step, in order
- `cookingTime` is the total time in minutes, `servings` the number of people served
- Write the recipe in the same language as the ingredient names

## Output Format

Respond with ONLY a JSON object of this exact shape, with no markdown and no text before or after it:

{RECIPE_JSON_SHAPE}
"""
