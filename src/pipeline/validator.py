"""Schema validation of parsed model output against the Recipe shape."""

from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, StrictStr, ValidationError, field_validator

from src.models.errors import ErrorCode, ErrorReason, GenerationError
from src.models.models import Recipe
from src.utils.logger import logger


class GeneratedRecipe(BaseModel):
    """Strict schema for a recipe produced by the model.

    Strings are trimmed; blank list items are dropped before the non-empty
    check. A cookingTime or servings of 0 counts as absent; other values
    must be positive integers. Unknown keys are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="ignore")

    title: Annotated[StrictStr, Field(min_length=1)]
    description: Annotated[StrictStr, Field(min_length=1)]
    ingredients: List[StrictStr]
    instructions: List[StrictStr]
    cooking_time: Annotated[Optional[PositiveInt], Field(None, alias="cookingTime")]
    servings: Optional[PositiveInt] = None

    @field_validator("ingredients", "instructions")
    @classmethod
    def drop_blank_items(cls, items: list[str]) -> list[str]:
        """Remove blank entries and require at least one to remain."""
        kept = [item for item in items if item]
        if not kept:
            raise ValueError("must contain at least one non-empty item")
        return kept

    @field_validator("cooking_time", "servings", mode="before")
    @classmethod
    def zero_means_absent(cls, value: Any) -> Any:
        """Map 0 (and null) to None."""
        if value is None or (isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0):
            return None
        return value


def _format_errors(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "recipe"
        messages.append(f"{field}: {error['msg']}")
    return messages


def validate_recipe(data: Any) -> Recipe:
    """Validate a parsed model answer and build a Recipe.

    Args:
        data: Object parsed from the model's JSON.

    Returns:
        Recipe with trimmed fields.

    Raises:
        GenerationError: AI_RESPONSE_ERROR (reason VALIDATION_ERROR) listing
            every field violation, not just the first.
    """
    if not isinstance(data, dict):
        raise GenerationError(
            ErrorCode.AI_RESPONSE_ERROR,
            "Recipe validation failed: expected a JSON object",
            reason=ErrorReason.VALIDATION_ERROR,
        )

    try:
        generated = GeneratedRecipe.model_validate(data)
    except ValidationError as e:
        messages = _format_errors(e)
        logger.warning(f"Recipe validation failed with {len(messages)} error(s): {messages}")
        raise GenerationError(
            ErrorCode.AI_RESPONSE_ERROR,
            f"Recipe validation failed: {'; '.join(messages)}",
            reason=ErrorReason.VALIDATION_ERROR,
        ) from e

    return Recipe(
        title=generated.title,
        description=generated.description,
        ingredients=generated.ingredients,
        instructions=generated.instructions,
        cooking_time=generated.cooking_time,
        servings=generated.servings,
    )
