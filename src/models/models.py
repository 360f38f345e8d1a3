"""Data models and schemas for recipe generation service.

Defines Pydantic models for the recipe domain object, the generation request,
and the HTTP response envelopes. Attributes are snake_case; the wire format
uses camelCase aliases (cookingTime, requestId, ...).
All models use Pydantic v2.
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Recipe(BaseModel):
    """Domain model for a generated recipe.

    Shape only: the strict checks on model output live in the schema validator
    and the range clamping in the enhancer, so a Recipe may hold values the
    enhancer still has to fix (e.g. cooking_time=0).
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Annotated[str, Field(description="Recipe name")]
    description: Annotated[str, Field(description="Short description of the dish")]
    ingredients: Annotated[List[str], Field(description="Ingredients with quantities, in display order")]
    instructions: Annotated[List[str], Field(description="Cooking steps in order")]
    cooking_time: Annotated[
        Optional[int], Field(None, alias="cookingTime", description="Total cooking time in minutes")
    ]
    servings: Annotated[Optional[int], Field(None, description="Number of servings")]

    def to_wire(self) -> dict:
        """Serialize with camelCase keys, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ImageAttachment(BaseModel):
    """An uploaded image kept in memory for the duration of one request."""

    data: bytes
    mime_type: str
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


class GenerationRequest(BaseModel):
    """Normalized input to the generation pipeline.

    Built by the input normalizer, so ingredients are already trimmed,
    de-duplicated (case-insensitive) and within limits.
    """

    ingredients: Annotated[List[str], Field(min_length=1, description="Unique ingredient names (1-50)")]
    preferences: Annotated[Optional[str], Field(None, description="Free-text style or taste preference")]
    images: Annotated[List[ImageAttachment], Field(default_factory=list, description="Uploaded images (0-10)")]


class EnhancementFlags(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title_changed: bool = Field(False, alias="titleChanged")
    ingredients_reorganized: bool = Field(False, alias="ingredientsReorganized")
    instructions_reformatted: bool = Field(False, alias="instructionsReformatted")


class QualityInfo(BaseModel):
    """Advisory quality report shown next to the recipe; never blocks a response."""

    model_config = ConfigDict(populate_by_name=True)

    has_issues: bool = Field(alias="hasIssues")
    issues: List[str] = Field(default_factory=list)
    enhanced: EnhancementFlags = Field(default_factory=EnhancementFlags)


class GenerationResult(BaseModel):
    recipe: Recipe
    quality_info: QualityInfo


class ResponseMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_id: str = Field(alias="requestId")
    processing_time: int = Field(alias="processingTime", description="Milliseconds spent on the request")
    timestamp: str


class ErrorInfo(BaseModel):
    code: str
    message: str


class RecipeSuccessResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: dict
    meta: ResponseMeta
    quality_info: Optional[QualityInfo] = Field(None, alias="qualityInfo")


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorInfo
    meta: Optional[ResponseMeta] = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    service: str
    version: str
    uptime: int
