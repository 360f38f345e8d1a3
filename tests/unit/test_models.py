"""Unit tests for Pydantic models and the error taxonomy."""

import pytest
from pydantic import ValidationError

from src.models.errors import ErrorCode, ErrorReason, GenerationError, invalid_request
from src.models.models import (
    EnhancementFlags,
    ErrorInfo,
    ErrorResponse,
    GenerationRequest,
    ImageAttachment,
    QualityInfo,
    Recipe,
    RecipeSuccessResponse,
    ResponseMeta,
)


class TestRecipe:
    """Test Recipe model construction and wire format."""

    def test_valid_recipe_all_fields(self):
        recipe = Recipe(
            title="Chicken Stir-Fry",
            description="Quick and savory.",
            ingredients=["chicken thigh", "onion"],
            instructions=["1. Cut.", "2. Fry."],
            cooking_time=20,
            servings=2,
        )
        assert recipe.cooking_time == 20
        assert recipe.servings == 2

    def test_accepts_camel_case_alias(self):
        """Test that cookingTime populates cooking_time."""
        recipe = Recipe.model_validate(
            {"title": "T", "description": "D", "ingredients": [], "instructions": [], "cookingTime": 15}
        )
        assert recipe.cooking_time == 15

    def test_to_wire_uses_camel_case_and_omits_none(self):
        recipe = Recipe(title="T", description="D", ingredients=["a"], instructions=["b"], cooking_time=30)

        wire = recipe.to_wire()

        assert wire["cookingTime"] == 30
        assert "cooking_time" not in wire
        assert "servings" not in wire

    def test_invalid_missing_title(self):
        with pytest.raises(ValidationError) as exc:
            Recipe(description="D", ingredients=[], instructions=[])
        assert "title" in str(exc.value)


class TestGenerationRequest:
    """Test GenerationRequest model validation."""

    def test_valid_request_defaults(self):
        request = GenerationRequest(ingredients=["onion"])
        assert request.preferences is None
        assert request.images == []

    def test_invalid_empty_ingredients(self):
        with pytest.raises(ValidationError):
            GenerationRequest(ingredients=[])

    def test_image_attachment_size(self):
        image = ImageAttachment(data=b"12345", mime_type="image/png", filename="a.png")
        assert image.size == 5


class TestResponseEnvelopes:
    """Test serialization of response envelopes."""

    def test_quality_info_serializes_with_aliases(self):
        info = QualityInfo(has_issues=True, issues=["Too few ingredients"], enhanced=EnhancementFlags(title_changed=True))

        dumped = info.model_dump(by_alias=True)

        assert dumped == {
            "hasIssues": True,
            "issues": ["Too few ingredients"],
            "enhanced": {"titleChanged": True, "ingredientsReorganized": False, "instructionsReformatted": False},
        }

    def test_success_response_shape(self):
        meta = ResponseMeta(request_id="req-1", processing_time=12, timestamp="2026-01-01T00:00:00Z")
        body = RecipeSuccessResponse(data={"title": "T"}, meta=meta, quality_info=QualityInfo(has_issues=False))

        dumped = body.model_dump(by_alias=True)

        assert dumped["success"] is True
        assert dumped["meta"]["requestId"] == "req-1"
        assert dumped["meta"]["processingTime"] == 12
        assert dumped["qualityInfo"]["hasIssues"] is False

    def test_error_response_shape(self):
        body = ErrorResponse(error=ErrorInfo(code="INVALID_REQUEST", message="bad"))

        dumped = body.model_dump(by_alias=True, exclude_none=True)

        assert dumped == {"success": False, "error": {"code": "INVALID_REQUEST", "message": "bad"}}


class TestGenerationError:
    """Test error codes and their HTTP status mapping."""

    @pytest.mark.parametrize(
        "code,status",
        [
            (ErrorCode.INVALID_REQUEST, 400),
            (ErrorCode.RATE_LIMIT_EXCEEDED, 429),
            (ErrorCode.AI_SERVICE_UNAVAILABLE, 502),
            (ErrorCode.REQUEST_TIMEOUT, 504),
            (ErrorCode.AI_RESPONSE_ERROR, 500),
            (ErrorCode.INTERNAL_SERVER_ERROR, 500),
        ],
    )
    def test_status_code_mapping(self, code, status):
        assert GenerationError(code, "message").status_code == status

    def test_error_keeps_message_and_reason(self):
        error = GenerationError(ErrorCode.AI_RESPONSE_ERROR, "bad json", reason=ErrorReason.PARSING_ERROR)

        assert str(error) == "bad json"
        assert error.reason is ErrorReason.PARSING_ERROR
        assert "PARSING_ERROR" in repr(error)

    def test_invalid_request_helper(self):
        error = invalid_request("At least one ingredient is required")

        assert error.code is ErrorCode.INVALID_REQUEST
        assert error.status_code == 400
