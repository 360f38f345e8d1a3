"""Unit tests for the command-line query runner."""

from io import BytesIO

import pytest
from PIL import Image

from query import load_image, render_recipe
from src.models.models import EnhancementFlags, GenerationResult, QualityInfo, Recipe


def make_result(has_issues=False, **overrides) -> GenerationResult:
    fields = {
        "title": "Oyakodon",
        "description": "Chicken and egg rice bowl.",
        "ingredients": ["chicken thigh 200g", "egg 2"],
        "instructions": ["1. Simmer the chicken.", "2. Add the egg."],
        "cooking_time": 20,
        "servings": 2,
    }
    fields.update(overrides)
    issues = ["Description is too short"] if has_issues else []
    return GenerationResult(
        recipe=Recipe(**fields),
        quality_info=QualityInfo(has_issues=has_issues, issues=issues, enhanced=EnhancementFlags()),
    )


class TestRenderRecipe:
    def test_renders_all_sections(self):
        markdown = render_recipe(make_result())

        assert markdown.startswith("# Oyakodon")
        assert "**Time:** 20 min" in markdown
        assert "**Servings:** 2" in markdown
        assert "- chicken thigh 200g" in markdown
        assert "1. Simmer the chicken." in markdown
        assert "Quality Notes" not in markdown

    def test_omits_missing_details(self):
        markdown = render_recipe(make_result(cooking_time=None, servings=None))

        assert "**Time:**" not in markdown
        assert "**Servings:**" not in markdown

    def test_lists_quality_issues(self):
        markdown = render_recipe(make_result(has_issues=True))

        assert "## Quality Notes" in markdown
        assert "- Description is too short" in markdown


class TestLoadImage:
    def test_loads_and_sniffs_type(self, tmp_path):
        output = BytesIO()
        Image.new("RGB", (8, 8)).save(output, "PNG")
        path = tmp_path / "fridge.jpg"
        path.write_bytes(output.getvalue())

        image = load_image(str(path))

        assert image.mime_type == "image/png"
        assert image.filename == "fridge.jpg"

    def test_missing_file_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            load_image(str(tmp_path / "missing.png"))
