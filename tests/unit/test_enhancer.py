"""Unit tests for heuristic recipe enhancement."""

import pytest

from src.models.models import Recipe
from src.pipeline.enhancer import (
    add_terminal_punctuation,
    clamp,
    enhance_description,
    enhance_ingredients,
    enhance_instructions,
    enhance_recipe,
    enhance_title,
    is_seasoning,
    sort_ingredients,
    truncate,
)


def make_recipe(**overrides) -> Recipe:
    fields = {
        "title": "stir-fry!",
        "description": "Tasty",
        "ingredients": ["onion", "onion", "chicken thigh"],
        "instructions": ["1. cut", "ok"],
        "cooking_time": 20,
        "servings": 2,
    }
    fields.update(overrides)
    return Recipe(**fields)


class TestTextHelpers:
    """Test truncation and punctuation."""

    def test_truncate_keeps_short_text(self):
        assert truncate("short", 10) == "short"

    def test_truncate_long_text(self):
        assert truncate("abcdefghijk", 10) == "abcdefg..."

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Tasty", "Tasty."),
            ("美味しい", "美味しい。"),
            ("Great!", "Great!"),
            ("完成。", "完成。"),
            ("123", "123"),
            ("", ""),
        ],
    )
    def test_add_terminal_punctuation(self, text, expected):
        assert add_terminal_punctuation(text) == expected


class TestEnhanceTitle:
    def test_trims_strips_punctuation_and_capitalizes(self):
        assert enhance_title("  pasta with tomato sauce!! ") == "Pasta with tomato sauce"

    def test_japanese_title(self):
        assert enhance_title("親子丼。") == "親子丼"

    def test_punctuation_followed_by_space(self):
        assert enhance_title("Soup ! ") == "Soup"
        assert enhance_title("味噌汁。 、") == "味噌汁"

    def test_long_title_truncated(self):
        """The '...' added by truncation is itself trailing punctuation and is removed."""
        title = enhance_title("a" * 120)

        assert title == "A" + "a" * 96
        assert len(title) <= 100


class TestEnhanceDescription:
    def test_adds_period(self):
        assert enhance_description("  A quick dinner  ") == "A quick dinner."

    def test_adds_japanese_full_stop(self):
        assert enhance_description("簡単な夕食") == "簡単な夕食。"

    def test_long_description_truncated(self):
        description = enhance_description("x" * 600)

        assert len(description) == 500
        assert description.endswith("...")


class TestEnhanceIngredients:
    def test_cleans_dedupes_and_groups(self):
        ingredients = ["・玉ねぎ 1個", "- chicken thigh 300g。", "* Salt", "salt", "", "醤油 大さじ2"]

        assert enhance_ingredients(ingredients) == [
            "chicken thigh 300g",
            "Salt",
            "玉ねぎ 1個",
            "醤油 大さじ2",
        ]

    def test_trailing_punctuation_mixed_with_spaces(self):
        assert enhance_ingredients(["鶏もも肉 300g。 。", "卵 2個、 "]) == ["卵 2個", "鶏もも肉 300g"]

    def test_seasoning_keyword_in_long_name(self):
        assert is_seasoning("サラダ油 大さじ1と1/2")
        assert not is_seasoning("chicken thigh")

    def test_short_names_count_as_seasoning(self):
        """Length heuristic: names under 10 characters are grouped with seasonings."""
        assert is_seasoning("carrot")
        assert sort_ingredients(["carrot", "beef short ribs", "pork belly slices"]) == [
            "beef short ribs",
            "pork belly slices",
            "carrot",
        ]

    def test_long_ingredient_truncated(self):
        result = enhance_ingredients(["x" * 200])

        assert len(result[0]) == 150
        assert result[0].endswith("...")


class TestEnhanceInstructions:
    def test_renumbers_and_drops_short_lines(self):
        instructions = ["1) Chop the onion", "  2. Heat oil in a pan.  ", "ok", "- Add chicken", "3.", "4. -", "鶏肉を焼く"]

        assert enhance_instructions(instructions) == [
            "1. Chop the onion.",
            "2. Heat oil in a pan.",
            "3. Add chicken.",
            "4. 鶏肉を焼く。",
        ]

    def test_short_raw_line_dropped_before_numbering(self):
        assert enhance_instructions(["1. cut", "ok"]) == ["1. cut."]

    def test_long_step_truncated(self):
        step = enhance_instructions(["x" * 400])[0]

        assert len(step) == 300
        assert step.startswith("1. x")
        assert step.endswith("...")


class TestClamp:
    @pytest.mark.parametrize(
        "value,expected",
        [(None, None), (0, 5), (-10, 5), (3, 3), (45, 45), (480, 480), (1000, 480)],
    )
    def test_cooking_time(self, value, expected):
        assert clamp(value, 5, 480) == expected

    @pytest.mark.parametrize("value,expected", [(0, 1), (1, 1), (4, 4), (20, 20), (50, 20)])
    def test_servings(self, value, expected):
        assert clamp(value, 1, 20) == expected


class TestEnhanceRecipe:
    """Test the full enhancement."""

    def test_enhances_every_field(self):
        enhanced = enhance_recipe(make_recipe(cooking_time=0, servings=1000))

        assert enhanced.title == "Stir-fry"
        assert enhanced.description == "Tasty."
        assert enhanced.ingredients == ["chicken thigh", "onion"]
        assert enhanced.instructions == ["1. cut."]
        assert enhanced.cooking_time == 5
        assert enhanced.servings == 20

    def test_does_not_mutate_input(self):
        recipe = make_recipe()

        enhance_recipe(recipe)

        assert recipe.ingredients == ["onion", "onion", "chicken thigh"]
        assert recipe.title == "stir-fry!"

    def test_short_cooking_time_kept(self):
        assert enhance_recipe(make_recipe(cooking_time=3)).cooking_time == 3

    def test_missing_optionals_stay_missing(self):
        enhanced = enhance_recipe(make_recipe(cooking_time=None, servings=None))

        assert enhanced.cooking_time is None
        assert enhanced.servings is None

    @pytest.mark.parametrize(
        "recipe",
        [
            make_recipe(),
            make_recipe(
                title="  鶏の照り焼き。 ",
                description="甘辛いタレで焼く定番料理",
                ingredients=["・鶏もも肉 2枚", "- 醤油 大さじ2", "みりん", "砂糖。", "・鶏もも肉 2枚"],
                instructions=["1. 鶏肉に下味をつける", "2) フライパンで焼く", "3. タレを絡める", "ok"],
                cooking_time=0,
                servings=99,
            ),
            make_recipe(
                title="x" * 150,
                description="y" * 520,
                ingredients=["z" * 180, "Butter", "butter"],
                instructions=["w" * 350, "- step two here"],
                cooking_time=1000,
            ),
            make_recipe(title="Soup ! ", ingredients=["鶏もも肉 300g。 。", "にんじん、 ", "卵"]),
        ],
    )
    def test_idempotent(self, recipe):
        once = enhance_recipe(recipe)

        assert enhance_recipe(once) == once
