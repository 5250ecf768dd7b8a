import pytest

from cocktail_matcher.ingredients.normalization import (
    ingredients_match,
    normalize_ingredient_name,
    normalize_ingredient_names,
)


@pytest.mark.parametrize(
    "input_text, expected_text",
    [
        ("  London Dry Gin ", "london dry gin"),
        ("VODKA", "vodka"),
        ("soda water", "soda water"),
        ("", ""),
    ],
)
def test_normalize_ingredient_name(input_text, expected_text):
    assert normalize_ingredient_name(input_text) == expected_text


def test_normalize_ingredient_names_preserves_order():
    assert normalize_ingredient_names(["Rum", " Lime "]) == ["rum", "lime"]


@pytest.mark.parametrize(
    "recipe_ingredient, user_ingredient, expected",
    [
        ("London dry gin", "gin", True),
        ("gin", "london dry gin", True),
        ("Dark Rum", "  RUM ", True),
        ("Vodka", "gin", False),
        ("Lime juice", "lemon", False),
    ],
)
def test_ingredients_match_either_direction(recipe_ingredient, user_ingredient, expected):
    """Containment is tested both ways and ignores case and padding."""
    assert ingredients_match(recipe_ingredient, user_ingredient) is expected

