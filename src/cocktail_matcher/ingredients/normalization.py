"""Ingredient normalization utilities."""

from typing import Iterable, List


def normalize_ingredient_name(name: str) -> str:
    """Normalize an ingredient name for comparison.

    Trims surrounding whitespace and converts to lowercase. Inner whitespace
    is left alone so that "soda  water" and "soda water" stay distinct, the
    same way they are stored.

    Args:
        name: Raw ingredient name, from a recipe or typed by a user.

    Returns:
        Normalized ingredient name.

    Examples:
        >>> normalize_ingredient_name("  London Dry Gin ")
        "london dry gin"
    """
    return name.strip().lower()


def normalize_ingredient_names(names: Iterable[str]) -> List[str]:
    """Normalize a sequence of ingredient names, preserving order."""
    return [normalize_ingredient_name(name) for name in names]


def ingredients_match(recipe_ingredient: str, user_ingredient: str) -> bool:
    """Check whether a user ingredient satisfies a recipe ingredient.

    Containment is tested in both directions, so a broad user term ("rum")
    satisfies a specific recipe ingredient ("dark rum") and a specific user
    term ("london dry gin") satisfies a broad recipe ingredient ("gin").

    Args:
        recipe_ingredient: Ingredient name as written in the recipe.
        user_ingredient: Ingredient name as declared by the user.

    Returns:
        True if either normalized name contains the other.

    Examples:
        >>> ingredients_match("London dry gin", "gin")
        True
        >>> ingredients_match("gin", "london dry gin")
        True
        >>> ingredients_match("Vodka", "gin")
        False
    """
    recipe_name = normalize_ingredient_name(recipe_ingredient)
    user_name = normalize_ingredient_name(user_ingredient)
    return user_name in recipe_name or recipe_name in user_name

