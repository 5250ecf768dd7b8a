"""Ingredient name normalization and matching utilities."""

from .normalization import (
    ingredients_match,
    normalize_ingredient_name,
    normalize_ingredient_names,
)

__all__ = [
    "normalize_ingredient_name",
    "normalize_ingredient_names",
    "ingredients_match",
]
