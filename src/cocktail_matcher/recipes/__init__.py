"""Recipe model and catalog."""

from .catalog import CatalogLoadError, CatalogStats, RecipeCatalog, load_recipes
from .models import Recipe, RecipeId, RecipeIngredient, RecipeSummary

__all__ = [
    "Recipe",
    "RecipeId",
    "RecipeIngredient",
    "RecipeSummary",
    "RecipeCatalog",
    "CatalogLoadError",
    "CatalogStats",
    "load_recipes",
]
