"""In-memory recipe catalog loaded from a JSON recipe collection."""

import dataclasses
import json
import logging
import pathlib
import random
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from cocktail_matcher.recipes.models import Recipe, RecipeId

logger = logging.getLogger(__name__)


class CatalogLoadError(Exception):
    """Raised when a recipe source is missing or cannot be parsed."""


@dataclasses.dataclass(frozen=True)
class CatalogStats:
    total: int
    alcoholic: int
    non_alcoholic: int
    avg_ingredients: int


def _id_key(recipe_id: RecipeId) -> str:
    return str(recipe_id).strip()


def load_recipes(path: Union[str, pathlib.Path]) -> List[Recipe]:
    """Read and parse a serialized recipe collection.

    Args:
        path: Path to a JSON file holding an array of recipe records.

    Returns:
        Recipes in file order.

    Raises:
        CatalogLoadError: If the file is missing, is not valid JSON, is not an
            array, holds a malformed record, or repeats a recipe id.
    """
    path = pathlib.Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogLoadError(f"Recipe source not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Could not read recipe source {path}: {e}") from e

    if not isinstance(data, list):
        raise CatalogLoadError(f"Recipe source {path} must contain a JSON array")

    recipes = []
    seen = set()
    for index, record in enumerate(data):
        try:
            recipe = Recipe.from_dict(record)
        except ValueError as e:
            raise CatalogLoadError(f"Malformed recipe at index {index} in {path}: {e}") from e
        key = _id_key(recipe.id)
        if key in seen:
            raise CatalogLoadError(f"Duplicate recipe id {recipe.id!r} in {path}")
        seen.add(key)
        recipes.append(recipe)
    return recipes


class RecipeCatalog:
    """Immutable, ordered set of recipes with lookup by id and name.

    An empty catalog is a valid, degraded state: it simply produces no
    recommendations.
    """

    def __init__(self, recipes: Iterable[Recipe] = ()):
        self._recipes: Tuple[Recipe, ...] = tuple(recipes)
        self._by_id: Dict[str, Recipe] = {}
        for recipe in self._recipes:
            self._by_id.setdefault(_id_key(recipe.id), recipe)

    @classmethod
    def load(cls, path: Union[str, pathlib.Path]) -> "RecipeCatalog":
        """Load a catalog, falling back to an empty one on failure.

        Args:
            path: Path to the JSON recipe collection.

        Returns:
            A populated catalog, or an empty catalog if loading failed.
        """
        try:
            recipes = load_recipes(path)
        except CatalogLoadError as e:
            logger.error(f"Failed to load recipe catalog, continuing with none: {e}")
            return cls()
        logger.info(f"Loaded {len(recipes)} recipes from {path}")
        return cls(recipes)

    def __len__(self) -> int:
        return len(self._recipes)

    def __iter__(self) -> Iterator[Recipe]:
        return iter(self._recipes)

    def __bool__(self) -> bool:
        return bool(self._recipes)

    def all(self) -> Sequence[Recipe]:
        """All recipes in load order."""
        return self._recipes

    def get_by_id(self, recipe_id: RecipeId) -> Optional[Recipe]:
        """Get a recipe by id; ``12`` and ``"12"`` name the same recipe."""
        return self._by_id.get(_id_key(recipe_id))

    def search_by_name(self, query: str) -> List[Recipe]:
        """Find recipes whose name contains ``query``, ignoring case.

        The query is trimmed first. Results are in load order and are not
        truncated.
        """
        term = query.strip().lower()
        return [recipe for recipe in self._recipes if term in recipe.name.lower()]

    def random_recipe(self, rng: Optional[random.Random] = None) -> Optional[Recipe]:
        if not self._recipes:
            return None
        return (rng or random).choice(self._recipes)

    def stats(self) -> CatalogStats:
        """Summary counts over the catalog."""
        total = len(self._recipes)
        alcoholic = sum(1 for recipe in self._recipes if recipe.alcoholic)
        avg = 0
        if total:
            ingredient_total = sum(len(recipe.ingredients) for recipe in self._recipes)
            avg = (2 * ingredient_total + total) // (2 * total)
        return CatalogStats(
            total=total,
            alcoholic=alcoholic,
            non_alcoholic=total - alcoholic,
            avg_ingredients=avg,
        )
