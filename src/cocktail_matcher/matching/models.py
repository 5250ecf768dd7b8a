import dataclasses
from typing import Optional, Tuple

from cocktail_matcher.recipes.models import Recipe, RecipeId


@dataclasses.dataclass(frozen=True)
class MatchResult:
    """A recipe annotated with how well a user's ingredients cover it.

    Built fresh for every match request and never persisted.

    Attributes:
        recipe: The matched recipe.
        match_count: Recipe ingredients satisfied by the user's set.
        total_ingredients: Number of ingredient lines in the recipe.
        match_percentage: ``match_count / total_ingredients`` as a whole
            percentage, rounded half up; 0 for a recipe with no ingredients.
        missing_ingredients: Recipe ingredient names the user doesn't have,
            in recipe order.
        query_hit_count: For remote matching only, how many of the user's
            ingredient queries returned this recipe. Not used for ranking.
    """

    recipe: Recipe
    match_count: int
    total_ingredients: int
    match_percentage: int
    missing_ingredients: Tuple[str, ...]
    query_hit_count: Optional[int] = None

    @property
    def id(self) -> RecipeId:
        return self.recipe.id

    @property
    def name(self) -> str:
        return self.recipe.name

    def is_missing(self, ingredient_name: str) -> bool:
        target = ingredient_name.strip().lower()
        return any(name.strip().lower() == target for name in self.missing_ingredients)
