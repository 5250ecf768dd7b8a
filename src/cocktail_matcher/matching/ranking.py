"""Scoring and ordering of match results."""

from typing import Iterable, List, Optional, Sequence

from cocktail_matcher.matching.models import MatchResult
from cocktail_matcher.recipes.models import Recipe


def match_percentage(match_count: int, total_ingredients: int) -> int:
    """Whole-number match percentage, rounded half up.

    Examples:
        >>> match_percentage(2, 5)
        40
        >>> match_percentage(1, 8)
        13
        >>> match_percentage(0, 0)
        0
    """
    if total_ingredients <= 0:
        return 0
    # Integer arithmetic avoids round()'s half-to-even behaviour.
    return (200 * match_count + total_ingredients) // (2 * total_ingredients)


def minimum_matches(user_ingredient_count: int) -> int:
    """Matches a recipe needs before it is shown to a user.

    One declared ingredient needs one match; two or more need two.
    """
    return 2 if user_ingredient_count >= 2 else 1


def build_match_result(
    recipe: Recipe,
    satisfied: Sequence[bool],
    query_hit_count: Optional[int] = None,
) -> MatchResult:
    """Annotate a recipe given, per ingredient line, whether it is satisfied.

    Args:
        recipe: The recipe being scored.
        satisfied: One flag per entry of ``recipe.ingredients``.
        query_hit_count: Optional remote query hit count to carry along.

    Returns:
        A MatchResult whose counts always add up to the ingredient total.
    """
    if len(satisfied) != len(recipe.ingredients):
        raise ValueError(
            f"Expected {len(recipe.ingredients)} flags for {recipe.name!r}, got {len(satisfied)}"
        )
    missing = tuple(
        ingredient.name
        for ingredient, ok in zip(recipe.ingredients, satisfied)
        if not ok
    )
    total = len(recipe.ingredients)
    count = total - len(missing)
    return MatchResult(
        recipe=recipe,
        match_count=count,
        total_ingredients=total,
        match_percentage=match_percentage(count, total),
        missing_ingredients=missing,
        query_hit_count=query_hit_count,
    )


def rank_matches(results: Iterable[MatchResult]) -> List[MatchResult]:
    """Sort by match percentage, then match count, both descending.

    The sort is stable, so equal results keep their input order.
    """
    return sorted(results, key=lambda r: (-r.match_percentage, -r.match_count))
