"""Ranked recipe matching against a user's ingredient set."""

import logging
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from cocktail_matcher.ingredients.normalization import (
    ingredients_match,
    normalize_ingredient_name,
    normalize_ingredient_names,
)
from cocktail_matcher.matching.models import MatchResult
from cocktail_matcher.matching.ranking import build_match_result, minimum_matches, rank_matches
from cocktail_matcher.recipes.catalog import RecipeCatalog
from cocktail_matcher.recipes.models import Recipe, RecipeSummary
from cocktail_matcher.remote.client import RemoteQueryFailure, RemoteRecipeSource

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class MatchEngine(ABC):
    """Produces ranked MatchResults for a user's ingredients.

    Callers choose an implementation once, at construction, and use only
    ``find_matches`` afterwards.
    """

    @property
    @abstractmethod
    def mode(self) -> str:
        """Short name of the matching strategy."""

    @abstractmethod
    def find_matches(
        self,
        user_ingredients: Sequence[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[MatchResult]:
        """Return matching recipes, best first.

        Args:
            user_ingredients: The user's ingredient names, in any casing.
            cancel_event: If set while matching, stop early and return what
                has been computed so far.

        Returns:
            MatchResults sorted by match percentage, then match count.
        """


class IndexedMatchEngine(MatchEngine):
    """Matches against a fully loaded catalog in a single pass.

    A recipe ingredient is satisfied when any user ingredient contains it or
    is contained by it. Recipes must reach the minimum-match gate to be
    included.
    """

    def __init__(self, catalog: RecipeCatalog):
        self.catalog = catalog

    @property
    def mode(self) -> str:
        return "indexed"

    def score_recipe(self, recipe: Recipe, normalized_user: Sequence[str]) -> MatchResult:
        satisfied = [
            any(ingredients_match(ingredient.name, user) for user in normalized_user)
            for ingredient in recipe.ingredients
        ]
        return build_match_result(recipe, satisfied)

    def find_matches(
        self,
        user_ingredients: Sequence[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[MatchResult]:
        # Blank names would be a substring of everything; duplicates would inflate the gate.
        normalized_user = list(
            dict.fromkeys(name for name in normalize_ingredient_names(user_ingredients) if name)
        )
        if not normalized_user:
            return []

        min_matches = minimum_matches(len(normalized_user))
        results = []
        for recipe in self.catalog:
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Indexed match cancelled, returning partial results")
                break
            result = self.score_recipe(recipe, normalized_user)
            if result.match_count >= min_matches:
                results.append(result)
        return rank_matches(results)


class FederatedMatchEngine(MatchEngine):
    """Matches against a remote source that only supports per-ingredient search.

    One search is issued per user ingredient; the hits are merged by recipe
    id and each unique candidate's full recipe is fetched once. A failed
    search or fetch only drops that piece of the result.

    Args:
        source: Remote recipe source.
        max_workers: Number of concurrent outbound calls. 1 keeps calls
            strictly sequential.
    """

    def __init__(self, source: RemoteRecipeSource, max_workers: int = 1):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.source = source
        self.max_workers = max_workers

    @property
    def mode(self) -> str:
        return "federated"

    def _run_all(
        self,
        func: Callable[[T], R],
        items: Sequence[T],
        cancel_event: Optional[threading.Event],
    ) -> List[R]:
        """Apply ``func`` to each item, keeping results in item order.

        Items not yet started when ``cancel_event`` is set are skipped and
        produce None.
        """

        def guarded(item: T) -> Optional[R]:
            if cancel_event is not None and cancel_event.is_set():
                return None
            return func(item)

        if self.max_workers == 1 or len(items) <= 1:
            return [guarded(item) for item in items]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(guarded, item) for item in items]
            return [future.result() for future in futures]

    def _search(self, ingredient: str) -> List[RecipeSummary]:
        try:
            return self.source.search_by_ingredient(ingredient)
        except RemoteQueryFailure as e:
            logger.warning(f"Search for ingredient {ingredient!r} failed, skipping: {e}")
            return []

    def _fetch(self, summary: RecipeSummary) -> Optional[Recipe]:
        try:
            recipe = self.source.get_by_id(summary.id)
        except RemoteQueryFailure as e:
            logger.warning(f"Fetching recipe {summary.id!r} failed, dropping candidate: {e}")
            return None
        if recipe is None:
            logger.warning(f"Recipe {summary.id!r} ({summary.name}) not found, dropping candidate")
        return recipe

    def find_matches(
        self,
        user_ingredients: Sequence[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[MatchResult]:
        queries = [name.strip() for name in user_ingredients if name.strip()]
        if not queries:
            return []

        candidates: "OrderedDict[str, RecipeSummary]" = OrderedDict()
        hit_counts: Dict[str, int] = {}
        for hits in self._run_all(self._search, queries, cancel_event):
            for summary in hits or []:
                key = str(summary.id)
                candidates.setdefault(key, summary)
                hit_counts[key] = hit_counts.get(key, 0) + 1

        user_set = set(normalize_ingredient_names(queries))
        summaries = list(candidates.values())
        results = []
        for summary, recipe in zip(summaries, self._run_all(self._fetch, summaries, cancel_event)):
            if recipe is None:
                continue
            satisfied = [
                normalize_ingredient_name(ingredient.name) in user_set
                for ingredient in recipe.ingredients
            ]
            results.append(
                build_match_result(recipe, satisfied, query_hit_count=hit_counts[str(summary.id)])
            )

        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Federated match cancelled, returning {len(results)} partial results")
        return rank_matches(results)


def create_match_engine(
    mode: str,
    catalog: Optional[RecipeCatalog] = None,
    source: Optional[RemoteRecipeSource] = None,
    max_workers: int = 1,
) -> MatchEngine:
    """Build the engine for a deployment's matching mode.

    Args:
        mode: ``"indexed"`` or ``"federated"``.
        catalog: Required for indexed mode.
        source: Required for federated mode.
        max_workers: Concurrency cap for federated mode.

    Raises:
        ValueError: For an unknown mode or a missing collaborator.
    """
    if mode == "indexed":
        if catalog is None:
            raise ValueError("Indexed matching requires a recipe catalog")
        return IndexedMatchEngine(catalog)
    if mode == "federated":
        if source is None:
            raise ValueError("Federated matching requires a remote recipe source")
        return FederatedMatchEngine(source, max_workers=max_workers)
    raise ValueError(f"Unknown match mode: {mode!r}")
