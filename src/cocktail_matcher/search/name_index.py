"""Find recipes by name."""

import dataclasses
import enum
import logging
from typing import List, Optional, Tuple

from cocktail_matcher.recipes.catalog import RecipeCatalog
from cocktail_matcher.recipes.models import Recipe
from cocktail_matcher.remote.client import CocktailDBClient, RemoteQueryFailure

logger = logging.getLogger(__name__)


class NameMatch(enum.Enum):
    NONE = "none"
    SINGLE = "single"
    MULTIPLE = "multiple"


@dataclasses.dataclass(frozen=True)
class NameSearchResult:
    """Recipes found for a name query.

    Callers branch on ``kind``: nothing found, exactly one recipe (show it
    directly) or several (let the user pick).
    """

    query: str
    recipes: Tuple[Recipe, ...]

    @property
    def kind(self) -> NameMatch:
        if not self.recipes:
            return NameMatch.NONE
        if len(self.recipes) == 1:
            return NameMatch.SINGLE
        return NameMatch.MULTIPLE

    @property
    def single(self) -> Optional[Recipe]:
        return self.recipes[0] if self.kind is NameMatch.SINGLE else None

    def __len__(self) -> int:
        return len(self.recipes)

    def top(self, limit: int) -> List[Recipe]:
        return list(self.recipes[:limit])


class NameSearchIndex:
    """Case-insensitive substring search over a catalog's recipe names."""

    def __init__(self, catalog: RecipeCatalog):
        self.catalog = catalog

    def search(self, query: str) -> NameSearchResult:
        query = query.strip()
        return NameSearchResult(query=query, recipes=tuple(self.catalog.search_by_name(query)))


class RemoteNameSearch:
    """Name search backed by a remote API, shaped like NameSearchIndex.

    A failed remote call is logged and reported as no match.
    """

    def __init__(self, client: CocktailDBClient):
        self.client = client

    def search(self, query: str) -> NameSearchResult:
        query = query.strip()
        try:
            recipes = self.client.search_by_name(query)
        except RemoteQueryFailure as e:
            logger.warning(f"Remote name search for {query!r} failed: {e}")
            recipes = []
        return NameSearchResult(query=query, recipes=tuple(recipes))
