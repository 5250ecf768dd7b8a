"""HTTP client for TheCocktailDB-style recipe search APIs."""

import logging
import random
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import requests

from cocktail_matcher.recipes.models import Recipe, RecipeId, RecipeIngredient, RecipeSummary
from cocktail_matcher.remote.retry import retry_on_connection_error

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://www.thecocktaildb.com/api/json/v1/1"
MAX_INGREDIENT_SLOTS = 15


class RemoteQueryFailure(Exception):
    """Raised when a single remote call fails, times out or returns garbage."""


class RemoteRecipeSource(ABC):
    """A recipe catalog that can only be reached one query at a time."""

    @abstractmethod
    def search_by_ingredient(self, ingredient: str) -> List[RecipeSummary]:
        """Return summaries of recipes using ``ingredient``; may be empty.

        Raises:
            RemoteQueryFailure: If the call fails.
        """

    @abstractmethod
    def get_by_id(self, recipe_id: RecipeId) -> Optional[Recipe]:
        """Return the full recipe, or None if the source doesn't know it.

        Raises:
            RemoteQueryFailure: If the call fails.
        """


def drink_to_recipe(drink: Dict[str, Any]) -> Recipe:
    """Convert a full drink payload into a Recipe.

    The payload spreads ingredients over numbered ``strIngredientN`` and
    ``strMeasureN`` fields; blank ingredient slots are skipped.

    Args:
        drink: One element of a lookup or name-search ``drinks`` array.

    Returns:
        The equivalent Recipe, tagged with source ``"thecocktaildb"``.

    Raises:
        RemoteQueryFailure: If ``idDrink`` or ``strDrink`` is missing.
    """
    if not isinstance(drink, dict) or not drink.get("idDrink") or not drink.get("strDrink"):
        raise RemoteQueryFailure(f"Malformed drink payload: {drink!r}")

    ingredients = []
    for slot in range(1, MAX_INGREDIENT_SLOTS + 1):
        name = (drink.get(f"strIngredient{slot}") or "").strip()
        if not name:
            continue
        amount = (drink.get(f"strMeasure{slot}") or "").strip()
        ingredients.append(RecipeIngredient(name=name, amount=amount))

    instructions = (drink.get("strInstructions") or "").strip()
    tags = [tag.strip() for tag in (drink.get("strTags") or "").split(",") if tag.strip()]

    return Recipe(
        id=drink["idDrink"],
        name=drink["strDrink"],
        image=drink.get("strDrinkThumb") or "",
        category=drink.get("strCategory") or "",
        tags=tuple(tags),
        glass=drink.get("strGlass") or "",
        ingredients=tuple(ingredients),
        instructions=(instructions,) if instructions else (),
        alcoholic=drink.get("strAlcoholic") == "Alcoholic",
        source="thecocktaildb",
        parsed_at=drink.get("dateModified") or "",
    )


class CocktailDBClient(RemoteRecipeSource):
    """Rate-limited client for a TheCocktailDB-compatible JSON API.

    Every request sleeps ``request_delay`` seconds (plus random jitter) first,
    so sequential use stays polite to the remote source.

    requests does not guarantee a Session is thread-safe, so each thread that
    uses the client gets its own session from ``session_factory``.

    Attributes:
        session: The requests session for the calling thread
        base_url: API root, e.g. ``https://www.thecocktaildb.com/api/json/v1/1``
        request_delay: Fixed delay before each request in seconds
        jitter_range: Random jitter range added to the delay
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        user_agent: str = "cocktail-matcher/0.1",
        request_delay: float = 0.5,
        jitter_range: tuple = (0.0, 0.0),
        timeout: float = 30,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self.user_agent = user_agent
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()
        self.base_url = base_url.rstrip("/")
        self.request_delay = request_delay
        self.jitter_range = jitter_range
        self.timeout = timeout
        self._fetch = retry_on_connection_error(max_retries, retry_delay)(self._fetch_once)

    def __enter__(self) -> "CocktailDBClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            session.headers["User-Agent"] = self.user_agent
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def close(self) -> None:
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()

    def _wait(self) -> None:
        delay = self.request_delay + random.uniform(*self.jitter_range)
        if delay > 0:
            time.sleep(delay)

    def _fetch_once(self, endpoint: str, params: Dict[str, Any]) -> Any:
        self._wait()
        response = self.session.get(
            f"{self.base_url}/{endpoint}", params=params, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    def _get_drinks(self, endpoint: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Fetch an endpoint and return its ``drinks`` array.

        The API reports "no results" as ``null`` or a string in place of the
        array; both come back as an empty list.
        """
        try:
            data = self._fetch(endpoint, params)
        except requests.exceptions.RequestException as e:
            raise RemoteQueryFailure(f"{endpoint} {params} failed: {e}") from e
        except ValueError as e:
            raise RemoteQueryFailure(f"{endpoint} {params} returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise RemoteQueryFailure(f"{endpoint} {params} returned unexpected payload")
        drinks = data.get("drinks")
        if not isinstance(drinks, list):
            return []
        return drinks

    def search_by_ingredient(self, ingredient: str) -> List[RecipeSummary]:
        summaries = []
        for drink in self._get_drinks("filter.php", {"i": ingredient}):
            try:
                summaries.append(
                    RecipeSummary(
                        id=drink["idDrink"],
                        name=drink["strDrink"],
                        thumbnail=drink.get("strDrinkThumb") or "",
                    )
                )
            except (KeyError, TypeError) as e:
                raise RemoteQueryFailure(f"Malformed search hit for {ingredient!r}: {drink!r}") from e
        return summaries

    def get_by_id(self, recipe_id: RecipeId) -> Optional[Recipe]:
        drinks = self._get_drinks("lookup.php", {"i": recipe_id})
        if not drinks:
            return None
        return drink_to_recipe(drinks[0])

    def search_by_name(self, name: str) -> List[Recipe]:
        """Find full recipes whose name matches ``name`` on the remote side."""
        return [drink_to_recipe(drink) for drink in self._get_drinks("search.php", {"s": name.strip()})]
