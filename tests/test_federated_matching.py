import threading

import pytest
from conftest import make_recipe

from cocktail_matcher.matching import FederatedMatchEngine, create_match_engine
from cocktail_matcher.recipes import RecipeSummary
from cocktail_matcher.remote import RemoteQueryFailure, RemoteRecipeSource


class _DummySource(RemoteRecipeSource):
    def __init__(self, recipes, index, failing_searches=(), failing_ids=()):
        self.recipes = {str(r.id): r for r in recipes}
        self.index = index
        self.failing_searches = set(failing_searches)
        self.failing_ids = set(failing_ids)
        self.calls = []
        self._lock = threading.Lock()

    def _record(self, call):
        with self._lock:
            self.calls.append(call)

    def search_by_ingredient(self, ingredient):
        self._record(("search", ingredient))
        if ingredient in self.failing_searches:
            raise RemoteQueryFailure(f"search {ingredient} failed")
        return [
            RecipeSummary(id=recipe_id, name=self.recipes[str(recipe_id)].name)
            for recipe_id in self.index.get(ingredient, [])
        ]

    def get_by_id(self, recipe_id):
        self._record(("lookup", recipe_id))
        if recipe_id in self.failing_ids:
            raise RemoteQueryFailure(f"lookup {recipe_id} failed")
        return self.recipes.get(str(recipe_id))


RECIPES = [
    make_recipe("11000", "Mojito", ["Light rum", "Lime", "Sugar", "Mint", "Soda water"]),
    make_recipe("11001", "Daiquiri", ["Light rum", "Lime", "Sugar"]),
    make_recipe("11002", "Gin Rickey", ["Gin", "Lime", "Soda water"]),
]

INDEX = {
    "Light rum": ["11000", "11001"],
    "Lime": ["11000", "11001", "11002"],
    "Sugar": ["11000", "11001"],
}


def test_merges_candidates_and_counts_exact_matches():
    source = _DummySource(RECIPES, INDEX)
    engine = FederatedMatchEngine(source)
    results = engine.find_matches(["Light rum", "Lime", "Sugar"])

    assert [r.name for r in results] == ["Daiquiri", "Mojito", "Gin Rickey"]
    daiquiri, mojito, rickey = results
    assert (daiquiri.match_count, daiquiri.match_percentage) == (3, 100)
    assert (mojito.match_count, mojito.match_percentage) == (3, 60)
    assert mojito.missing_ingredients == ("Mint", "Soda water")
    assert (rickey.match_count, rickey.match_percentage) == (1, 33)
    assert daiquiri.query_hit_count == 3
    assert rickey.query_hit_count == 1


def test_each_candidate_fetched_once():
    source = _DummySource(RECIPES, INDEX)
    FederatedMatchEngine(source).find_matches(["Light rum", "Lime", "Sugar"])
    lookups = [call for call in source.calls if call[0] == "lookup"]
    assert sorted(lookups) == [("lookup", "11000"), ("lookup", "11001"), ("lookup", "11002")]
    assert len([call for call in source.calls if call[0] == "search"]) == 3


def test_match_is_case_insensitive_but_exact():
    source = _DummySource(RECIPES, {"light RUM": ["11001"]})
    results = FederatedMatchEngine(source).find_matches(["light RUM"])
    assert results[0].match_count == 1
    assert results[0].missing_ingredients == ("Lime", "Sugar")


def test_failed_search_is_skipped():
    source = _DummySource(RECIPES, INDEX, failing_searches={"Light rum"})
    results = FederatedMatchEngine(source).find_matches(["Light rum", "Lime"])
    assert {r.name for r in results} == {"Mojito", "Daiquiri", "Gin Rickey"}
    assert all(r.query_hit_count == 1 for r in results)


def test_failed_or_unknown_lookup_drops_candidate():
    index = dict(INDEX, Lime=["11000", "11001", "11002", "99999"])
    source = _DummySource(RECIPES, index, failing_ids={"11000"})
    results = FederatedMatchEngine(source).find_matches(["Lime"])
    assert [r.name for r in results] == ["Daiquiri", "Gin Rickey"]


def test_all_calls_failing_gives_empty_result():
    source = _DummySource(RECIPES, INDEX, failing_searches=set(INDEX))
    assert FederatedMatchEngine(source).find_matches(list(INDEX)) == []


def test_empty_user_set_makes_no_calls():
    source = _DummySource(RECIPES, INDEX)
    assert FederatedMatchEngine(source).find_matches([]) == []
    assert source.calls == []


def test_parallel_run_matches_sequential_run():
    sequential = FederatedMatchEngine(_DummySource(RECIPES, INDEX)).find_matches(["Light rum", "Lime", "Sugar"])
    parallel = FederatedMatchEngine(_DummySource(RECIPES, INDEX), max_workers=4).find_matches(
        ["Light rum", "Lime", "Sugar"]
    )
    assert parallel == sequential


def test_cancel_stops_outbound_calls():
    cancel = threading.Event()

    class _CancellingSource(_DummySource):
        def search_by_ingredient(self, ingredient):
            hits = super().search_by_ingredient(ingredient)
            cancel.set()
            return hits

    source = _CancellingSource(RECIPES, INDEX)
    results = FederatedMatchEngine(source).find_matches(["Light rum", "Lime"], cancel_event=cancel)
    assert results == []
    assert source.calls == [("search", "Light rum")]


def test_create_match_engine_federated():
    engine = create_match_engine("federated", source=_DummySource(RECIPES, INDEX), max_workers=2)
    assert isinstance(engine, FederatedMatchEngine)
    assert engine.mode == "federated"
    assert engine.max_workers == 2


def test_max_workers_must_be_positive():
    with pytest.raises(ValueError):
        FederatedMatchEngine(_DummySource(RECIPES, INDEX), max_workers=0)
