#!/usr/bin/env python3
"""
Command-line front end: manage a user's ingredients and find cocktails.
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from cocktail_matcher.config import MATCH_MODES, Settings
from cocktail_matcher.matching import MatchEngine, MatchResult, create_match_engine
from cocktail_matcher.recipes import RecipeCatalog
from cocktail_matcher.remote import CocktailDBClient
from cocktail_matcher.recipes.models import Recipe
from cocktail_matcher.search import NameMatch, NameSearchIndex, RemoteNameSearch
from cocktail_matcher.session import SessionCache
from cocktail_matcher.storage import CapacityExceeded, UserIngredientStore, UserNotFound

logger = logging.getLogger(__name__)

MISSING_SHOWN = 3


def _user_id(value: str):
    return int(value) if value.lstrip("-").isdigit() else value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cocktail-matcher",
        description="Find cocktails you can make from the ingredients you have.",
    )
    parser.add_argument("--recipes", help="Path to the recipe collection JSON")
    parser.add_argument("--users", help="Path to the user data JSON")
    parser.add_argument("--mode", choices=MATCH_MODES, help="Matching strategy")
    parser.add_argument("--max-results", type=int, help="Number of results to print")

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Add ingredients to a user's set")
    add.add_argument("user_id", type=_user_id)
    add.add_argument("names", nargs="+")

    remove = subparsers.add_parser("remove", help="Remove an ingredient")
    remove.add_argument("user_id", type=_user_id)
    remove.add_argument("name")

    clear = subparsers.add_parser("clear", help="Remove all of a user's ingredients")
    clear.add_argument("user_id", type=_user_id)

    listing = subparsers.add_parser("list", help="Show a user's ingredients")
    listing.add_argument("user_id", type=_user_id)

    find = subparsers.add_parser("find", help="Find cocktails for a user's ingredients")
    find.add_argument("user_id", type=_user_id)

    search = subparsers.add_parser("search", help="Find cocktails by name")
    search.add_argument("query")
    search.add_argument("--user-id", type=_user_id, help="Remember the results for this user")

    show = subparsers.add_parser("show", help="Show a recipe from the user's last results")
    show.add_argument("user_id", type=_user_id)
    show.add_argument("position", type=int, help="1-based position in the printed list")
    show.add_argument(
        "--name", action="store_true", help="Pick from the last name search instead of the last find"
    )

    subparsers.add_parser("stats", help="Show recipe catalog statistics")
    return parser


def format_match(index: int, match: MatchResult) -> str:
    line = (
        f"{index}. {match.name} - {match.match_count}/{match.total_ingredients} "
        f"({match.match_percentage}%)"
    )
    if match.missing_ingredients:
        missing = ", ".join(match.missing_ingredients[:MISSING_SHOWN])
        more = "..." if len(match.missing_ingredients) > MISSING_SHOWN else ""
        line += f"\n   missing: {missing}{more}"
    return line


def print_recipe(recipe: Recipe) -> None:
    print(recipe.name)
    for ingredient in recipe.ingredients:
        amount = f"{ingredient.amount} " if ingredient.amount else ""
        print(f"- {amount}{ingredient.name}")
    for step in recipe.instructions:
        print(step)


class App:
    """Wires configuration to the store, catalog and matching engine."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.store = UserIngredientStore(
            settings.users_path, max_ingredients=settings.max_ingredients_per_user
        )
        self.sessions = SessionCache(
            max_size=settings.session_cache_size, ttl_seconds=settings.session_ttl
        )
        self._catalog: Optional[RecipeCatalog] = None
        self._client: Optional[CocktailDBClient] = None

    @property
    def catalog(self) -> RecipeCatalog:
        if self._catalog is None:
            self._catalog = RecipeCatalog.load(self.settings.recipes_path)
        return self._catalog

    @property
    def client(self) -> CocktailDBClient:
        if self._client is None:
            self._client = CocktailDBClient(
                base_url=self.settings.api_url,
                request_delay=self.settings.request_delay,
                timeout=self.settings.request_timeout,
            )
        return self._client

    def engine(self) -> MatchEngine:
        if self.settings.match_mode == "federated":
            return create_match_engine(
                "federated", source=self.client, max_workers=self.settings.max_workers
            )
        return create_match_engine("indexed", catalog=self.catalog)

    def name_search(self):
        if self.settings.match_mode == "federated":
            return RemoteNameSearch(self.client)
        return NameSearchIndex(self.catalog)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    def run(self, args: argparse.Namespace) -> int:
        handler = getattr(self, f"cmd_{args.command}")
        return handler(args)

    def cmd_add(self, args: argparse.Namespace) -> int:
        for position, name in enumerate(args.names):
            try:
                self.store.add(args.user_id, name)
            except CapacityExceeded as e:
                rejected = ", ".join(args.names[position:])
                print(f"Ingredient limit reached ({e.limit}); not added: {rejected}")
                return 1
            except ValueError as e:
                print(f"Skipped: {e}")
        ingredients = self.store.get(args.user_id)
        print(f"Ingredients ({len(ingredients)}/{self.store.max_ingredients}): {', '.join(ingredients)}")
        return 0

    def cmd_remove(self, args: argparse.Namespace) -> int:
        try:
            record = self.store.remove(args.user_id, args.name)
        except UserNotFound:
            print(f"No ingredients stored for user {args.user_id}")
            return 1
        print(f"Ingredients ({len(record.ingredients)}/{self.store.max_ingredients}): {', '.join(record.ingredients)}")
        return 0

    def cmd_clear(self, args: argparse.Namespace) -> int:
        try:
            self.store.clear(args.user_id)
        except UserNotFound:
            print(f"No ingredients stored for user {args.user_id}")
            return 1
        print("Ingredients cleared")
        return 0

    def cmd_list(self, args: argparse.Namespace) -> int:
        ingredients = self.store.get(args.user_id)
        if not ingredients:
            print("No ingredients yet")
            return 0
        print(f"Ingredients ({len(ingredients)}/{self.store.max_ingredients}):")
        for name in ingredients:
            print(f"- {name}")
        return 0

    def cmd_find(self, args: argparse.Namespace) -> int:
        ingredients = self.store.get(args.user_id)
        if not ingredients:
            print("No ingredients yet; add some first")
            return 0

        engine = self.engine()
        logger.info(f"Finding cocktails for user {args.user_id} in {engine.mode} mode: {ingredients}")
        matches = engine.find_matches(ingredients)
        self.store.record_search(args.user_id)
        self.sessions.get(args.user_id).last_matches = matches
        if not matches:
            print("No cocktails found for your ingredients")
            return 0

        print(f"Found {len(matches)} cocktails")
        for index, match in enumerate(matches[: self.settings.max_results_to_show], start=1):
            print(format_match(index, match))
        return 0

    def cmd_search(self, args: argparse.Namespace) -> int:
        result = self.name_search().search(args.query)
        if args.user_id is not None:
            self.sessions.get(args.user_id).last_name_results = list(result.recipes)
        if result.kind is NameMatch.NONE:
            print(f"No cocktail named {result.query!r}")
            return 0
        if result.kind is NameMatch.SINGLE:
            print_recipe(result.single)
            return 0

        print(f"Found {len(result)} cocktails")
        for index, recipe in enumerate(result.top(self.settings.max_results_to_show), start=1):
            suffix = f" - {recipe.category}" if recipe.category else ""
            print(f"{index}. {recipe.name}{suffix}")
        return 0

    def cmd_show(self, args: argparse.Namespace) -> int:
        session = self.sessions.get(args.user_id)
        index = args.position - 1
        if args.name:
            recipe = session.name_result_at(index)
        else:
            match = session.match_at(index)
            recipe = match.recipe if match else None
        if recipe is None:
            print(f"No result #{args.position} for user {args.user_id}; run find or search first")
            return 1
        print_recipe(recipe)
        return 0

    def cmd_stats(self, args: argparse.Namespace) -> int:
        stats = self.catalog.stats()
        print(f"Recipes: {stats.total}")
        print(f"Alcoholic: {stats.alcoholic}")
        print(f"Non-alcoholic: {stats.non_alcoholic}")
        print(f"Average ingredients: {stats.avg_ingredients}")
        return 0


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or Settings.from_env()

    overrides = {}
    if args.recipes:
        overrides["recipes_path"] = args.recipes
    if args.users:
        overrides["users_path"] = args.users
    if args.mode:
        overrides["match_mode"] = args.mode
    if args.max_results:
        overrides["max_results_to_show"] = args.max_results
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    app = App(settings)
    try:
        return app.run(args)
    finally:
        app.close()


if __name__ == "__main__":
    sys.exit(main())
