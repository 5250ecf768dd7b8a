import dataclasses
import json

import pytest

from cocktail_matcher.cli import App, build_parser, main
from cocktail_matcher.config import Settings


@pytest.fixture
def settings(tmp_path, recipes_file):
    return Settings(
        recipes_path=str(recipes_file),
        users_path=str(tmp_path / "users.json"),
        max_ingredients_per_user=3,
        max_results_to_show=2,
    )


def test_add_and_list(settings, capsys):
    assert main(["add", "42", "Rum", "Lime"], settings=settings) == 0
    assert main(["list", "42"], settings=settings) == 0
    out = capsys.readouterr().out
    assert "- Rum" in out
    assert "- Lime" in out


def test_add_over_capacity_fails(settings, capsys):
    assert main(["add", "42", "Gin", "Tonic", "Lime", "Mint", "Sugar"], settings=settings) == 1
    assert "not added: Mint, Sugar" in capsys.readouterr().out
    users = json.loads(open(settings.users_path, encoding="utf-8").read())
    assert users[0]["ingredients"] == ["Gin", "Tonic", "Lime"]


def test_find_prints_ranked_matches_and_counts_search(settings, capsys):
    main(["add", "42", "Rum", "Lime"], settings=settings)
    capsys.readouterr()
    assert main(["find", "42"], settings=settings) == 0
    out = capsys.readouterr().out
    assert "Found 1 cocktails" in out
    assert "1. Mojito - 2/5 (40%)" in out
    assert "missing: Mint, Sugar, Soda water" in out
    users = json.loads(open(settings.users_path, encoding="utf-8").read())
    assert users[0]["searchCount"] == 1


def test_find_truncates_to_max_results(settings, capsys):
    main(["add", "42", "Lime"], settings=settings)
    capsys.readouterr()
    main(["find", "42"], settings=settings)
    out = capsys.readouterr().out
    assert "Found 3 cocktails" in out
    assert "3. " not in out


def test_find_without_ingredients(settings, capsys):
    assert main(["find", "42"], settings=settings) == 0
    assert "add some first" in capsys.readouterr().out


def test_remove_and_clear_unknown_user(settings, capsys):
    assert main(["remove", "7", "Gin"], settings=settings) == 1
    assert main(["clear", "7"], settings=settings) == 1


def test_search_single_shows_recipe(settings, capsys):
    assert main(["search", "tonic"], settings=settings) == 0
    out = capsys.readouterr().out
    assert "Gin and Tonic" in out
    assert "- 50 ml London dry gin" in out


def test_search_multiple_lists_names(settings, capsys):
    main(["search", "mojito"], settings=settings)
    out = capsys.readouterr().out
    assert "Found 2 cocktails" in out
    assert "2. Virgin Mojito - Mocktails" in out


def test_stats(settings, capsys):
    main(["stats"], settings=settings)
    assert "Recipes: 3" in capsys.readouterr().out


def test_missing_catalog_degrades_to_no_results(settings, tmp_path, capsys):
    main(["--recipes", str(tmp_path / "missing.json"), "add", "42", "Gin"], settings=settings)
    capsys.readouterr()
    assert main(["--recipes", str(tmp_path / "missing.json"), "find", "42"], settings=settings) == 0
    assert "No cocktails found" in capsys.readouterr().out


def _run(app, argv):
    return app.run(build_parser().parse_args(argv))


def test_app_session_cache_follows_settings(settings):
    app = App(dataclasses.replace(settings, session_cache_size=2, session_ttl=60))
    assert app.sessions.max_size == 2
    assert app.sessions.ttl_seconds == 60


def test_show_opens_recipe_from_last_find(settings, capsys):
    app = App(settings)
    _run(app, ["add", "42", "Rum", "Lime"])
    _run(app, ["find", "42"])
    capsys.readouterr()

    assert _run(app, ["show", "42", "1"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Mojito\n")
    assert "- 50 ml White rum" in out
    assert "Top with soda" in out

    assert _run(app, ["show", "42", "2"]) == 1
    assert "No result #2" in capsys.readouterr().out


def test_show_opens_recipe_from_last_name_search(settings, capsys):
    app = App(settings)
    _run(app, ["search", "mojito", "--user-id", "42"])
    capsys.readouterr()

    assert _run(app, ["show", "42", "2", "--name"]) == 0
    assert capsys.readouterr().out.startswith("Virgin Mojito\n")
    assert _run(app, ["show", "42", "1"]) == 1


def test_show_without_earlier_results_fails(settings, capsys):
    assert main(["show", "42", "1"], settings=settings) == 1
    assert "run find or search first" in capsys.readouterr().out


def test_sessions_are_evicted_beyond_cache_size(settings, capsys):
    app = App(dataclasses.replace(settings, session_cache_size=1))
    _run(app, ["add", "42", "Rum", "Lime"])
    _run(app, ["find", "42"])
    _run(app, ["search", "mojito", "--user-id", "7"])
    capsys.readouterr()

    assert 42 not in app.sessions
    assert _run(app, ["show", "7", "1", "--name"]) == 0
    assert _run(app, ["show", "42", "1"]) == 1
