import json

import pytest

from cocktail_matcher.recipes import Recipe, RecipeCatalog, RecipeIngredient


def make_recipe(recipe_id, name, ingredient_names, **kwargs) -> Recipe:
    return Recipe(
        id=recipe_id,
        name=name,
        ingredients=tuple(RecipeIngredient(name=n, amount="") for n in ingredient_names),
        **kwargs,
    )


RECIPE_RECORDS = [
    {
        "id": 1,
        "name": "Mojito",
        "nameEn": "Mojito",
        "image": "images/mojito.jpg",
        "category": "Long drinks",
        "tags": ["classic", "summer"],
        "glass": "Highball",
        "ingredients": [
            {"name": "White rum", "amount": "50 ml"},
            {"name": "Lime", "amount": "1/2"},
            {"name": "Mint", "amount": "10 leaves"},
            {"name": "Sugar", "amount": "2 tsp"},
            {"name": "Soda water", "amount": "to top"},
        ],
        "instructions": ["Muddle lime, mint and sugar", "Add rum and ice", "Top with soda"],
        "rating": 4.8,
        "alcoholic": True,
        "source": "inshaker",
        "parsedAt": "2024-05-01T10:00:00.000Z",
    },
    {
        "id": 2,
        "name": "Gin and Tonic",
        "image": "images/gt.jpg",
        "category": "Long drinks",
        "tags": [],
        "glass": "Highball",
        "ingredients": [
            {"name": "London dry gin", "amount": "50 ml"},
            {"name": "Tonic water", "amount": "150 ml"},
            {"name": "Lime", "amount": "1 wedge"},
        ],
        "instructions": ["Build over ice"],
        "alcoholic": True,
        "source": "inshaker",
        "parsedAt": "2024-05-01T10:00:00.000Z",
    },
    {
        "id": 3,
        "name": "Virgin Mojito",
        "image": "",
        "category": "Mocktails",
        "tags": [],
        "glass": "Highball",
        "ingredients": [
            {"name": "Lime", "amount": "1/2"},
            {"name": "Mint", "amount": "10 leaves"},
            {"name": "Soda water", "amount": "to top"},
        ],
        "instructions": ["Muddle and top with soda"],
        "alcoholic": False,
        "source": "inshaker",
        "parsedAt": "2024-05-01T10:00:00.000Z",
    },
]


@pytest.fixture
def recipes_file(tmp_path):
    path = tmp_path / "recipes.json"
    path.write_text(json.dumps(RECIPE_RECORDS), encoding="utf-8")
    return path


@pytest.fixture
def catalog(recipes_file):
    return RecipeCatalog.load(recipes_file)
