"""Recipe data model."""

import dataclasses
from typing import Any, Dict, List, Optional, Tuple, Union

RecipeId = Union[int, str]


@dataclasses.dataclass(frozen=True)
class RecipeIngredient:
    """One line of a recipe: an ingredient name and its free-text amount."""

    name: str
    amount: str = ""


@dataclasses.dataclass(frozen=True)
class Recipe:
    """Dataclass for holding a cocktail recipe.

    Instances are immutable; a catalog hands out the same objects for its
    whole lifetime.
    """

    id: RecipeId
    name: str
    ingredients: Tuple[RecipeIngredient, ...] = ()
    instructions: Tuple[str, ...] = ()
    image: str = ""
    category: str = ""
    tags: Tuple[str, ...] = ()
    glass: str = ""
    rating: Optional[float] = None
    alcoholic: bool = True
    source: str = ""
    parsed_at: str = ""
    name_en: Optional[str] = None

    @property
    def ingredient_names(self) -> List[str]:
        """Ingredient names in recipe order."""
        return [ingredient.name for ingredient in self.ingredients]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        """Build a Recipe from its serialized form.

        Args:
            data: Mapping using the serialized camelCase keys
                (``nameEn``, ``parsedAt``).

        Returns:
            A Recipe.

        Raises:
            ValueError: If ``id`` or ``name`` is missing, or ``ingredients``
                is not a list of ``{name, amount}`` objects.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Recipe record must be an object, got {type(data).__name__}")
        if data.get("id") is None or not data.get("name"):
            raise ValueError("Recipe record requires 'id' and 'name'")

        raw_ingredients = data.get("ingredients", [])
        if not isinstance(raw_ingredients, list):
            raise ValueError(f"Recipe {data['id']!r}: 'ingredients' must be a list")

        ingredients = []
        for item in raw_ingredients:
            if not isinstance(item, dict) or not item.get("name"):
                raise ValueError(f"Recipe {data['id']!r}: malformed ingredient {item!r}")
            ingredients.append(
                RecipeIngredient(name=str(item["name"]), amount=str(item.get("amount") or ""))
            )

        instructions = data.get("instructions") or []
        if isinstance(instructions, str):
            instructions = [instructions]

        return cls(
            id=data["id"],
            name=str(data["name"]),
            name_en=data.get("nameEn"),
            image=data.get("image") or "",
            category=data.get("category") or "",
            tags=tuple(data.get("tags") or ()),
            glass=data.get("glass") or "",
            ingredients=tuple(ingredients),
            instructions=tuple(str(step) for step in instructions),
            rating=data.get("rating"),
            alcoholic=bool(data.get("alcoholic", True)),
            source=data.get("source") or "",
            parsed_at=data.get("parsedAt") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the camelCase form read by ``from_dict``."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "image": self.image,
            "category": self.category,
            "tags": list(self.tags),
            "glass": self.glass,
            "ingredients": [
                {"name": ingredient.name, "amount": ingredient.amount}
                for ingredient in self.ingredients
            ],
            "instructions": list(self.instructions),
            "alcoholic": self.alcoholic,
            "source": self.source,
            "parsedAt": self.parsed_at,
        }
        if self.name_en is not None:
            data["nameEn"] = self.name_en
        if self.rating is not None:
            data["rating"] = self.rating
        return data


@dataclasses.dataclass(frozen=True)
class RecipeSummary:
    """Lightweight search hit returned by a remote ingredient search."""

    id: RecipeId
    name: str
    thumbnail: str = ""
