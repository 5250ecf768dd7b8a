"""Clients for remote recipe sources."""

from .client import (
    DEFAULT_API_URL,
    CocktailDBClient,
    RemoteQueryFailure,
    RemoteRecipeSource,
    drink_to_recipe,
)
from .retry import retry_on_connection_error

__all__ = [
    "DEFAULT_API_URL",
    "CocktailDBClient",
    "RemoteQueryFailure",
    "RemoteRecipeSource",
    "drink_to_recipe",
    "retry_on_connection_error",
]
