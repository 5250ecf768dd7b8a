"""Cocktail Matcher - Recommend cocktails from the ingredients you have."""

__version__ = "0.1.0"
__author__ = "Kurt Thorn"
__email__ = "kurt.thorn@gmail.com"

from . import ingredients, matching, recipes, remote, search, storage

__all__ = ["ingredients", "matching", "recipes", "remote", "search", "storage"]
