"""Recipe search by name."""

from .name_index import NameMatch, NameSearchIndex, NameSearchResult, RemoteNameSearch

__all__ = ["NameMatch", "NameSearchIndex", "NameSearchResult", "RemoteNameSearch"]
