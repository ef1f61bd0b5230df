"""Search result cache."""

from dataclasses import dataclass
from typing import Protocol

from recipe_finder.domain.recipes import RecipeSummary


class SearchCache(Protocol):
    """Cache interface mapping a raw query string to search results."""

    def lookup(self, query: str) -> list[RecipeSummary] | None:
        """Return cached results for the query, if present."""

    def store(self, query: str, results: list[RecipeSummary]) -> None:
        """Store results for the query, replacing any previous entry."""


@dataclass
class InMemorySearchCache(SearchCache):
    """Session-lifetime cache with no expiry or eviction.

    Keys are used exactly as submitted, so ``"Rice"`` and ``"rice "`` are
    separate entries.
    """

    _entries: dict[str, list[RecipeSummary]]

    def __init__(self) -> None:
        self._entries = {}

    def lookup(self, query: str) -> list[RecipeSummary] | None:
        """Return a copy of the cached results, if any."""
        entry = self._entries.get(query)
        if entry is None:
            return None
        return list(entry)

    def store(self, query: str, results: list[RecipeSummary]) -> None:
        """Store a copy of the results; the last write wins."""
        self._entries[query] = list(results)

    def __len__(self) -> int:
        return len(self._entries)
