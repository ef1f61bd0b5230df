"""Recipe search orchestration over the remote catalog."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from recipe_finder.adapters.spoonacular_client import RecipeSearchClient
from recipe_finder.domain.errors import NetworkError
from recipe_finder.domain.recipes import (
    RecipeDetails,
    RecipeId,
    RecipeSummary,
    optional_int,
)
from recipe_finder.services.cache import InMemorySearchCache, SearchCache

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class RecipeSearchService:
    """Ingredient search with a per-session cache and detail enrichment."""

    client: RecipeSearchClient
    cache: SearchCache = field(default_factory=InMemorySearchCache)
    limit: int = 5
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str) -> list[RecipeSummary]:
        """Return enriched matches for the query; never raises."""
        if not query.strip():
            return []
        cached = self.cache.lookup(query)
        if cached is not None:
            return cached

        try:
            rows = await self._call_with_retry(
                lambda: self.client.search_by_ingredients(query, limit=self.limit),
                action="search",
            )
        except Exception:
            _logger.exception("Recipe search failed: query=%s", query)
            return []

        summaries = [summary for summary in _parse_summaries(rows) if summary.title]
        if not summaries:
            _logger.info("No recipes found: query=%s", query)
            return []

        enriched = await asyncio.gather(
            *(self._enrich(summary) for summary in summaries)
        )
        results = list(enriched)
        self.cache.store(query, results)
        _logger.info("Recipe search: query=%s results=%s", query, len(results))
        return results

    async def get_details(self, recipe_id: RecipeId) -> RecipeDetails:
        """Fetch full details for one recipe."""
        try:
            payload = await self._call_with_retry(
                lambda: self._fetch_information(recipe_id),
                action=f"details:{recipe_id}",
            )
        except Exception as exc:
            _logger.exception("Error fetching recipe details: id=%s", recipe_id)
            raise NetworkError(f"Failed to fetch recipe {recipe_id}") from exc
        return _parse_details(payload, recipe_id)

    async def _enrich(self, summary: RecipeSummary) -> RecipeSummary:
        """Merge cooking time and vegetarian flag into a summary."""
        try:
            payload = await self._fetch_information(summary.id)
        except Exception as exc:
            _logger.warning(
                "Error fetching details for recipe %s: %s", summary.id, exc
            )
            return summary
        return replace(
            summary,
            cooking_time_minutes=optional_int(payload.get("readyInMinutes")),
            is_vegetarian=bool(payload.get("vegetarian", False)),
        )

    async def _fetch_information(self, recipe_id: RecipeId) -> dict[str, object]:
        """Fetch recipe information, rejecting payloads that are not objects."""
        payload = await self.client.get_recipe_information(recipe_id)
        if not isinstance(payload, dict):
            raise TypeError(
                f"Unexpected information payload for recipe {recipe_id}: {payload!r}"
            )
        return payload

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[Any]]", *, action: str
    ) -> Any:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Spoonacular %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _parse_summaries(rows: list[dict[str, object]]) -> list[RecipeSummary]:
    """Build summaries from bulk search rows, skipping rows without an id."""
    summaries: list[RecipeSummary] = []
    for row in rows or []:
        if not isinstance(row, dict) or row.get("id") is None:
            _logger.warning("Skipping malformed search row: %r", row)
            continue
        summaries.append(
            RecipeSummary(
                id=row["id"],
                title=str(row.get("title") or ""),
                image=row.get("image"),
                used_ingredient_count=optional_int(row.get("usedIngredientCount"))
                or 0,
                missed_ingredient_count=optional_int(
                    row.get("missedIngredientCount")
                )
                or 0,
            )
        )
    return summaries


def _parse_details(payload: dict[str, object], recipe_id: RecipeId) -> RecipeDetails:
    """Parse a recipe information payload into a domain model."""
    ingredients = [
        str(item["original"])
        for item in payload.get("extendedIngredients") or []
        if isinstance(item, dict) and item.get("original")
    ]
    return RecipeDetails(
        id=payload.get("id", recipe_id),
        title=str(payload.get("title") or ""),
        image=payload.get("image"),
        ready_in_minutes=optional_int(payload.get("readyInMinutes")),
        servings=optional_int(payload.get("servings")),
        vegetarian=bool(payload.get("vegetarian", False)),
        ingredients=ingredients,
        instructions=payload.get("instructions") or None,
    )

