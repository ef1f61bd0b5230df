"""Favorited recipe summaries."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from recipe_finder.domain.errors import StorageError
from recipe_finder.domain.recipes import (
    RecipeId,
    RecipeSummary,
    optional_int,
    same_recipe_id,
)
from recipe_finder.services.json_collection import DecodeResult, JsonCollection

_LOAD_FAILED = "Failed to load your favorite recipes. Please try again."
_UPDATE_FAILED = "Failed to update your favorites."

_logger = logging.getLogger(__name__)


@dataclass
class FavoritesService:
    """Deduplicated, insertion-ordered list of liked recipes."""

    collection: JsonCollection[RecipeSummary]

    async def load(self) -> DecodeResult[RecipeSummary]:
        """Load favorites along with a count of discarded entries."""
        try:
            return await self.collection.load()
        except StorageError as exc:
            _logger.exception("Error loading favorite recipes")
            raise StorageError(str(exc), user_message=_LOAD_FAILED) from exc

    async def list_favorites(self) -> list[RecipeSummary]:
        """Return favorites in the order they were added."""
        return (await self.load()).records

    async def is_favorite(self, recipe_id: RecipeId) -> bool:
        """Return True when the recipe is in favorites."""
        favorites = await self.list_favorites()
        return any(same_recipe_id(item.id, recipe_id) for item in favorites)

    async def add(self, recipe: RecipeSummary) -> bool:
        """Add a recipe; returns False when it was already a favorite."""
        added = False

        def change(records: list[RecipeSummary]) -> list[RecipeSummary] | None:
            nonlocal added
            if any(same_recipe_id(item.id, recipe.id) for item in records):
                return None
            added = True
            return [*records, recipe]

        await self._mutate(change)
        return added

    async def remove(self, recipe_id: RecipeId) -> bool:
        """Remove a recipe; returns False when it was not a favorite."""
        removed = False

        def change(records: list[RecipeSummary]) -> list[RecipeSummary]:
            nonlocal removed
            kept = [item for item in records if not same_recipe_id(item.id, recipe_id)]
            removed = len(kept) != len(records)
            return kept

        await self._mutate(change)
        return removed

    async def toggle(self, recipe: RecipeSummary) -> bool:
        """Flip the favorite state of a recipe and return the new state."""
        is_liked = False

        def change(records: list[RecipeSummary]) -> list[RecipeSummary]:
            nonlocal is_liked
            kept = [item for item in records if not same_recipe_id(item.id, recipe.id)]
            if len(kept) != len(records):
                return kept
            is_liked = True
            return [*records, recipe]

        await self._mutate(change)
        return is_liked

    async def _mutate(
        self, change: Callable[[list[RecipeSummary]], list[RecipeSummary] | None]
    ) -> None:
        try:
            await self.collection.mutate(change)
        except StorageError as exc:
            _logger.exception("Error updating favorite recipes")
            raise StorageError(str(exc), user_message=_UPDATE_FAILED) from exc


def decode_favorite(row: dict[str, object]) -> RecipeSummary:
    """Decode a persisted favorite.

    Only the id is required; malformed optional fields fall back to defaults.
    """
    recipe_id = row["id"]
    if recipe_id is None or recipe_id == "" or isinstance(recipe_id, bool):
        raise ValueError("favorite entry has no id")
    if not isinstance(recipe_id, int | str):
        raise TypeError(f"unsupported id type: {type(recipe_id).__name__}")
    vegetarian = row.get("vegetarian")
    image = row.get("image")
    return RecipeSummary(
        id=recipe_id,
        title=str(row.get("title") or ""),
        image=image if isinstance(image, str) else None,
        used_ingredient_count=optional_int(row.get("usedIngredientCount")) or 0,
        missed_ingredient_count=optional_int(row.get("missedIngredientCount")) or 0,
        cooking_time_minutes=optional_int(row.get("cookingTimeMinutes")),
        is_vegetarian=bool(vegetarian) if vegetarian is not None else None,
    )


def encode_favorite(recipe: RecipeSummary) -> dict[str, object]:
    """Encode a favorite using the remote catalog's field names."""
    return {
        "id": recipe.id,
        "title": recipe.title,
        "image": recipe.image,
        "usedIngredientCount": recipe.used_ingredient_count,
        "missedIngredientCount": recipe.missed_ingredient_count,
        "cookingTimeMinutes": recipe.cooking_time_minutes,
        "vegetarian": recipe.is_vegetarian,
    }
