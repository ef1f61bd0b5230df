"""User-authored recipes stored locally with relocated photos."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote, urlparse

from recipe_finder.domain.errors import StorageError, ValidationError
from recipe_finder.domain.recipes import (
    NewUserRecipe,
    UserRecipe,
    same_recipe_id,
    split_ingredients,
)
from recipe_finder.services.json_collection import DecodeResult, JsonCollection

_LOAD_FAILED = "Failed to load your recipes. Please try again."
_SAVE_FAILED = "Failed to save the recipe."
_DELETE_FAILED = "Failed to delete the recipe."

_logger = logging.getLogger(__name__)


class FileStorage(Protocol):
    """Durable storage for files picked or captured on the device."""

    def durable_path(self, filename: str) -> Path:
        """Return the durable location for a file name."""

    def exists(self, path: Path) -> bool:
        """Return True when a file already exists at the path."""

    async def move_file(self, source: Path, destination: Path) -> None:
        """Move a file into durable storage."""


@dataclass
class TimestampIdFactory:
    """Millisecond timestamp ids, strictly increasing within a process."""

    clock: Callable[[], float] = time.time
    _last: int = field(default=0, init=False, repr=False)

    def __call__(self) -> str:
        value = int(self.clock() * 1000)
        if value <= self._last:
            value = self._last + 1
        self._last = value
        return str(value)


@dataclass
class UserRecipeService:
    """Create, list and delete recipes authored by the user."""

    collection: JsonCollection[UserRecipe]
    file_storage: FileStorage
    id_factory: Callable[[], str] = field(default_factory=TimestampIdFactory)
    _files_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False
    )

    async def load(self) -> DecodeResult[UserRecipe]:
        """Load recipes along with a count of discarded entries."""
        try:
            return await self.collection.load()
        except StorageError as exc:
            _logger.exception("Error loading user recipes")
            raise StorageError(str(exc), user_message=_LOAD_FAILED) from exc

    async def list_recipes(self) -> list[UserRecipe]:
        """Return recipes in creation order."""
        return (await self.load()).records

    async def get_recipe(self, recipe_id: str) -> UserRecipe | None:
        """Return a single recipe by id, if present."""
        for recipe in await self.list_recipes():
            if same_recipe_id(recipe.id, recipe_id):
                return recipe
        return None

    async def create_recipe(self, new: NewUserRecipe) -> UserRecipe:
        """Validate input, relocate the photo and persist a new recipe."""
        title = _text(new.title)
        ingredients = split_ingredients(new.ingredients_text or "")
        instructions = _text(new.instructions)
        cooking_time = _text(new.cooking_time)
        servings = _text(new.servings)
        image_path = _text(new.image_path)
        missing = [
            name
            for name, value in (
                ("title", title),
                ("ingredients", ingredients),
                ("instructions", instructions),
                ("cooking_time", cooking_time),
                ("servings", servings),
                ("image", image_path),
            )
            if not value
        ]
        if missing:
            raise ValidationError(missing)

        recipe_id = self.id_factory()
        source = _local_path(image_path)
        try:
            destination = await self._relocate_image(source, recipe_id)
        except StorageError as exc:
            _logger.exception("Failed to relocate recipe image: %s", source)
            raise StorageError(str(exc), user_message=_SAVE_FAILED) from exc

        recipe = UserRecipe(
            id=recipe_id,
            title=title,
            ingredients=ingredients,
            instructions=instructions,
            cooking_time=cooking_time,
            servings=servings,
            image=str(destination),
        )
        try:
            await self.collection.mutate(lambda records: [*records, recipe])
        except StorageError as exc:
            _logger.exception("Failed to save the recipe")
            await self._restore_image(destination, source)
            raise StorageError(str(exc), user_message=_SAVE_FAILED) from exc
        _logger.info("Created user recipe: id=%s title=%s", recipe.id, recipe.title)
        return recipe

    async def delete_recipe(self, recipe_id: str) -> bool:
        """Delete a recipe; returns False when no recipe had the id."""
        removed = False

        def change(records: list[UserRecipe]) -> list[UserRecipe] | None:
            nonlocal removed
            kept = [item for item in records if not same_recipe_id(item.id, recipe_id)]
            if len(kept) == len(records):
                return None
            removed = True
            return kept

        try:
            await self.collection.mutate(change)
        except StorageError as exc:
            _logger.exception("Error deleting user recipe: id=%s", recipe_id)
            raise StorageError(str(exc), user_message=_DELETE_FAILED) from exc
        return removed

    async def _relocate_image(self, source: Path, recipe_id: str) -> Path:
        """Move the picked file, keeping its name unless that name is taken.

        Choosing the name and moving the file happen under one lock so two
        recipes never claim the same destination.
        """
        async with self._files_lock:
            destination = self.file_storage.durable_path(source.name)
            if self.file_storage.exists(destination):
                destination = self.file_storage.durable_path(
                    f"{source.stem}-{recipe_id}{source.suffix}"
                )
            await self.file_storage.move_file(source, destination)
        return destination

    async def _restore_image(self, destination: Path, source: Path) -> None:
        """Put a relocated image back where it was picked from."""
        try:
            await self.file_storage.move_file(destination, source)
        except StorageError:
            _logger.exception("Failed to restore recipe image: %s", destination)


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _local_path(image: str) -> Path:
    """Accept plain paths as well as file:// URIs from device pickers."""
    parsed = urlparse(image)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(image)


def decode_user_recipe(row: dict[str, object]) -> UserRecipe:
    """Decode a persisted user recipe; every field is required."""
    recipe_id = row["id"]
    if recipe_id is None or str(recipe_id) == "":
        raise ValueError("user recipe has no id")
    ingredients = row["ingredients"]
    if not isinstance(ingredients, list):
        raise TypeError("ingredients must be a list")
    return UserRecipe(
        id=str(recipe_id),
        title=str(row["title"]),
        ingredients=[str(item) for item in ingredients],
        instructions=str(row["instructions"]),
        cooking_time=str(row["cookingTime"]),
        servings=str(row["servings"]),
        image=str(row["image"]),
    )


def encode_user_recipe(recipe: UserRecipe) -> dict[str, object]:
    """Encode a user recipe for persistence."""
    return {
        "id": recipe.id,
        "title": recipe.title,
        "ingredients": list(recipe.ingredients),
        "instructions": recipe.instructions,
        "cookingTime": recipe.cooking_time,
        "servings": recipe.servings,
        "image": recipe.image,
    }
