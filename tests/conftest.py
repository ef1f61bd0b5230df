"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from recipe_finder.adapters.local_file_storage import LocalFileStorage
from recipe_finder.adapters.spoonacular_client import RecipeSearchClient
from recipe_finder.config import Settings
from recipe_finder.containers import AppContainer
from recipe_finder.domain.recipes import RecipeSummary
from recipe_finder.services.cache import InMemorySearchCache
from recipe_finder.services.favorites import (
    FavoritesService,
    decode_favorite,
    encode_favorite,
)
from recipe_finder.services.json_collection import JsonCollection, KeyValueStore
from recipe_finder.services.search import RecipeSearchService
from recipe_finder.services.user_recipes import (
    UserRecipeService,
    decode_user_recipe,
    encode_user_recipe,
)


def search_row(recipe_id: int, title: str | None = "Fried rice") -> dict[str, object]:
    """Build a findByIngredients row."""
    return {
        "id": recipe_id,
        "title": title,
        "image": f"https://img.example/{recipe_id}.jpg",
        "usedIngredientCount": 2,
        "missedIngredientCount": 1,
    }


def make_summary(recipe_id: int | str, title: str = "Pancakes") -> RecipeSummary:
    return RecipeSummary(
        id=recipe_id,
        title=title,
        image=f"https://img.example/{recipe_id}.jpg",
        used_ingredient_count=3,
        missed_ingredient_count=0,
        cooking_time_minutes=20,
        is_vegetarian=True,
    )


@dataclass
class CountingRecipeSearchClient(RecipeSearchClient):
    """Fake remote catalog that records every call."""

    rows: list[dict[str, object]] = field(default_factory=list)
    details: dict[str, object] = field(default_factory=dict)
    failing_detail_ids: set[str] = field(default_factory=set)
    search_error: Exception | None = None
    search_calls: list[str] = field(default_factory=list)
    detail_calls: list[str] = field(default_factory=list)

    async def search_by_ingredients(
        self, ingredients: str, limit: int = 5
    ) -> list[dict[str, object]]:
        self.search_calls.append(ingredients)
        if self.search_error is not None:
            raise self.search_error
        return list(self.rows[:limit])

    async def get_recipe_information(self, recipe_id: int | str) -> object:
        self.detail_calls.append(str(recipe_id))
        if str(recipe_id) in self.failing_detail_ids:
            raise RuntimeError(f"detail lookup failed for {recipe_id}")
        return self.details.get(
            str(recipe_id),
            {"id": recipe_id, "readyInMinutes": 25, "vegetarian": False},
        )


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store that yields control on every call."""

    values: dict[str, str] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False
    writes: int = 0

    async def get(self, key: str) -> str | None:
        await asyncio.sleep(0)
        if self.fail_reads:
            raise OSError("store unavailable")
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        if self.fail_writes:
            raise OSError("store unavailable")
        self.writes += 1
        self.values[key] = value

    async def remove(self, key: str) -> None:
        await asyncio.sleep(0)
        self.values.pop(key, None)


def build_favorites_service(
    store: InMemoryKeyValueStore, key: str = "likedRecipes"
) -> FavoritesService:
    return FavoritesService(
        JsonCollection(
            store=store, key=key, decode=decode_favorite, encode=encode_favorite
        )
    )


def build_user_recipe_service(
    store: InMemoryKeyValueStore, media_dir: Path, key: str = "recipes"
) -> UserRecipeService:
    return UserRecipeService(
        collection=JsonCollection(
            store=store,
            key=key,
            decode=decode_user_recipe,
            encode=encode_user_recipe,
        ),
        file_storage=LocalFileStorage(media_dir),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        spoonacular_api_key="test-key",
        data_dir=str(tmp_path / "store"),
        media_dir=str(tmp_path / "media"),
    )


@pytest.fixture
def key_value_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def search_client() -> CountingRecipeSearchClient:
    return CountingRecipeSearchClient(rows=[search_row(1), search_row(2, "Risotto")])


@pytest.fixture
def picked_image(tmp_path: Path) -> Path:
    """A photo sitting in a transient picker location."""
    cache_dir = tmp_path / "picker-cache"
    cache_dir.mkdir()
    image = cache_dir / "IMG_0001.jpg"
    image.write_bytes(b"fake-jpeg")
    return image


@pytest.fixture
def container(
    settings: Settings,
    key_value_store: InMemoryKeyValueStore,
    search_client: CountingRecipeSearchClient,
) -> AppContainer:
    search_service = RecipeSearchService(
        client=search_client,
        cache=InMemorySearchCache(),
        retry_delay_seconds=0,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        search_service=search_service,
        favorites_service=build_favorites_service(key_value_store),
        user_recipe_service=build_user_recipe_service(
            key_value_store, Path(settings.media_dir)
        ),
        close_resources=close_resources,
    )
