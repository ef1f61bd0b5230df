"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from recipe_finder.adapters.json_file_store import JsonFileKeyValueStore
from recipe_finder.adapters.local_file_storage import LocalFileStorage
from recipe_finder.adapters.spoonacular_client import HttpxSpoonacularClient
from recipe_finder.adapters.supabase_key_value_store import SupabaseKeyValueStore
from recipe_finder.config import Settings
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


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    search_service: RecipeSearchService
    favorites_service: FavoritesService
    user_recipe_service: UserRecipeService
    close_resources: Callable[[], Awaitable[None]]


def build_key_value_store(settings: Settings) -> KeyValueStore:
    """Pick Supabase when configured, otherwise the local JSON file store."""
    if settings.uses_supabase:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, table=settings.supabase_storage_table)
    return JsonFileKeyValueStore(Path(settings.data_dir))


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_key_value_store(resolved_settings)
    spoonacular_client = HttpxSpoonacularClient.create(
        api_key=resolved_settings.spoonacular_api_key,
        base_url=resolved_settings.spoonacular_base_url,
    )
    search_service = RecipeSearchService(
        client=spoonacular_client,
        cache=InMemorySearchCache(),
        limit=resolved_settings.search_result_limit,
    )
    favorites_service = FavoritesService(
        JsonCollection(
            store=store,
            key=resolved_settings.favorites_key,
            decode=decode_favorite,
            encode=encode_favorite,
        )
    )
    user_recipe_service = UserRecipeService(
        collection=JsonCollection(
            store=store,
            key=resolved_settings.user_recipes_key,
            decode=decode_user_recipe,
            encode=encode_user_recipe,
        ),
        file_storage=LocalFileStorage(Path(resolved_settings.media_dir)),
    )

    async def close_resources() -> None:
        await spoonacular_client.close()

    return AppContainer(
        settings=resolved_settings,
        search_service=search_service,
        favorites_service=favorites_service,
        user_recipe_service=user_recipe_service,
        close_resources=close_resources,
    )
