"""Spoonacular recipe API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class RecipeSearchClient(Protocol):
    """Interface for remote recipe catalog interactions."""

    async def search_by_ingredients(
        self, ingredients: str, limit: int = 5
    ) -> list[dict[str, object]]:
        """Search recipes by a comma separated ingredient list."""

    async def get_recipe_information(self, recipe_id: int | str) -> dict[str, object]:
        """Fetch full recipe information by id."""


@dataclass
class HttpxSpoonacularClient(RecipeSearchClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxSpoonacularClient":
        """Create a Spoonacular client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_by_ingredients(
        self, ingredients: str, limit: int = 5
    ) -> list[dict[str, object]]:
        """Search recipes that use the given ingredients."""
        url = f"{self.base_url}/recipes/findByIngredients"
        response = await self.http_client.get(
            url,
            params={
                "ingredients": ingredients,
                "number": limit,
                "apiKey": self.api_key,
            },
            timeout=15,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, list):
            return []
        return payload

    async def get_recipe_information(self, recipe_id: int | str) -> dict[str, object]:
        """Fetch recipe information by id."""
        url = f"{self.base_url}/recipes/{recipe_id}/information"
        response = await self.http_client.get(
            url,
            params={"apiKey": self.api_key},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
