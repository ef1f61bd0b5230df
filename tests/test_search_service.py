"""Tests for recipe search orchestration."""

import asyncio

import httpx
import pytest

from recipe_finder.domain.errors import NetworkError
from recipe_finder.services.cache import InMemorySearchCache
from recipe_finder.services.search import RecipeSearchService
from tests.conftest import CountingRecipeSearchClient, search_row


def _service(client: CountingRecipeSearchClient) -> RecipeSearchService:
    return RecipeSearchService(client, InMemorySearchCache(), retry_delay_seconds=0)


def test_search_uses_cache(search_client: CountingRecipeSearchClient) -> None:
    service = _service(search_client)

    results = asyncio.run(service.search("chicken,rice"))
    assert [item.id for item in results] == [1, 2]
    assert len(search_client.search_calls) == 1

    cached = asyncio.run(service.search("chicken,rice"))
    assert cached == results
    assert len(search_client.search_calls) == 1
    assert len(search_client.detail_calls) == 2


def test_search_cache_keys_are_not_normalized(
    search_client: CountingRecipeSearchClient,
) -> None:
    service = _service(search_client)

    asyncio.run(service.search("Rice"))
    asyncio.run(service.search("rice"))

    assert search_client.search_calls == ["Rice", "rice"]


def test_empty_query_does_nothing(search_client: CountingRecipeSearchClient) -> None:
    cache = InMemorySearchCache()
    service = RecipeSearchService(search_client, cache)

    assert asyncio.run(service.search("")) == []
    assert asyncio.run(service.search("   ")) == []
    assert search_client.search_calls == []
    assert len(cache) == 0


def test_empty_results_are_not_cached() -> None:
    client = CountingRecipeSearchClient(rows=[])
    cache = InMemorySearchCache()
    service = RecipeSearchService(client, cache)

    assert asyncio.run(service.search("chicken,rice")) == []
    assert cache.lookup("chicken,rice") is None

    client.rows = [search_row(10), search_row(11, "Paella")]
    results = asyncio.run(service.search("chicken,rice"))

    assert len(client.search_calls) == 2
    assert [item.id for item in results] == [10, 11]


def test_search_enriches_results(search_client: CountingRecipeSearchClient) -> None:
    search_client.details["1"] = {"id": 1, "readyInMinutes": 45, "vegetarian": True}
    service = _service(search_client)

    results = asyncio.run(service.search("egg"))

    assert results[0].cooking_time_minutes == 45
    assert results[0].is_vegetarian is True
    assert results[1].cooking_time_minutes == 25
    assert results[1].is_vegetarian is False


def test_failed_enrichment_keeps_summary(
    search_client: CountingRecipeSearchClient,
) -> None:
    search_client.failing_detail_ids.add("2")
    service = _service(search_client)

    results = asyncio.run(service.search("egg"))

    assert [item.id for item in results] == [1, 2]
    assert results[1].cooking_time_minutes is None
    assert results[1].is_vegetarian is None


def test_search_drops_untitled_and_idless_rows() -> None:
    client = CountingRecipeSearchClient(
        rows=[
            search_row(1),
            search_row(2, title=None),
            {"title": "No id"},
            search_row(3, "Omelette"),
        ]
    )
    service = _service(client)

    results = asyncio.run(service.search("egg"))

    assert [item.title for item in results] == ["Fried rice", "Omelette"]
    assert client.detail_calls == ["1", "3"]


def test_search_failure_returns_empty_and_retries() -> None:
    request = httpx.Request("GET", "https://api.test/recipes/findByIngredients")
    error = httpx.HTTPStatusError(
        "boom", request=request, response=httpx.Response(500, request=request)
    )
    client = CountingRecipeSearchClient(rows=[search_row(1)], search_error=error)
    cache = InMemorySearchCache()
    service = RecipeSearchService(client, cache, retry_delay_seconds=0)

    assert asyncio.run(service.search("egg")) == []
    assert len(client.search_calls) == 2
    assert cache.lookup("egg") is None


def test_search_respects_limit() -> None:
    client = CountingRecipeSearchClient(rows=[search_row(i) for i in range(1, 9)])
    service = RecipeSearchService(client, InMemorySearchCache(), limit=5)

    results = asyncio.run(service.search("flour"))

    assert len(results) == 5


def test_get_details_parses_payload(
    search_client: CountingRecipeSearchClient,
) -> None:
    search_client.details["7"] = {
        "id": 7,
        "title": "Shakshuka",
        "image": "https://img.example/7.jpg",
        "readyInMinutes": 30,
        "servings": 2,
        "vegetarian": True,
        "extendedIngredients": [
            {"id": 1, "original": "4 eggs"},
            {"id": 2, "original": "1 can tomatoes"},
        ],
        "instructions": "<p>Cook.</p>",
    }
    service = _service(search_client)

    details = asyncio.run(service.get_details(7))

    assert details.title == "Shakshuka"
    assert details.ready_in_minutes == 30
    assert details.servings == 2
    assert details.ingredients == ["4 eggs", "1 can tomatoes"]
    assert details.instructions == "<p>Cook.</p>"


def test_get_details_raises_network_error(
    search_client: CountingRecipeSearchClient,
) -> None:
    search_client.failing_detail_ids.add("9")
    service = _service(search_client)

    with pytest.raises(NetworkError) as excinfo:
        asyncio.run(service.get_details(9))

    assert excinfo.value.user_message == "Failed to load recipe details."
    assert search_client.detail_calls == ["9", "9"]


def test_non_object_detail_payload_keeps_summary(
    search_client: CountingRecipeSearchClient,
) -> None:
    search_client.details["1"] = None
    search_client.details["2"] = ["not", "an", "object"]
    service = _service(search_client)

    results = asyncio.run(service.search("egg"))

    assert [item.id for item in results] == [1, 2]
    assert all(item.cooking_time_minutes is None for item in results)
    assert all(item.is_vegetarian is None for item in results)


def test_get_details_rejects_non_object_payload(
    search_client: CountingRecipeSearchClient,
) -> None:
    search_client.details["8"] = None
    service = _service(search_client)

    with pytest.raises(NetworkError):
        asyncio.run(service.get_details(8))
