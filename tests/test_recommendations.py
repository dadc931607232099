"""Tests for recommendation data assembly and the SerpApi client."""

import httpx
import pytest

from palate_service.exceptions import OnboardingIncompleteError, SearchProviderError
from palate_service.models.onboarding import OnboardingRecord
from palate_service.models.recommendation import UserLocation
from palate_service.services.recommendations import RecommendationService
from palate_service.services.search import SerpApiSearchClient, zoom_for_radius
from conftest import FakeSearchProvider, onboarding_payload

SEATTLE = UserLocation(latitude=47.61, longitude=-122.33, address="Pike Place", city="Seattle")


@pytest.fixture
def recommendations(onboarding, search_provider):
    return RecommendationService(onboarding, search_provider)


@pytest.mark.asyncio
async def test_fetch_recommendations(recommendations, search_provider):
    data = await recommendations.fetch_recommendations("maya@example.com", SEATTLE)

    assert list(data.restaurants.dietary_based) == [
        "vegetarian restaurants",
        "plant based restaurants",
        "gluten free restaurants",
    ]
    assert list(data.restaurants.preference_based) == [
        "sushi restaurants",
        "japanese restaurants",
        "ramen restaurants",
        "pizza restaurants",
        "italian restaurants",
    ]

    limits = {query: limit for query, _, limit in search_provider.calls}
    assert limits["vegetarian restaurants"] == 20
    assert limits["sushi restaurants"] == 5
    assert {radius for _, radius, _ in search_provider.calls} == {10.0}

    meta = data.search_metadata
    assert meta.total_restaurants_found == 16
    assert meta.results_per_type_dietary == 20
    assert meta.results_per_type_preference == 5
    assert meta.search_coordinates.latitude == 47.61
    assert data.user_preferences.name == "Maya Chen"


@pytest.mark.asyncio
async def test_failed_query_yields_empty_list(onboarding, settings):
    search = FakeSearchProvider(settings, failing={"plant based restaurants"})
    service = RecommendationService(onboarding, search)

    data = await service.fetch_recommendations("maya@example.com", SEATTLE)

    assert data.restaurants.dietary_based["plant based restaurants"] == []
    assert len(data.restaurants.dietary_based["vegetarian restaurants"]) == 2
    assert data.search_metadata.total_restaurants_found == 14


@pytest.mark.asyncio
async def test_fetch_without_onboarding(recommendations, search_provider):
    with pytest.raises(OnboardingIncompleteError):
        await recommendations.fetch_recommendations("ghost@example.com", SEATTLE)
    assert search_provider.calls == []


@pytest.mark.asyncio
async def test_readiness(recommendations, onboarding):
    ready = await recommendations.validate_user_readiness("maya@example.com")
    assert ready.ready is True

    missing = await recommendations.validate_user_readiness("ghost@example.com")
    assert missing.ready is False
    assert "onboarding" in missing.message

    onboarding.put("anon@example.com", OnboardingRecord.from_stored(onboarding_payload(name=None)))
    nameless = await recommendations.validate_user_readiness("anon@example.com")
    assert nameless.ready is False
    assert "name" in nameless.message


@pytest.mark.asyncio
async def test_queries_preview(recommendations):
    preview = await recommendations.get_search_queries_preview("maya@example.com")
    assert preview.dietary[0] == "vegetarian restaurants"

    assert await recommendations.get_search_queries_preview("ghost@example.com") is None


# ==================== SERPAPI ====================


def serpapi_client(settings, handler):
    transport = httpx.MockTransport(handler)
    return SerpApiSearchClient(settings, client=httpx.AsyncClient(transport=transport))


def local_results(count):
    return {
        "local_results": [
            {
                "title": f"Place {i}",
                "place_id": f"p{i}",
                "rating": 4.5,
                "type": "Vegetarian restaurant",
                "gps_coordinates": {"latitude": 47.6, "longitude": -122.3},
                "unused_field": True,
            }
            for i in range(count)
        ]
    }


@pytest.mark.asyncio
async def test_serpapi_request_and_limit(settings):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=local_results(4))

    client = serpapi_client(settings, handler)
    results = await client.search(47.61, -122.33, "vegan restaurants", 10.0, 3)
    await client.close()

    params = seen[0].url.params
    assert params["engine"] == "google_maps"
    assert params["q"] == "vegan restaurants"
    assert params["ll"] == f"@47.61,-122.33,{zoom_for_radius(10.0)}z"
    assert params["api_key"] == "test-key"

    assert [r.position for r in results] == [1, 2, 3]
    assert results[0].search_query == "vegan restaurants"
    assert results[0].gps_coordinates.latitude == 47.6


@pytest.mark.asyncio
async def test_serpapi_http_error(settings):
    client = serpapi_client(settings, lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(SearchProviderError):
        await client.search(47.61, -122.33, "tacos", 10.0, 5)


@pytest.mark.asyncio
async def test_serpapi_error_payload(settings):
    client = serpapi_client(settings, lambda request: httpx.Response(200, json={"error": "Invalid API key"}))
    with pytest.raises(SearchProviderError):
        await client.search(47.61, -122.33, "tacos", 10.0, 5)


@pytest.mark.asyncio
async def test_serpapi_no_results(settings):
    client = serpapi_client(settings, lambda request: httpx.Response(200, json={}))
    assert await client.search(47.61, -122.33, "tacos", 10.0, 5) == []


@pytest.mark.asyncio
async def test_serpapi_requires_key(settings):
    settings.serpapi_api_key = ""
    client = serpapi_client(settings, lambda request: httpx.Response(200, json=local_results(1)))
    with pytest.raises(SearchProviderError):
        await client.search(47.61, -122.33, "tacos", 10.0, 5)


def test_zoom_for_radius():
    assert zoom_for_radius(10.0) == 12
    assert zoom_for_radius(100000.0) == 3
    assert zoom_for_radius(0.001) == 21
