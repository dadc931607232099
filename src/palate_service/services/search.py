"""Restaurant search providers."""

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ..config import Settings, get_settings
from ..exceptions import SearchProviderError
from ..models.recommendation import RestaurantResult, SearchKind

logger = logging.getLogger("restaurant_search")

EARTH_CIRCUMFERENCE_KM = 40075.0


def zoom_for_radius(radius_km: float) -> int:
    """Google Maps zoom level whose viewport spans roughly ``radius_km``."""
    zoom = round(math.log2(EARTH_CIRCUMFERENCE_KM / max(radius_km, 0.01)))
    return max(3, min(21, zoom))


class RestaurantSearchProvider(ABC):
    """Location-scoped restaurant search."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @abstractmethod
    async def search(
        self,
        latitude: float,
        longitude: float,
        query: str,
        radius_km: float,
        limit: int,
    ) -> list[RestaurantResult]:
        """Up to ``limit`` places for one query.

        Raises:
            SearchProviderError: If the provider call fails
        """

    async def close(self) -> None:
        """Release provider resources."""

    def limit_for(self, kind: SearchKind) -> int:
        if kind == "dietary":
            return self.settings.results_per_dietary_query
        return self.settings.results_per_preference_query

    async def search_many(
        self,
        latitude: float,
        longitude: float,
        queries: list[str],
        kind: SearchKind = "dietary",
    ) -> dict[str, list[RestaurantResult]]:
        """Run every query concurrently; a failed query yields an empty list."""
        limit = self.limit_for(kind)
        radius = self.settings.search_radius_km
        logger.info(
            f"Searching {len(queries)} {kind} queries near {latitude}, {longitude} "
            f"({limit} per query)"
        )

        results = await asyncio.gather(
            *(self.search(latitude, longitude, q, radius, limit) for q in queries),
            return_exceptions=True,
        )

        by_query: dict[str, list[RestaurantResult]] = {}
        for query, result in zip(queries, results):
            if isinstance(result, Exception):
                logger.error(f"Search failed for '{query}': {result}")
                by_query[query] = []
            elif isinstance(result, BaseException):
                raise result
            else:
                by_query[query] = result

        total = sum(len(r) for r in by_query.values())
        logger.info(f"Completed {kind} search: {total} restaurants")
        return by_query


class SerpApiSearchClient(RestaurantSearchProvider):
    """SerpApi Google Maps engine over httpx."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(settings)
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.search_timeout_seconds)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def search(
        self,
        latitude: float,
        longitude: float,
        query: str,
        radius_km: float,
        limit: int,
    ) -> list[RestaurantResult]:
        if not self.settings.serpapi_api_key:
            raise SearchProviderError("SERPAPI_API_KEY is required for restaurant search")

        params = {
            "engine": "google_maps",
            "q": query,
            "ll": f"@{latitude},{longitude},{zoom_for_radius(radius_km)}z",
            "type": "search",
            "api_key": self.settings.serpapi_api_key,
            "hl": "en",
            "gl": "us",
        }

        try:
            response = await self.client.get(self.settings.serpapi_base_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise SearchProviderError(f"SerpApi request failed for '{query}': {e}") from e

        if "error" in payload and not payload.get("local_results"):
            raise SearchProviderError(f"SerpApi error for '{query}': {payload['error']}")

        places = payload.get("local_results") or []
        if not places:
            logger.info(f"No results found for '{query}'")

        return [
            RestaurantResult.model_validate({**place, "position": i + 1, "search_query": query})
            for i, place in enumerate(places[:limit])
        ]
