"""Pytest configuration and fixtures."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from palate_service.config import Settings
from palate_service.dependencies import build_container
from palate_service.exceptions import SearchProviderError
from palate_service.models.onboarding import OnboardingRecord
from palate_service.models.recommendation import RestaurantResult
from palate_service.repositories.memory_store import MemoryGraphStore
from palate_service.services.context_engine import ContextEngine
from palate_service.services.generation import TemplateGenerationProvider
from palate_service.services.knowledge_graph import KnowledgeGraphService
from palate_service.services.onboarding import InMemoryOnboardingSource
from palate_service.services.search import RestaurantSearchProvider


def onboarding_payload(
    name="Maya Chen",
    age=29,
    location="Seattle",
    diet_type="vegetarian",
) -> dict:
    """Stored onboarding document, as the account service writes it."""
    return {
        "user": {
            "profile": {"name": name, "age": age, "location": location},
            "dietary": {
                "type": diet_type,
                "restrictions": [
                    {"type": "allergy", "value": "peanuts"},
                    {"type": "restriction", "value": "no alcohol"},
                ],
                "goals": ["eat more protein"],
            },
            "preferences": {
                "foods": {
                    "sushi": {"preference": "love", "category": "japanese", "weight": 5},
                    "pizza": {"preference": "like", "category": "italian", "weight": 4},
                    "curry": {"preference": "neutral", "category": "indian", "weight": 3},
                    "olives": {"preference": "dislike", "category": "mediterranean", "weight": 2},
                },
                "customLikes": [
                    {"food": "Ramen", "preference": "love", "weight": 5, "source": "user_input"}
                ],
                "customDislikes": [
                    {"food": "cilantro", "preference": "hate", "weight": 1}
                ],
            },
            "completedAt": "2024-05-01T10:00:00Z",
        }
    }


@pytest.fixture
def settings():
    """Settings for in-process backends."""
    return Settings(
        graph_backend="memory",
        onboarding_backend="memory",
        serpapi_api_key="test-key",
        gemini_api_key="",
    )


@pytest.fixture
def onboarding_record():
    return OnboardingRecord.from_stored(onboarding_payload())


@pytest.fixture
def store():
    return MemoryGraphStore()


@pytest.fixture
def onboarding(onboarding_record):
    source = InMemoryOnboardingSource()
    source.put("maya@example.com", onboarding_record)
    return source


@pytest.fixture
def knowledge_graph(store, onboarding, settings):
    return KnowledgeGraphService(store, onboarding, settings)


@pytest.fixture
def context_engine(knowledge_graph):
    return ContextEngine(knowledge_graph)


class FakeSearchProvider(RestaurantSearchProvider):
    """Returns two places per query; queries in ``failing`` raise."""

    def __init__(self, settings, failing=()):
        super().__init__(settings)
        self.failing = set(failing)
        self.calls = []

    async def search(self, latitude, longitude, query, radius_km, limit):
        self.calls.append((query, radius_km, limit))
        if query in self.failing:
            raise SearchProviderError(f"provider failed for {query}")
        return [
            RestaurantResult(position=i + 1, title=f"{query} #{i + 1}", search_query=query)
            for i in range(min(limit, 2))
        ]


@pytest.fixture
def search_provider(settings):
    return FakeSearchProvider(settings)


@pytest.fixture
def container(settings, store, onboarding, search_provider):
    return build_container(
        settings,
        store=store,
        onboarding=onboarding,
        search=search_provider,
        generator=TemplateGenerationProvider(),
    )


@pytest_asyncio.fixture
async def synced_user(knowledge_graph):
    """Maya, synced into the graph."""
    await knowledge_graph.create_or_update_user("maya@example.com")
    return "maya@example.com"


@pytest.fixture
def neo4j_session():
    """Mock Neo4j session; tests queue results on ``session.run``."""
    session = AsyncMock()

    def result_with(record=None, records=None):
        result = MagicMock()
        result.single = AsyncMock(return_value=record)
        result.data = AsyncMock(return_value=records or [])
        result.consume = AsyncMock()
        return result

    session.result_with = result_with
    return session


class FakeNeo4jDatabase:
    """Stands in for ``Neo4jDatabase``, handing out one mock session."""

    def __init__(self, session):
        self._session = session
        self.closed = False

    @asynccontextmanager
    async def session(self):
        yield self._session

    async def initialize_schema(self):
        return ["user_email_unique"]

    async def close(self):
        self.closed = True


@pytest.fixture
def neo4j_db(neo4j_session):
    return FakeNeo4jDatabase(neo4j_session)
