"""Service wiring.

One ``ServiceContainer`` is built per application and stored on
``app.state``; routers reach it through FastAPI dependencies.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from .config import Settings, get_settings
from .db import Neo4jDatabase, PostgresDatabase
from .repositories import GraphStore, MemoryGraphStore, Neo4jGraphStore
from .services import (
    ChatService,
    ContextEngine,
    GeminiGenerationProvider,
    GenerationProvider,
    InMemoryOnboardingSource,
    KnowledgeGraphService,
    OnboardingSource,
    RecommendationService,
    RestaurantSearchProvider,
    SerpApiSearchClient,
    SqlOnboardingSource,
)


@dataclass
class ServiceContainer:
    """Everything a request handler needs, constructed once."""

    settings: Settings
    store: GraphStore
    onboarding: OnboardingSource
    search: RestaurantSearchProvider
    generator: GenerationProvider
    knowledge_graph: KnowledgeGraphService
    context_engine: ContextEngine
    chat: ChatService
    recommendations: RecommendationService

    async def close(self) -> None:
        await self.store.close()
        await self.onboarding.close()
        await self.search.close()


def build_container(
    settings: Optional[Settings] = None,
    store: Optional[GraphStore] = None,
    onboarding: Optional[OnboardingSource] = None,
    search: Optional[RestaurantSearchProvider] = None,
    generator: Optional[GenerationProvider] = None,
) -> ServiceContainer:
    """Build the container, creating backends named by ``settings``.

    Any collaborator passed explicitly is used as is.
    """
    settings = settings or get_settings()

    if store is None:
        if settings.graph_backend == "memory":
            store = MemoryGraphStore()
        else:
            store = Neo4jGraphStore(Neo4jDatabase(settings))

    if onboarding is None:
        if settings.onboarding_backend == "memory":
            onboarding = InMemoryOnboardingSource()
        else:
            onboarding = SqlOnboardingSource(PostgresDatabase(settings))

    search = search or SerpApiSearchClient(settings)
    generator = generator or GeminiGenerationProvider(settings)

    knowledge_graph = KnowledgeGraphService(store, onboarding, settings)
    context_engine = ContextEngine(knowledge_graph)

    return ServiceContainer(
        settings=settings,
        store=store,
        onboarding=onboarding,
        search=search,
        generator=generator,
        knowledge_graph=knowledge_graph,
        context_engine=context_engine,
        chat=ChatService(knowledge_graph, context_engine, generator),
        recommendations=RecommendationService(onboarding, search),
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_knowledge_graph(request: Request) -> KnowledgeGraphService:
    return get_container(request).knowledge_graph


def get_context_engine(request: Request) -> ContextEngine:
    return get_container(request).context_engine


def get_chat_service(request: Request) -> ChatService:
    return get_container(request).chat


def get_recommendation_service(request: Request) -> RecommendationService:
    return get_container(request).recommendations
