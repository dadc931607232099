"""Domain services."""

from .chat import ChatService
from .context_engine import ContextEngine
from .generation import (
    GeminiGenerationProvider,
    GenerationProvider,
    TemplateGenerationProvider,
    build_prompt_with_context,
    validate_content,
)
from .ingestion import age_group, ingest_preferences, restaurant_preferences
from .knowledge_graph import KnowledgeGraphService
from .onboarding import InMemoryOnboardingSource, OnboardingSource, SqlOnboardingSource
from .query_planner import generate_restaurant_queries
from .recommendations import RecommendationService
from .search import RestaurantSearchProvider, SerpApiSearchClient
from .summary import NO_PROFILE_SUMMARY, summarize_profile

__all__ = [
    "ChatService",
    "ContextEngine",
    "GeminiGenerationProvider",
    "GenerationProvider",
    "TemplateGenerationProvider",
    "build_prompt_with_context",
    "validate_content",
    "age_group",
    "ingest_preferences",
    "restaurant_preferences",
    "KnowledgeGraphService",
    "InMemoryOnboardingSource",
    "OnboardingSource",
    "SqlOnboardingSource",
    "generate_restaurant_queries",
    "RecommendationService",
    "RestaurantSearchProvider",
    "SerpApiSearchClient",
    "NO_PROFILE_SUMMARY",
    "summarize_profile",
]
