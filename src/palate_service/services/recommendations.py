"""Restaurant recommendation data assembly."""

import asyncio
import logging
from typing import Optional

from ..exceptions import OnboardingIncompleteError
from ..graph.nodes import utcnow
from ..models.recommendation import (
    GpsCoordinates,
    Readiness,
    RecommendationData,
    RestaurantPreferences,
    RestaurantQueries,
    RestaurantsByKind,
    SearchMetadata,
    UserLocation,
)
from .ingestion import restaurant_preferences
from .onboarding import OnboardingSource
from .query_planner import generate_restaurant_queries
from .search import RestaurantSearchProvider

logger = logging.getLogger("recommendation_service")


class RecommendationService:
    """Onboarding -> preferences -> planned queries -> concurrent search."""

    def __init__(self, onboarding: OnboardingSource, search: RestaurantSearchProvider):
        self.onboarding = onboarding
        self.search = search

    async def get_restaurant_preferences(self, email: str) -> Optional[RestaurantPreferences]:
        record = await self.onboarding.get_user_onboarding_data(email)
        return restaurant_preferences(record)

    async def fetch_recommendations(self, email: str, location: UserLocation) -> RecommendationData:
        """Gather candidate restaurants for a downstream ranking step.

        Raises:
            OnboardingIncompleteError: If the user has no onboarding record
        """
        preferences = await self.get_restaurant_preferences(email)
        if preferences is None:
            raise OnboardingIncompleteError(email)

        queries = generate_restaurant_queries(preferences)

        dietary, preference = await asyncio.gather(
            self.search.search_many(location.latitude, location.longitude, queries.dietary, "dietary"),
            self.search.search_many(location.latitude, location.longitude, queries.preference, "preference"),
        )

        total_dietary = sum(len(r) for r in dietary.values())
        total_preference = sum(len(r) for r in preference.values())
        logger.info(
            f"Recommendation data for {email}: {total_dietary} dietary-based, "
            f"{total_preference} preference-based restaurants"
        )

        settings = self.search.settings
        return RecommendationData(
            user_location=location,
            user_preferences=preferences,
            restaurants=RestaurantsByKind(dietary_based=dietary, preference_based=preference),
            search_metadata=SearchMetadata(
                search_queries=queries,
                search_radius_km=settings.search_radius_km,
                results_per_type_dietary=settings.results_per_dietary_query,
                results_per_type_preference=settings.results_per_preference_query,
                timestamp=utcnow(),
                total_restaurants_found=total_dietary + total_preference,
                search_coordinates=GpsCoordinates(
                    latitude=location.latitude,
                    longitude=location.longitude,
                ),
            ),
        )

    async def validate_user_readiness(self, email: str) -> Readiness:
        preferences = await self.get_restaurant_preferences(email)
        if preferences is None:
            return Readiness(
                ready=False,
                message="User has not completed onboarding. Please complete onboarding first.",
            )
        if not preferences.name:
            return Readiness(ready=False, message="User profile incomplete. Missing name information.")
        return Readiness(ready=True, message="User is ready for restaurant recommendations.")

    async def get_search_queries_preview(self, email: str) -> Optional[RestaurantQueries]:
        preferences = await self.get_restaurant_preferences(email)
        if preferences is None:
            return None
        return generate_restaurant_queries(preferences)
