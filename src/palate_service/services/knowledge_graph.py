"""Knowledge graph service.

Turns onboarding records, behaviors and restaurants into graph writes, and
reads profiles, neighbours and summaries back out.
"""

import logging
from datetime import timedelta
from typing import Any, Optional

from ..config import Settings, get_settings
from ..graph.nodes import BehaviorNode, RestaurantNode, UserNode, utcnow
from ..graph.rels import AGE_GROUP, DIET_TYPE, LOCATION
from ..models.profile import SimilarUser, UserProfile
from ..models.restaurant import RestaurantCreate
from ..repositories.base import GraphStore, user_ref
from .ingestion import age_group, ingest_preferences
from .onboarding import OnboardingSource
from .summary import NO_PROFILE_SUMMARY, summarize_profile

logger = logging.getLogger("knowledge_graph")

# Not overridable through ``extra``
_PROTECTED_USER_PROPS = {"email", "userId", "createdAt"}


class KnowledgeGraphService:
    """User, behavior and restaurant operations over a ``GraphStore``."""

    def __init__(
        self,
        store: GraphStore,
        onboarding: OnboardingSource,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.onboarding = onboarding
        self.settings = settings or get_settings()

    async def initialize_schema(self) -> list[str]:
        return await self.store.initialize_schema()

    # ==================== WRITES ====================

    async def create_or_update_user(
        self,
        email: str,
        extra: Optional[dict[str, Any]] = None,
    ) -> Optional[str]:
        """Sync a user's onboarding answers into the graph.

        Steps run in sequence and are not atomic; re-running converges.

        Args:
            email: User e-mail, the natural key
            extra: Additional User properties merged over the onboarding ones

        Returns:
            The user's ``userId``, or None when no onboarding record exists
        """
        record = await self.onboarding.get_user_onboarding_data(email)
        if record is None:
            logger.warning(f"No onboarding data found for user: {email}")
            return None

        profile = record.profile
        user = UserNode(
            email=email,
            name=profile.name,
            age=profile.age,
            location=profile.location,
            onboarding_completed=True,
        )
        extra = {k: v for k, v in (extra or {}).items() if k not in _PROTECTED_USER_PROPS}
        user_id = await self.store.upsert_user(user, extra)

        preferences = ingest_preferences(record)
        await self.store.upsert_preferences(email, preferences)

        ref = user_ref(email)
        if record.dietary.type:
            await self.store.link_taxonomy(ref, DIET_TYPE, record.dietary.type)
        if profile.age is not None:
            await self.store.link_taxonomy(ref, AGE_GROUP, age_group(profile.age))
        if profile.location:
            await self.store.link_taxonomy(ref, LOCATION, profile.location)

        logger.info(f"Created/updated user {email} with {len(preferences)} preferences")
        return user_id

    async def record_user_behavior(
        self,
        email: str,
        behavior_type: str,
        action: str,
        context: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> str:
        """Append one immutable Behavior to the user's history.

        Raises:
            UserNotFoundError: If the user is not in the graph
        """
        behavior = BehaviorNode(
            type=behavior_type,
            action=action,
            context=context,
            metadata=metadata,
        )
        behavior_id = await self.store.create_behavior(email, behavior)
        logger.info(f"Recorded {behavior_type} behavior for {email}: {action}")
        return behavior_id

    async def create_restaurant_node(self, data: RestaurantCreate) -> str:
        await self.store.upsert_restaurant(RestaurantNode.from_create(data))
        logger.info(f"Created/updated restaurant {data.id}: {data.name}")
        return data.id

    async def cleanup_old_behaviors(self, days_to_keep: Optional[int] = None) -> int:
        """Delete behaviors older than the retention window."""
        if days_to_keep is None:
            days_to_keep = self.settings.behavior_retention_days
        cutoff = utcnow() - timedelta(days=days_to_keep)
        deleted = await self.store.delete_behaviors_before(cutoff)
        logger.info(f"Cleaned up {deleted} behaviors older than {days_to_keep} days")
        return deleted

    # ==================== READS ====================

    async def get_user_profile(self, email: str) -> Optional[UserProfile]:
        since = utcnow() - timedelta(days=self.settings.profile_window_days)
        return await self.store.get_user_profile(email, since)

    async def find_similar_users(self, email: str, limit: int = 10) -> list[SimilarUser]:
        return await self.store.find_similar_users(email, limit)

    async def get_semantic_context(self, email: str) -> str:
        """Natural-language profile summary, or ``NO_PROFILE_SUMMARY``."""
        profile = await self.get_user_profile(email)
        if profile is None:
            return NO_PROFILE_SUMMARY
        summary = summarize_profile(profile, window_days=self.settings.profile_window_days)
        return summary or NO_PROFILE_SUMMARY

    async def get_user_pattern_summary(self, email: str) -> str:
        """Summary used to ground chat responses."""
        return await self.get_semantic_context(email)
