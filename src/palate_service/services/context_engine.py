"""Context synthesis for the generation step.

Stateless: every call recomputes from the current graph.
"""

import logging
from collections import Counter
from typing import Optional

from ..graph.nodes import utcnow
from ..models.behavior import ProfileBehavior
from ..models.context import (
    BehaviorContext,
    ContextUser,
    Demographics,
    FoodItem,
    OrderSummary,
    PreferenceContext,
    RAGContext,
    RecommendationConstraints,
    SimilarUserRef,
    SocialContext,
    WeightedItem,
)
from ..models.preference import ProfilePreference, is_disliked, is_liked
from ..models.profile import SimilarUser, UserProfile
from .knowledge_graph import KnowledgeGraphService
from .summary import summarize_profile

logger = logging.getLogger("context_engine")

MAX_SEARCHES = 10
MAX_VIEWED = 10
MAX_ORDERS = 5
MAX_INTERACTIONS = 10
SIMILAR_USERS = 5
COMMUNITY_TRENDS = 5
VIEWED_TAGS = 5
GOAL_WEIGHT = 4


def food_item(pref: ProfilePreference) -> FoodItem:
    return FoodItem(name=pref.value, weight=pref.weight, category=pref.category)


def preference_context(profile: UserProfile) -> PreferenceContext:
    prefs = profile.preferences
    return PreferenceContext(
        dietary_restrictions=[p.value for p in prefs if p.type == "dietary"],
        diet_type=profile.diet_types[0] if profile.diet_types else None,
        liked_foods=[food_item(p) for p in prefs if is_liked(p)],
        disliked_foods=[food_item(p) for p in prefs if is_disliked(p)],
        health_goals=[p.value for p in prefs if p.type == "health"],
    )


def _order_items(behavior: ProfileBehavior) -> list[str]:
    items = behavior.metadata.get("items")
    if not isinstance(items, (list, tuple)):
        return []
    return [str(item) for item in items]


def behavior_context(behaviors: list[ProfileBehavior]) -> BehaviorContext:
    """Bounded slices of the (newest first) behavior list."""
    searches = [b.action for b in behaviors if b.type == "search"]
    viewed = [
        b.context for b in behaviors
        if b.type == "view" and b.action == "restaurant_view" and b.context
    ]
    orders = [
        OrderSummary(
            restaurant_id=b.context,
            items=_order_items(b),
            timestamp=b.timestamp,
        )
        for b in behaviors
        if b.type == "order"
    ]
    interactions = [
        f"{b.action}-{b.context}" if b.context else b.action
        for b in behaviors
        if b.type == "interaction"
    ]
    return BehaviorContext(
        recent_searches=searches[:MAX_SEARCHES],
        viewed_restaurants=viewed[:MAX_VIEWED],
        order_history=orders[:MAX_ORDERS],
        interaction_patterns=interactions[:MAX_INTERACTIONS],
    )


def social_context(similar: list[SimilarUser]) -> SocialContext:
    """Neighbours plus the most frequent values across their preferences."""
    counts = Counter(value for user in similar for value in user.all_preferences)
    trends = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:COMMUNITY_TRENDS]
    return SocialContext(
        similar_users=[
            SimilarUserRef(email=u.email, shared_preferences=u.shared_preferences)
            for u in similar
        ],
        community_trends=[name for name, _ in trends],
    )


class ContextEngine:
    """Builds RAG contexts, summaries, tags and recommendation constraints."""

    def __init__(self, knowledge_graph: KnowledgeGraphService):
        self.knowledge_graph = knowledge_graph

    async def generate_rag_context(self, email: str) -> Optional[RAGContext]:
        """Structured bundle grounding a generation call; None without a profile."""
        profile = await self.knowledge_graph.get_user_profile(email)
        if profile is None:
            logger.info(f"No knowledge graph profile for {email}")
            return None

        similar = await self.knowledge_graph.find_similar_users(email, SIMILAR_USERS)
        summary = summarize_profile(
            profile, window_days=self.knowledge_graph.settings.profile_window_days
        )

        user = profile.user
        return RAGContext(
            user_profile=ContextUser(
                email=email,
                name=user.name,
                age=user.age,
                location=user.location,
                demographics=Demographics(
                    age_group=profile.age_groups[0] if profile.age_groups else None,
                    location_details=", ".join(profile.locations) or None,
                ),
            ),
            preferences=preference_context(profile),
            behavior_context=behavior_context(profile.recent_behaviors),
            social_context=social_context(similar),
            semantic_summary=summary,
            timestamp=utcnow(),
        )

    async def generate_context_summary(self, email: str) -> str:
        """Labeled lines for a prompt; empty string without a profile."""
        context = await self.generate_rag_context(email)
        if context is None:
            return ""
        return self.render_summary(context)

    @staticmethod
    def render_summary(context: RAGContext) -> str:
        user = context.user_profile
        prefs = context.preferences
        behavior = context.behavior_context
        social = context.social_context

        identity = [user.name] if user.name else []
        if user.age is not None:
            identity.append(f"age {user.age}")
        if user.location:
            identity.append(f"from {user.location}")

        lines = []
        if identity:
            lines.append(f"User Profile: {', '.join(identity)}")
        if prefs.diet_type:
            lines.append(f"Diet: {prefs.diet_type}")
        if prefs.dietary_restrictions:
            lines.append(f"Dietary Restrictions: {', '.join(prefs.dietary_restrictions)}")
        if prefs.health_goals:
            lines.append(f"Health Goals: {', '.join(prefs.health_goals)}")
        if prefs.liked_foods:
            lines.append(f"Favorite Foods: {', '.join(f.name for f in prefs.liked_foods[:5])}")
        if prefs.disliked_foods:
            lines.append(f"Dislikes: {', '.join(f.name for f in prefs.disliked_foods[:3])}")
        if behavior.recent_searches:
            lines.append(f"Recent Interests: {', '.join(behavior.recent_searches[:3])}")
        if social.similar_users:
            lines.append(
                f"Similar Users Found: {len(social.similar_users)} users with shared preferences"
            )
        if context.semantic_summary:
            lines.append(context.semantic_summary)
        return "\n".join(lines)

    async def get_contextual_embeddings(self, email: str) -> list[str]:
        """Tag strings keyed for an external semantic index.

        Deduplicated, first occurrence wins.
        """
        context = await self.generate_rag_context(email)
        if context is None:
            return []

        user = context.user_profile
        prefs = context.preferences
        behavior = context.behavior_context

        tags = []
        if user.demographics.age_group:
            tags.append(f"age-{user.demographics.age_group}")
        if user.location:
            tags.append(f"location-{user.location}")
        if prefs.diet_type:
            tags.append(f"diet-{prefs.diet_type}")
        tags += [f"restriction-{r}" for r in prefs.dietary_restrictions]
        tags += [f"goal-{g}" for g in prefs.health_goals]
        tags += [f"likes-{f.name}-{f.category}" for f in prefs.liked_foods if f.weight >= 4]
        tags += [f"dislikes-{f.name}-{f.category}" for f in prefs.disliked_foods if f.weight <= 2]
        tags += [f"search-{s}" for s in behavior.recent_searches]
        tags += [f"viewed-{r}" for r in behavior.viewed_restaurants[:VIEWED_TAGS]]
        tags += [f"trend-{t}" for t in context.social_context.community_trends]

        return list(dict.fromkeys(tags))

    async def get_restaurant_recommendation_context(self, email: str) -> RecommendationConstraints:
        """Hard and soft constraints; all empty without a profile."""
        context = await self.generate_rag_context(email)
        if context is None:
            return RecommendationConstraints()

        prefs = context.preferences
        must_have = [f"must-accommodate-{r}" for r in prefs.dietary_restrictions]
        if prefs.diet_type:
            must_have.append(f"must-support-{prefs.diet_type}")

        preferences = [WeightedItem(item=f.name, weight=f.weight) for f in prefs.liked_foods]
        preferences += [WeightedItem(item=g, weight=GOAL_WEIGHT) for g in prefs.health_goals]

        return RecommendationConstraints(
            must_have=must_have,
            must_avoid=[f.name for f in prefs.disliked_foods if f.weight <= 2],
            preferences=preferences,
            context_summary=self.render_summary(context),
        )
