"""Pydantic models for graph entities and context objects."""

from .behavior import BehaviorCreate, BehaviorType, ProfileBehavior
from .chat import ChatRequest, ChatResponse
from .context import (
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
from .onboarding import (
    CustomFood,
    DietaryInfo,
    DietaryRestriction,
    FoodPreferences,
    FoodRating,
    OnboardingRecord,
    PersonalInfo,
)
from .outcome import Enrichment, enrich
from .preference import (
    PreferenceInput,
    PreferenceType,
    ProfilePreference,
    is_disliked,
    is_liked,
    label_for_weight,
    weight_for_label,
)
from .profile import SimilarUser, UserProfile, UserSummary
from .recommendation import (
    RatedFood,
    Readiness,
    RecommendationData,
    RestaurantPreferences,
    RestaurantQueries,
    RestaurantResult,
    UserLocation,
)
from .restaurant import Coordinates, RestaurantCreate

__all__ = [
    "BehaviorCreate",
    "BehaviorType",
    "ProfileBehavior",
    "ChatRequest",
    "ChatResponse",
    "BehaviorContext",
    "ContextUser",
    "Demographics",
    "FoodItem",
    "OrderSummary",
    "PreferenceContext",
    "RAGContext",
    "RecommendationConstraints",
    "SimilarUserRef",
    "SocialContext",
    "WeightedItem",
    "CustomFood",
    "DietaryInfo",
    "DietaryRestriction",
    "FoodPreferences",
    "FoodRating",
    "OnboardingRecord",
    "PersonalInfo",
    "Enrichment",
    "enrich",
    "PreferenceInput",
    "PreferenceType",
    "ProfilePreference",
    "is_disliked",
    "is_liked",
    "label_for_weight",
    "weight_for_label",
    "SimilarUser",
    "UserProfile",
    "UserSummary",
    "RatedFood",
    "Readiness",
    "RecommendationData",
    "RestaurantPreferences",
    "RestaurantQueries",
    "RestaurantResult",
    "UserLocation",
    "Coordinates",
    "RestaurantCreate",
]
