"""RAG context models consumed by the generation step."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Demographics(BaseModel):
    age_group: Optional[str] = None
    location_details: Optional[str] = None


class ContextUser(BaseModel):
    """Identity and demographics."""

    email: str
    name: Optional[str] = None
    age: Optional[int] = None
    location: Optional[str] = None
    demographics: Demographics = Field(default_factory=Demographics)


class FoodItem(BaseModel):
    name: str
    weight: float
    category: str


class PreferenceContext(BaseModel):
    dietary_restrictions: list[str] = Field(default_factory=list)
    diet_type: Optional[str] = None
    liked_foods: list[FoodItem] = Field(default_factory=list)  # weight >= 3
    disliked_foods: list[FoodItem] = Field(default_factory=list)  # weight <= 2
    health_goals: list[str] = Field(default_factory=list)


class OrderSummary(BaseModel):
    restaurant_id: Optional[str] = None
    items: list[str] = Field(default_factory=list)
    timestamp: Optional[datetime] = None


class BehaviorContext(BaseModel):
    recent_searches: list[str] = Field(default_factory=list)
    viewed_restaurants: list[str] = Field(default_factory=list)
    order_history: list[OrderSummary] = Field(default_factory=list)
    interaction_patterns: list[str] = Field(default_factory=list)


class SimilarUserRef(BaseModel):
    email: str
    shared_preferences: int


class SocialContext(BaseModel):
    similar_users: list[SimilarUserRef] = Field(default_factory=list)
    community_trends: list[str] = Field(default_factory=list)


class RAGContext(BaseModel):
    """Structured bundle grounding a downstream generation call."""

    user_profile: ContextUser
    preferences: PreferenceContext
    behavior_context: BehaviorContext
    social_context: SocialContext
    semantic_summary: str = ""
    timestamp: datetime


class WeightedItem(BaseModel):
    item: str
    weight: float


class RecommendationConstraints(BaseModel):
    """Hard and soft constraints for a restaurant filtering step."""

    must_have: list[str] = Field(default_factory=list)
    must_avoid: list[str] = Field(default_factory=list)
    preferences: list[WeightedItem] = Field(default_factory=list)
    context_summary: str = ""
