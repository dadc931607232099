"""Graph node records.

Property names on the graph are camelCase; Python attributes are snake_case.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from ..models.behavior import ProfileBehavior
from ..models.preference import ProfilePreference
from ..models.profile import UserSummary
from ..models.restaurant import RestaurantCreate


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_native(value: Any) -> Any:
    """Convert driver temporal values (neo4j.time.DateTime) to ``datetime``."""
    if hasattr(value, "to_native"):
        value = value.to_native()
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class UserNode:
    """User node in graph."""

    email: str
    user_id: str = field(default_factory=lambda: str(uuid4()))
    name: Optional[str] = None
    age: Optional[int] = None
    location: Optional[str] = None
    onboarding_completed: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_record(cls, record: dict) -> "UserNode":
        """Create from graph record."""
        return cls(
            email=record.get("email", ""),
            user_id=record.get("userId", ""),
            name=record.get("name"),
            age=record.get("age"),
            location=record.get("location"),
            onboarding_completed=bool(record.get("onboardingCompleted", False)),
            created_at=to_native(record.get("createdAt")) or utcnow(),
            updated_at=to_native(record.get("updatedAt")) or utcnow(),
        )

    def mutable_props(self) -> dict:
        """Properties overwritten on every upsert."""
        return {
            "name": self.name,
            "age": self.age,
            "location": self.location,
            "onboardingCompleted": self.onboarding_completed,
            "updatedAt": self.updated_at,
        }

    def creation_props(self) -> dict:
        """Properties written only where absent."""
        return {"userId": self.user_id, "createdAt": self.created_at}

    def to_summary(self) -> UserSummary:
        return UserSummary(
            user_id=self.user_id or None,
            email=self.email,
            name=self.name,
            age=self.age,
            location=self.location,
            onboarding_completed=self.onboarding_completed,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


@dataclass
class PreferenceNode:
    """Shared Preference node, identified by (type, category, value)."""

    type: str
    category: str
    value: str
    weight: int = 3
    preference: Optional[str] = None
    source: Optional[str] = None
    preference_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: dict) -> "PreferenceNode":
        return cls(
            type=record.get("type", ""),
            category=record.get("category", ""),
            value=record.get("value", ""),
            weight=record.get("weight", 3),
            preference=record.get("preference"),
            source=record.get("source"),
            preference_id=record.get("preferenceId"),
        )

    def to_profile(self, strength: Optional[float] = None) -> ProfilePreference:
        """Per-user view; the edge strength wins over the shared node weight."""
        return ProfilePreference(
            type=self.type,
            category=self.category,
            value=self.value,
            weight=strength if strength is not None else self.weight,
            preference=self.preference,
            source=self.source,
            preference_id=self.preference_id,
        )


@dataclass
class BehaviorNode:
    """Immutable Behavior node."""

    type: str
    action: str
    context: Optional[str] = None
    metadata: Optional[dict] = None
    behavior_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=utcnow)

    @classmethod
    def from_record(cls, record: dict) -> "BehaviorNode":
        metadata = record.get("metadata")
        if isinstance(metadata, str):
            try:
                metadata = json.loads(metadata)
            except ValueError:
                metadata = {"raw": metadata}
        return cls(
            type=record.get("type", ""),
            action=record.get("action", ""),
            context=record.get("context"),
            metadata=metadata,
            behavior_id=record.get("behaviorId", ""),
            timestamp=to_native(record.get("timestamp")) or utcnow(),
        )

    def to_dict(self) -> dict:
        """Convert to dict for the graph; maps are stored as JSON strings."""
        return {
            "behaviorId": self.behavior_id,
            "type": self.type,
            "action": self.action,
            "context": self.context,
            "metadata": json.dumps(self.metadata, default=str) if self.metadata else None,
            "timestamp": self.timestamp,
        }

    def to_profile(
        self,
        restaurant_name: Optional[str] = None,
        restaurant_cuisine: Optional[str] = None,
    ) -> ProfileBehavior:
        return ProfileBehavior(
            behavior_id=self.behavior_id,
            type=self.type,
            action=self.action,
            context=self.context,
            metadata=self.metadata or {},
            timestamp=self.timestamp,
            restaurant_name=restaurant_name,
            restaurant_cuisine=restaurant_cuisine,
        )


@dataclass
class RestaurantNode:
    """Restaurant node in graph."""

    restaurant_id: str
    name: str = ""
    cuisine: str = ""
    location: str = ""
    rating: Optional[float] = None
    price_range: Optional[str] = None
    features: list[str] = field(default_factory=list)
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_create(cls, data: RestaurantCreate) -> "RestaurantNode":
        return cls(
            restaurant_id=data.id,
            name=data.name,
            cuisine=data.cuisine,
            location=data.location,
            rating=data.rating,
            price_range=data.price_range,
            features=list(data.features),
            latitude=data.coordinates.lat if data.coordinates else None,
            longitude=data.coordinates.lng if data.coordinates else None,
        )

    @classmethod
    def from_record(cls, record: dict) -> "RestaurantNode":
        return cls(
            restaurant_id=record.get("restaurantId", ""),
            name=record.get("name", ""),
            cuisine=record.get("cuisine", ""),
            location=record.get("location", ""),
            rating=record.get("rating"),
            price_range=record.get("priceRange"),
            features=list(record.get("features") or []),
        )

    def to_dict(self) -> dict:
        """Scalar properties; the geo point is written by the store."""
        return {
            "name": self.name,
            "cuisine": self.cuisine,
            "location": self.location,
            "rating": self.rating,
            "priceRange": self.price_range,
            "features": self.features,
        }

    @property
    def has_point(self) -> bool:
        return self.latitude is not None and self.longitude is not None
