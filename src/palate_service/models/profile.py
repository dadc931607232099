"""User profile read models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .behavior import ProfileBehavior
from .preference import ProfilePreference


class UserSummary(BaseModel):
    """User node properties."""

    user_id: Optional[str] = None
    email: str
    name: Optional[str] = None
    age: Optional[int] = None
    location: Optional[str] = None
    onboarding_completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserProfile(BaseModel):
    """A user with preferences, taxonomy memberships and recent behaviors."""

    user: UserSummary
    preferences: list[ProfilePreference] = Field(default_factory=list)
    diet_types: list[str] = Field(default_factory=list)
    age_groups: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    recent_behaviors: list[ProfileBehavior] = Field(default_factory=list)  # newest first


class SimilarUser(BaseModel):
    """Collaborative-filtering neighbour."""

    email: str
    name: Optional[str] = None
    shared_preferences: int
    common_preferences: list[str] = Field(default_factory=list)
    all_preferences: list[str] = Field(default_factory=list)
