"""Onboarding record as stored by the account service."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PersonalInfo(BaseModel):
    """Profile step answers."""

    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None


class DietaryRestriction(BaseModel):
    """One allergy or restriction entry."""

    type: str  # "allergy" | "restriction"
    value: str


class DietaryInfo(BaseModel):
    """Dietary step answers."""

    type: Optional[str] = None  # "vegetarian", "vegan", "pescatarian", "non-vegetarian"
    restrictions: list[DietaryRestriction] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)


class FoodRating(BaseModel):
    """Rating of a food item offered during onboarding."""

    preference: str
    category: str
    weight: int = Field(..., ge=1, le=5)


class CustomFood(BaseModel):
    """Free-text liked or disliked food."""

    food: str
    preference: Optional[str] = None
    weight: Optional[int] = Field(None, ge=1, le=5)
    source: Optional[str] = None


class FoodPreferences(BaseModel):
    """Food preference step answers."""

    model_config = ConfigDict(populate_by_name=True)

    foods: dict[str, FoodRating] = Field(default_factory=dict)
    custom_likes: list[CustomFood] = Field(default_factory=list, alias="customLikes")
    custom_dislikes: list[CustomFood] = Field(default_factory=list, alias="customDislikes")


class OnboardingRecord(BaseModel):
    """Complete onboarding answers for one user."""

    model_config = ConfigDict(populate_by_name=True)

    profile: PersonalInfo = Field(default_factory=PersonalInfo)
    dietary: DietaryInfo = Field(default_factory=DietaryInfo)
    preferences: FoodPreferences = Field(default_factory=FoodPreferences)
    completed_at: Optional[datetime] = Field(None, alias="completedAt")

    @classmethod
    def from_stored(cls, data: dict) -> "OnboardingRecord":
        """Parse the stored JSON document, which nests everything under ``user``."""
        return cls.model_validate(data.get("user", data))
