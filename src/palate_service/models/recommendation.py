"""Restaurant recommendation models."""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

SearchKind = Literal["dietary", "preference"]


class RatedFood(BaseModel):
    """Food with a weight, as fed to the query planner."""

    food: str
    weight: int
    category: str = "custom"


class RestaurantPreferences(BaseModel):
    """Restaurant-search view of a user's onboarding answers."""

    model_config = ConfigDict(populate_by_name=True)

    diet_type: Optional[str] = Field(None, alias="dietType")
    allergies: list[str] = Field(default_factory=list)
    restrictions: list[str] = Field(default_factory=list)
    health_goals: list[str] = Field(default_factory=list, alias="healthGoals")
    liked_foods: list[RatedFood] = Field(default_factory=list, alias="likedFoods")
    disliked_foods: list[RatedFood] = Field(default_factory=list, alias="dislikedFoods")
    location: Optional[str] = None
    age: Optional[int] = None
    name: Optional[str] = None


class RestaurantQueries(BaseModel):
    """Search strings split by result-limit class."""

    dietary: list[str] = Field(default_factory=list)
    preference: list[str] = Field(default_factory=list)


class UserLocation(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: str = ""
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class GpsCoordinates(BaseModel):
    latitude: float
    longitude: float


class RestaurantResult(BaseModel):
    """One place returned by the search provider."""

    model_config = ConfigDict(extra="ignore")

    position: int = 0
    title: str
    place_id: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    open_state: Optional[str] = None
    price: Optional[str] = None
    type: Union[str, list[str], None] = None
    gps_coordinates: Optional[GpsCoordinates] = None
    thumbnail: Optional[str] = None
    search_query: Optional[str] = None


class SearchMetadata(BaseModel):
    search_queries: RestaurantQueries
    search_radius_km: float
    results_per_type_dietary: int
    results_per_type_preference: int
    timestamp: datetime
    total_restaurants_found: int
    search_coordinates: GpsCoordinates


class RestaurantsByKind(BaseModel):
    dietary_based: dict[str, list[RestaurantResult]] = Field(default_factory=dict)
    preference_based: dict[str, list[RestaurantResult]] = Field(default_factory=dict)


class RecommendationData(BaseModel):
    """Everything a downstream ranking step needs."""

    user_location: UserLocation
    user_preferences: RestaurantPreferences
    restaurants: RestaurantsByKind
    search_metadata: SearchMetadata


class Readiness(BaseModel):
    ready: bool
    message: str
