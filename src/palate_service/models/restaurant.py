"""Restaurant models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """WGS84 coordinates."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class RestaurantCreate(BaseModel):
    """Schema for upserting a restaurant."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=300)
    cuisine: str = Field(..., min_length=1)
    location: str = ""
    rating: Optional[float] = Field(None, ge=0, le=5)
    price_range: Optional[str] = Field(None, alias="priceRange")
    features: list[str] = Field(default_factory=list)
    coordinates: Optional[Coordinates] = None
