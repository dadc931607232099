"""Behavior models."""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

BehaviorType = Literal["order", "view", "search", "interaction"]


class BehaviorCreate(BaseModel):
    """Schema for recording a behavior."""

    type: BehaviorType
    action: str = Field(..., min_length=1, max_length=500)
    context: Optional[str] = None  # restaurant id, page path, query text
    metadata: Optional[dict[str, Any]] = None


class ProfileBehavior(BaseModel):
    """Behavior as read back in a user profile."""

    behavior_id: Optional[str] = None
    type: str
    action: str
    context: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[datetime] = None

    # Filled when ``context`` names a known Restaurant node
    restaurant_name: Optional[str] = None
    restaurant_cuisine: Optional[str] = None
