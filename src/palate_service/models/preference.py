"""Preference model and the weight vocabulary."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

PreferenceType = Literal["food", "dietary", "health", "custom"]

WEIGHT_BY_LABEL: dict[str, int] = {
    "hate": 1,
    "dislike": 2,
    "neutral": 3,
    "like": 4,
    "love": 5,
}
LABEL_BY_WEIGHT: dict[int, str] = {weight: label for label, weight in WEIGHT_BY_LABEL.items()}


def weight_for_label(label: str) -> int:
    """Map a qualitative label ("hate" .. "love") to its 1-5 weight."""
    try:
        return WEIGHT_BY_LABEL[label.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown preference label: {label!r}") from None


def label_for_weight(weight: int) -> str:
    """Map a 1-5 weight back to its qualitative label."""
    try:
        return LABEL_BY_WEIGHT[int(weight)]
    except KeyError:
        raise ValueError(f"Weight out of range 1-5: {weight!r}") from None


class PreferenceInput(BaseModel):
    """Canonical preference tuple produced by ingestion.

    Identity is the (type, category, value) triple.
    """

    type: PreferenceType
    category: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)
    weight: int = Field(..., ge=1, le=5)
    preference: str
    source: str = "onboarding"

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.type, self.category, self.value)

    @property
    def identity(self) -> dict:
        """Merge identity for the Preference node."""
        return {"type": self.type, "category": self.category, "value": self.value}


class ProfilePreference(BaseModel):
    """Preference as read back for one user.

    ``weight`` is the per-user HAS_PREFERENCE strength.
    """

    type: str
    category: str
    value: str
    weight: float
    preference: Optional[str] = None
    source: Optional[str] = None
    preference_id: Optional[str] = None


def is_liked(pref: ProfilePreference) -> bool:
    """Food-like preference the user rates neutral or better."""
    return (
        pref.type in ("food", "custom")
        and pref.category != "disliked_food"
        and pref.weight >= 3
    )


def is_disliked(pref: ProfilePreference) -> bool:
    """Food-like preference the user dislikes or hates."""
    return pref.type in ("food", "custom") and (
        pref.category == "disliked_food" or pref.weight <= 2
    )
