"""Onboarding record -> canonical weighted preferences."""

import logging
from typing import Optional

from ..models.onboarding import CustomFood, OnboardingRecord
from ..models.preference import PreferenceInput
from ..models.recommendation import RatedFood, RestaurantPreferences

logger = logging.getLogger("ingestion")

AGE_BANDS: list[tuple[int, str]] = [
    (18, "Under 18"),
    (25, "18-24"),
    (35, "25-34"),
    (45, "35-44"),
    (55, "45-54"),
    (65, "55-64"),
]


def age_group(age: int) -> str:
    """Demographic band for an age in years."""
    for upper, name in AGE_BANDS:
        if age < upper:
            return name
    return "65+"


def _custom_source(item: CustomFood) -> str:
    return item.source or "user_input"


def ingest_preferences(record: OnboardingRecord) -> list[PreferenceInput]:
    """Flatten an onboarding record into preference tuples.

    Values and categories are stripped; entries left blank are skipped.
    Duplicate (type, category, value) triples collapse to the last occurrence.
    """
    prefs: dict[tuple[str, str, str], PreferenceInput] = {}

    def add(category: str, value: str, **kwargs) -> None:
        category, value = category.strip(), value.strip()
        if not category or not value:
            logger.debug(f"Skipping blank {kwargs['type']} preference: {category!r}/{value!r}")
            return
        pref = PreferenceInput(category=category, value=value, **kwargs)
        prefs[pref.key] = pref

    for food, rating in record.preferences.foods.items():
        add(
            type="food",
            category=rating.category,
            value=food,
            weight=rating.weight,
            preference=rating.preference,
            source="onboarding",
        )

    for like in record.preferences.custom_likes:
        add(
            type="custom",
            category="liked_food",
            value=like.food,
            weight=5,
            preference="love",
            source=_custom_source(like),
        )

    for dislike in record.preferences.custom_dislikes:
        add(
            type="custom",
            category="disliked_food",
            value=dislike.food,
            weight=1,
            preference="hate",
            source=_custom_source(dislike),
        )

    for restriction in record.dietary.restrictions:
        add(
            type="dietary",
            category=restriction.type,
            value=restriction.value,
            weight=5,
            preference="restriction",
            source="onboarding",
        )

    for goal in record.dietary.goals:
        add(
            type="health",
            category="goal",
            value=goal,
            weight=4,
            preference="goal",
            source="onboarding",
        )

    return list(prefs.values())


def restaurant_preferences(record: Optional[OnboardingRecord]) -> Optional[RestaurantPreferences]:
    """Restaurant-search view of an onboarding record; ``None`` passes through."""
    if record is None:
        return None

    foods = record.preferences.foods
    restrictions = record.dietary.restrictions

    liked = [
        RatedFood(food=food, weight=rating.weight, category=rating.category)
        for food, rating in foods.items()
        if rating.weight >= 4
    ]
    liked += [
        RatedFood(food=like.food, weight=like.weight or 5)
        for like in record.preferences.custom_likes
        if like.food.strip()
    ]

    disliked = [
        RatedFood(food=food, weight=rating.weight, category=rating.category)
        for food, rating in foods.items()
        if rating.weight <= 2
    ]
    disliked += [
        RatedFood(food=dislike.food, weight=dislike.weight or 1)
        for dislike in record.preferences.custom_dislikes
        if dislike.food.strip()
    ]

    return RestaurantPreferences(
        diet_type=record.dietary.type,
        allergies=[r.value for r in restrictions if r.type == "allergy"],
        restrictions=[r.value for r in restrictions if r.type == "restriction"],
        health_goals=list(record.dietary.goals),
        liked_foods=liked,
        disliked_foods=disliked,
        location=record.profile.location,
        age=record.profile.age,
        name=record.profile.name,
    )
