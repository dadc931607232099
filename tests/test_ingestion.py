"""Tests for preference ingestion."""

import pytest

from palate_service.models.onboarding import OnboardingRecord
from palate_service.models.preference import (
    WEIGHT_BY_LABEL,
    label_for_weight,
    weight_for_label,
)
from palate_service.services.ingestion import (
    age_group,
    ingest_preferences,
    restaurant_preferences,
)
from conftest import onboarding_payload


def by_key(prefs):
    return {p.key: p for p in prefs}


def test_weight_label_round_trip():
    """Every label maps to a weight and back."""
    for label, weight in WEIGHT_BY_LABEL.items():
        assert weight_for_label(label) == weight
        assert label_for_weight(weight) == label


def test_weight_helpers_reject_unknown_values():
    with pytest.raises(ValueError):
        weight_for_label("adore")
    with pytest.raises(ValueError):
        label_for_weight(6)


def test_ingest_maps_every_section(onboarding_record):
    """Rated foods, custom foods, restrictions and goals all become preferences."""
    prefs = by_key(ingest_preferences(onboarding_record))

    sushi = prefs[("food", "japanese", "sushi")]
    assert sushi.weight == 5
    assert sushi.preference == "love"
    assert sushi.source == "onboarding"

    ramen = prefs[("custom", "liked_food", "Ramen")]
    assert (ramen.weight, ramen.preference, ramen.source) == (5, "love", "user_input")

    cilantro = prefs[("custom", "disliked_food", "cilantro")]
    assert (cilantro.weight, cilantro.preference) == (1, "hate")

    peanuts = prefs[("dietary", "allergy", "peanuts")]
    assert (peanuts.weight, peanuts.preference) == (5, "restriction")
    assert ("dietary", "restriction", "no alcohol") in prefs

    goal = prefs[("health", "goal", "eat more protein")]
    assert (goal.weight, goal.preference) == (4, "goal")

    assert len(prefs) == 9


def test_custom_food_source_defaults_to_user_input(onboarding_record):
    prefs = by_key(ingest_preferences(onboarding_record))
    assert prefs[("custom", "disliked_food", "cilantro")].source == "user_input"


def test_duplicate_triples_collapse_to_last():
    payload = onboarding_payload()
    payload["user"]["dietary"]["goals"] = ["lose weight", "lose weight"]
    payload["user"]["preferences"]["customLikes"] = [
        {"food": "tacos", "weight": 4, "source": "chat"},
        {"food": "tacos", "weight": 5, "source": "import"},
    ]

    prefs = ingest_preferences(OnboardingRecord.from_stored(payload))
    keys = [p.key for p in prefs]

    assert keys.count(("health", "goal", "lose weight")) == 1
    tacos = by_key(prefs)[("custom", "liked_food", "tacos")]
    assert tacos.source == "import"


def test_empty_record_yields_no_preferences():
    assert ingest_preferences(OnboardingRecord()) == []


@pytest.mark.parametrize(
    "age,group",
    [(12, "Under 18"), (18, "18-24"), (29, "25-34"), (44, "35-44"), (54, "45-54"), (64, "55-64"), (80, "65+")],
)
def test_age_group_bands(age, group):
    assert age_group(age) == group


def test_restaurant_preferences(onboarding_record):
    prefs = restaurant_preferences(onboarding_record)

    assert prefs.diet_type == "vegetarian"
    assert prefs.allergies == ["peanuts"]
    assert prefs.restrictions == ["no alcohol"]
    assert prefs.health_goals == ["eat more protein"]
    assert [(f.food, f.weight, f.category) for f in prefs.liked_foods] == [
        ("sushi", 5, "japanese"),
        ("pizza", 4, "italian"),
        ("Ramen", 5, "custom"),
    ]
    assert [f.food for f in prefs.disliked_foods] == ["olives", "cilantro"]
    assert prefs.name == "Maya Chen"
    assert prefs.age == 29
    assert prefs.location == "Seattle"


def test_restaurant_preferences_none_passes_through():
    assert restaurant_preferences(None) is None


def test_restaurant_preferences_serializes_with_aliases(onboarding_record):
    data = restaurant_preferences(onboarding_record).model_dump(by_alias=True)
    assert data["dietType"] == "vegetarian"
    assert "likedFoods" in data


def test_blank_entries_are_skipped():
    payload = onboarding_payload()
    payload["user"]["preferences"]["customLikes"] = [{"food": ""}, {"food": "  tofu  "}]
    payload["user"]["preferences"]["customDislikes"] = [{"food": "   "}]
    payload["user"]["preferences"]["foods"]["okra"] = {"preference": "like", "category": " ", "weight": 4}
    payload["user"]["dietary"]["restrictions"] = [{"type": "allergy", "value": ""}]
    payload["user"]["dietary"]["goals"] = [""]

    record = OnboardingRecord.from_stored(payload)
    prefs = by_key(ingest_preferences(record))

    assert ("custom", "liked_food", "tofu") in prefs
    assert not any(value.strip() == "" or category.strip() == "" for _, category, value in prefs)
    assert len(prefs) == 5  # four rated foods + tofu

    restaurant = restaurant_preferences(record)
    assert "" not in [f.food.strip() for f in restaurant.liked_foods + restaurant.disliked_foods]
