"""Tests for the context synthesis engine."""

from datetime import timedelta

import pytest

from palate_service.graph.nodes import BehaviorNode, utcnow
from palate_service.models.onboarding import OnboardingRecord
from palate_service.models.profile import SimilarUser
from palate_service.services.context_engine import behavior_context, social_context
from conftest import onboarding_payload


@pytest.mark.asyncio
async def test_rag_context(context_engine, store, synced_user):
    now = utcnow()
    await store.create_behavior(
        synced_user,
        BehaviorNode("order", "checkout", "r1", {"items": ["pad thai"]}, timestamp=now - timedelta(hours=3)),
    )
    await store.create_behavior(synced_user, BehaviorNode("search", "vegan brunch", timestamp=now - timedelta(hours=2)))
    await store.create_behavior(synced_user, BehaviorNode("view", "restaurant_view", "r9", timestamp=now - timedelta(hours=1)))

    context = await context_engine.generate_rag_context(synced_user)

    assert context.user_profile.email == synced_user
    assert context.user_profile.demographics.age_group == "25-34"
    assert context.user_profile.demographics.location_details == "Seattle"

    prefs = context.preferences
    assert prefs.diet_type == "vegetarian"
    assert prefs.dietary_restrictions == ["peanuts", "no alcohol"]
    assert prefs.health_goals == ["eat more protein"]
    assert [f.name for f in prefs.liked_foods] == ["sushi", "pizza", "curry", "Ramen"]
    assert [f.name for f in prefs.disliked_foods] == ["olives", "cilantro"]

    behavior = context.behavior_context
    assert behavior.recent_searches == ["vegan brunch"]
    assert behavior.viewed_restaurants == ["r9"]
    assert behavior.order_history[0].restaurant_id == "r1"
    assert behavior.order_history[0].items == ["pad thai"]

    assert context.semantic_summary.startswith("Maya Chen is 29 years old")


@pytest.mark.asyncio
async def test_rag_context_without_profile(context_engine):
    assert await context_engine.generate_rag_context("ghost@example.com") is None
    assert await context_engine.generate_context_summary("ghost@example.com") == ""
    assert await context_engine.get_contextual_embeddings("ghost@example.com") == []

    constraints = await context_engine.get_restaurant_recommendation_context("ghost@example.com")
    assert constraints.must_have == []
    assert constraints.must_avoid == []
    assert constraints.preferences == []
    assert constraints.context_summary == ""


@pytest.mark.asyncio
async def test_context_summary_lines(context_engine, synced_user):
    summary = await context_engine.generate_context_summary(synced_user)
    lines = summary.splitlines()

    assert lines[0] == "User Profile: Maya Chen, age 29, from Seattle"
    assert "Diet: vegetarian" in lines
    assert "Favorite Foods: sushi, pizza, curry, Ramen" in lines
    assert "Dislikes: olives, cilantro" in lines
    assert not any(line.startswith("Recent Interests") for line in lines)


@pytest.mark.asyncio
async def test_context_summary_skips_missing_identity(context_engine, onboarding, knowledge_graph):
    onboarding.put(
        "anon@example.com",
        OnboardingRecord.from_stored(onboarding_payload(name=None, age=None, location=None)),
    )
    await knowledge_graph.create_or_update_user("anon@example.com")

    summary = await context_engine.generate_context_summary("anon@example.com")

    assert "User Profile" not in summary
    assert "unknown" not in summary.lower()


@pytest.mark.asyncio
async def test_contextual_embeddings(context_engine, store, synced_user):
    await store.create_behavior(synced_user, BehaviorNode("search", "ramen", timestamp=utcnow()))

    tags = await context_engine.get_contextual_embeddings(synced_user)

    assert tags[:3] == ["age-25-34", "location-Seattle", "diet-vegetarian"]
    assert "restriction-peanuts" in tags
    assert "goal-eat more protein" in tags
    assert "likes-sushi-japanese" in tags
    assert "likes-Ramen-liked_food" in tags
    assert "likes-curry-indian" not in tags  # weight 3
    assert "dislikes-olives-mediterranean" in tags
    assert "search-ramen" in tags
    assert len(tags) == len(set(tags))


@pytest.mark.asyncio
async def test_recommendation_constraints(context_engine, synced_user):
    constraints = await context_engine.get_restaurant_recommendation_context(synced_user)

    assert constraints.must_have == [
        "must-accommodate-peanuts",
        "must-accommodate-no alcohol",
        "must-support-vegetarian",
    ]
    assert constraints.must_avoid == ["olives", "cilantro"]
    assert ("eat more protein", 4) in [(p.item, p.weight) for p in constraints.preferences]
    assert ("sushi", 5) in [(p.item, p.weight) for p in constraints.preferences]
    assert constraints.context_summary.startswith("User Profile: Maya Chen")


def test_behavior_context_caps():
    from palate_service.models.behavior import ProfileBehavior

    behaviors = [ProfileBehavior(type="search", action=f"q{i}") for i in range(15)]
    behaviors += [ProfileBehavior(type="order", action="checkout", context=f"r{i}") for i in range(8)]
    behaviors += [ProfileBehavior(type="interaction", action="chat_query", context="hi")]

    context = behavior_context(behaviors)

    assert len(context.recent_searches) == 10
    assert len(context.order_history) == 5
    assert context.interaction_patterns == ["chat_query-hi"]


def test_social_context_trends():
    similar = [
        SimilarUser(email="a@x.com", shared_preferences=3, all_preferences=["sushi", "tacos", "pho"]),
        SimilarUser(email="b@x.com", shared_preferences=2, all_preferences=["tacos", "bagels"]),
        SimilarUser(email="c@x.com", shared_preferences=1, all_preferences=["tacos", "pho", "ramen", "curry"]),
    ]

    context = social_context(similar)

    assert context.community_trends == ["tacos", "pho", "bagels", "curry", "ramen"]
    assert [u.shared_preferences for u in context.similar_users] == [3, 2, 1]


@pytest.mark.asyncio
async def test_order_items_that_are_not_a_list(context_engine, knowledge_graph, synced_user):
    await knowledge_graph.record_user_behavior(synced_user, "order", "checkout", "r1", {"items": 3})
    await knowledge_graph.record_user_behavior(synced_user, "order", "checkout", "r2", {"items": "pho"})

    context = await context_engine.generate_rag_context(synced_user)

    assert [o.items for o in context.behavior_context.order_history] == [[], []]
    assert "diet-vegetarian" in await context_engine.get_contextual_embeddings(synced_user)
    constraints = await context_engine.get_restaurant_recommendation_context(synced_user)
    assert constraints.must_avoid == ["olives", "cilantro"]
