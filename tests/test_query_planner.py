"""Tests for restaurant query planning."""

from palate_service.models.recommendation import RatedFood, RestaurantPreferences
from palate_service.services.query_planner import (
    MAX_PREFERENCE_QUERIES,
    food_queries,
    generate_restaurant_queries,
)


def prefs(**kwargs):
    return RestaurantPreferences(**kwargs)


def test_vegetarian_dietary_queries():
    queries = generate_restaurant_queries(prefs(diet_type="vegetarian"))
    assert queries.dietary == [
        "vegetarian restaurants",
        "plant based restaurants",
        "gluten free restaurants",
    ]


def test_gluten_allergy_drops_gluten_free_query():
    """The gluten-free query appears only when gluten is not a declared allergy."""
    queries = generate_restaurant_queries(prefs(diet_type="vegan", allergies=["gluten"]))
    assert queries.dietary == ["vegan restaurants", "plant based restaurants"]


def test_unknown_diet_uses_generic_queries():
    queries = generate_restaurant_queries(prefs(diet_type="keto"))
    assert queries.dietary[:2] == ["restaurants", "healthy restaurants"]

    queries = generate_restaurant_queries(prefs())
    assert queries.dietary[:2] == ["restaurants", "healthy restaurants"]


def test_non_vegetarian_queries():
    queries = generate_restaurant_queries(prefs(diet_type="non-vegetarian"))
    assert queries.dietary == ["restaurants", "steakhouse", "bbq restaurants", "gluten free restaurants"]


def test_pizza_preference_queries():
    queries = generate_restaurant_queries(
        prefs(liked_foods=[RatedFood(food="Pepperoni Pizza", weight=5)])
    )
    assert queries.preference == ["pizza restaurants", "italian restaurants"]


def test_keyword_table():
    assert food_queries("Spicy Tacos") == ["mexican restaurants", "taco restaurants"]
    assert food_queries("iced coffee") == ["coffee shops", "cafes"]
    assert food_queries("Ice Cream") == ["dessert restaurants", "ice cream shops"]
    assert food_queries("Pad Thai") == ["thai restaurants", "asian restaurants"]


def test_unmatched_food_falls_back_lowercased():
    assert food_queries("Falafel") == ["falafel restaurants"]


def test_low_weight_foods_are_ignored():
    queries = generate_restaurant_queries(
        prefs(liked_foods=[RatedFood(food="sushi", weight=3), RatedFood(food="ramen", weight=4)])
    )
    assert queries.preference == ["ramen restaurants"]


def test_higher_weights_first_and_ties_stable():
    queries = generate_restaurant_queries(
        prefs(
            liked_foods=[
                RatedFood(food="bagels", weight=4),
                RatedFood(food="dumplings", weight=5),
                RatedFood(food="waffles", weight=4),
            ]
        )
    )
    assert queries.preference == ["dumplings restaurants", "bagels restaurants", "waffles restaurants"]


def test_preference_queries_deduplicated_and_capped():
    foods = [RatedFood(food=f"dish{i}", weight=5) for i in range(9)]
    foods += [RatedFood(food="thai curry", weight=5), RatedFood(food="chinese noodles", weight=5)]

    queries = generate_restaurant_queries(prefs(liked_foods=foods))

    # Only the top 10 foods are considered
    assert "chinese restaurants" not in queries.preference
    assert len(queries.preference) == len(set(queries.preference))
    assert len(queries.preference) <= MAX_PREFERENCE_QUERIES
