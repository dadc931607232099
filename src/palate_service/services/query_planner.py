"""Restaurant search query planning.

Pure functions of the ingestion output; no graph or network access.
"""

import logging
from typing import Optional

from ..models.recommendation import RestaurantPreferences, RestaurantQueries

logger = logging.getLogger("query_planner")

MAX_DIETARY_QUERIES = 8
MAX_PREFERENCE_QUERIES = 12
TOP_LIKED_FOODS = 10

DIET_QUERIES: dict[str, list[str]] = {
    "vegetarian": ["vegetarian restaurants", "plant based restaurants"],
    "vegan": ["vegan restaurants", "plant based restaurants"],
    "pescatarian": ["seafood restaurants", "fish restaurants"],
    "non-vegetarian": ["restaurants", "steakhouse", "bbq restaurants"],
}
DEFAULT_DIET_QUERIES = ["restaurants", "healthy restaurants"]

# First matching keyword wins
FOOD_QUERIES: list[tuple[tuple[str, ...], list[str]]] = [
    (("pizza",), ["pizza restaurants", "italian restaurants"]),
    (("burger",), ["burger restaurants", "american restaurants"]),
    (("sushi",), ["sushi restaurants", "japanese restaurants"]),
    (("taco", "mexican"), ["mexican restaurants", "taco restaurants"]),
    (("chinese",), ["chinese restaurants", "asian restaurants"]),
    (("indian",), ["indian restaurants", "curry restaurants"]),
    (("thai",), ["thai restaurants", "asian restaurants"]),
    (("coffee",), ["coffee shops", "cafes"]),
    (("dessert", "ice cream"), ["dessert restaurants", "ice cream shops"]),
]


def _unique(items: list[str], limit: int) -> list[str]:
    return list(dict.fromkeys(items))[:limit]


def dietary_queries(diet_type: Optional[str], allergies: list[str]) -> list[str]:
    queries = list(DIET_QUERIES.get(diet_type or "", DEFAULT_DIET_QUERIES))
    # Added when gluten is NOT a declared allergy; kept as the product behaves today.
    if "gluten" not in allergies:
        queries.append("gluten free restaurants")
    return _unique(queries, MAX_DIETARY_QUERIES)


def food_queries(food: str) -> list[str]:
    """Restaurant categories for one liked food."""
    food = food.lower()
    for keywords, queries in FOOD_QUERIES:
        if any(k in food for k in keywords):
            return queries
    return [f"{food} restaurants"]


def preference_queries(preferences: RestaurantPreferences) -> list[str]:
    # sorted() is stable, so equal weights keep their input order
    top = sorted(
        (f for f in preferences.liked_foods if f.weight >= 4),
        key=lambda f: f.weight,
        reverse=True,
    )[:TOP_LIKED_FOODS]

    queries = []
    for item in top:
        queries.extend(food_queries(item.food))
    return _unique(queries, MAX_PREFERENCE_QUERIES)


def generate_restaurant_queries(preferences: RestaurantPreferences) -> RestaurantQueries:
    """Split search strings into dietary-necessity and preference-affinity lists."""
    queries = RestaurantQueries(
        dietary=dietary_queries(preferences.diet_type, preferences.allergies),
        preference=preference_queries(preferences),
    )
    logger.info(
        f"Generated {len(queries.dietary)} dietary queries and "
        f"{len(queries.preference)} preference queries"
    )
    return queries
