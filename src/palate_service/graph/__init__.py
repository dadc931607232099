"""Graph records, relationship types and schema."""

from .nodes import BehaviorNode, PreferenceNode, RestaurantNode, UserNode
from .rels import AGE_GROUP, CUISINE, DIET_TYPE, HAS_PREFERENCE, LOCATION, PERFORMED, TaxonomyLink
from .schema import SCHEMA_STATEMENTS

__all__ = [
    "BehaviorNode",
    "PreferenceNode",
    "RestaurantNode",
    "UserNode",
    "AGE_GROUP",
    "CUISINE",
    "DIET_TYPE",
    "HAS_PREFERENCE",
    "LOCATION",
    "PERFORMED",
    "TaxonomyLink",
    "SCHEMA_STATEMENTS",
]
