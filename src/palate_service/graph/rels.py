"""Graph relationship types."""

from dataclasses import dataclass

HAS_PREFERENCE = "HAS_PREFERENCE"
PERFORMED = "PERFORMED"


@dataclass(frozen=True)
class TaxonomyLink:
    """(User|Restaurant)-[rel_type]->(label {name}) singleton taxonomy edge."""

    label: str
    rel_type: str


DIET_TYPE = TaxonomyLink("DietType", "FOLLOWS_DIET")
AGE_GROUP = TaxonomyLink("AgeGroup", "BELONGS_TO_AGE_GROUP")
LOCATION = TaxonomyLink("Location", "LIVES_IN")
CUISINE = TaxonomyLink("Cuisine", "SERVES_CUISINE")
