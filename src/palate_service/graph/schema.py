"""Knowledge graph constraints and indexes."""

CONSTRAINTS = [
    "CREATE CONSTRAINT user_id_unique IF NOT EXISTS FOR (u:User) REQUIRE u.userId IS UNIQUE",
    "CREATE CONSTRAINT user_email_unique IF NOT EXISTS FOR (u:User) REQUIRE u.email IS UNIQUE",
    "CREATE CONSTRAINT preference_id_unique IF NOT EXISTS FOR (p:Preference) REQUIRE p.preferenceId IS UNIQUE",
    "CREATE CONSTRAINT behavior_id_unique IF NOT EXISTS FOR (b:Behavior) REQUIRE b.behaviorId IS UNIQUE",
    "CREATE CONSTRAINT restaurant_id_unique IF NOT EXISTS FOR (r:Restaurant) REQUIRE r.restaurantId IS UNIQUE",
]

INDEXES = [
    # Full-text search
    "CREATE FULLTEXT INDEX user_search_index IF NOT EXISTS FOR (u:User) ON EACH [u.name, u.location]",
    "CREATE FULLTEXT INDEX preference_search_index IF NOT EXISTS FOR (p:Preference) ON EACH [p.value, p.category]",
    "CREATE FULLTEXT INDEX restaurant_search_index IF NOT EXISTS FOR (r:Restaurant) ON EACH [r.name, r.cuisine, r.location]",
    # Range filters
    "CREATE RANGE INDEX user_age_index IF NOT EXISTS FOR (u:User) ON (u.age)",
    "CREATE RANGE INDEX preference_weight_index IF NOT EXISTS FOR (p:Preference) ON (p.weight)",
    "CREATE RANGE INDEX behavior_timestamp_index IF NOT EXISTS FOR (b:Behavior) ON (b.timestamp)",
    "CREATE RANGE INDEX restaurant_rating_index IF NOT EXISTS FOR (r:Restaurant) ON (r.rating)",
    # Geo
    "CREATE POINT INDEX user_location_index IF NOT EXISTS FOR (u:User) ON (u.locationPoint)",
    "CREATE POINT INDEX restaurant_location_index IF NOT EXISTS FOR (r:Restaurant) ON (r.locationPoint)",
]

SCHEMA_STATEMENTS = CONSTRAINTS + INDEXES


def schema_item_name(statement: str) -> str:
    """Name of the constraint or index a statement creates."""
    words = statement.split()
    for keyword in ("CONSTRAINT", "INDEX"):
        if keyword in words:
            return words[words.index(keyword) + 1]
    return statement


def is_already_exists_error(error: Exception) -> bool:
    """Backend reports the schema item as already present."""
    code = getattr(error, "code", None) or ""
    return "AlreadyExists" in code or "already exists" in str(error).lower()
