"""Neo4j implementation of the graph store."""

from datetime import datetime
from typing import Optional

from ..db.neo4j import Neo4jDatabase
from ..exceptions import UserNotFoundError
from ..graph.nodes import BehaviorNode, PreferenceNode, RestaurantNode, UserNode, utcnow
from ..graph.rels import CUISINE
from ..models.preference import PreferenceInput
from ..models.profile import SimilarUser, UserProfile
from .base import GraphStore, NodeRef, check_identifier


def _match_clause(var: str, param: str, identity: dict) -> str:
    """``{k1: $param.k1, ...}`` for a MERGE/MATCH pattern."""
    pairs = ", ".join(f"{check_identifier(k)}: ${param}.{k}" for k in identity)
    return "{" + pairs + "}"


def _on_create_clause(var: str, on_create: dict) -> str:
    return "".join(
        f"\nSET {var}.{check_identifier(k)} = coalesce({var}.{k}, $defaults.{k})"
        for k in on_create
    )


class Neo4jGraphStore(GraphStore):
    """Graph store over the async Neo4j driver.

    Every operation opens its own session through ``Neo4jDatabase.session``.
    """

    def __init__(self, db: Neo4jDatabase):
        self.db = db

    async def initialize_schema(self) -> list[str]:
        return await self.db.initialize_schema()

    async def close(self) -> None:
        await self.db.close()

    # ==================== PRIMITIVES ====================

    async def merge_node(
        self,
        label: str,
        identity: dict,
        props: Optional[dict] = None,
        on_create: Optional[dict] = None,
    ) -> dict:
        on_create = on_create or {}
        query = f"""
        MERGE (n:{check_identifier(label)} {_match_clause("n", "identity", identity)})
        {_on_create_clause("n", on_create)}
        SET n += $props
        RETURN n {{.*}} AS node
        """

        async with self.db.session() as session:
            result = await session.run(
                query, identity=identity, props=props or {}, defaults=on_create
            )
            record = await result.single()
            return dict(record["node"]) if record else {}

    async def merge_edge(
        self,
        source: NodeRef,
        rel_type: str,
        target: NodeRef,
        props: Optional[dict] = None,
        on_create: Optional[dict] = None,
    ) -> bool:
        on_create = on_create or {}
        query = f"""
        MATCH (a:{check_identifier(source.label)} {_match_clause("a", "source", source.identity)})
        MATCH (b:{check_identifier(target.label)} {_match_clause("b", "target", target.identity)})
        MERGE (a)-[r:{check_identifier(rel_type)}]->(b)
        {_on_create_clause("r", on_create)}
        SET r += $props
        RETURN count(r) AS linked
        """

        async with self.db.session() as session:
            result = await session.run(
                query,
                source=source.identity,
                target=target.identity,
                props=props or {},
                defaults=on_create,
            )
            record = await result.single()
            return bool(record and record["linked"])

    # ==================== WRITES ====================

    async def upsert_preferences(self, email: str, preferences: list[PreferenceInput]) -> int:
        """Batch merge in one round trip."""
        if not preferences:
            return 0

        query = """
        MATCH (u:User {email: $email})
        UNWIND $preferences AS pref
        MERGE (p:Preference {type: pref.type, category: pref.category, value: pref.value})
        SET p.preferenceId = coalesce(p.preferenceId, randomUUID()),
            p.createdAt = coalesce(p.createdAt, $now),
            p.weight = pref.weight,
            p.preference = pref.preference,
            p.source = pref.source,
            p.updatedAt = $now
        MERGE (u)-[rel:HAS_PREFERENCE]->(p)
        SET rel.strength = pref.weight,
            rel.createdAt = coalesce(rel.createdAt, $now),
            rel.updatedAt = $now
        RETURN count(rel) AS linked
        """

        async with self.db.session() as session:
            result = await session.run(
                query,
                email=email,
                preferences=[p.model_dump() for p in preferences],
                now=utcnow(),
            )
            record = await result.single()
            return record["linked"] if record else 0

    async def upsert_restaurant(self, restaurant: RestaurantNode) -> None:
        """Merge with a native point for the spatial index."""
        query = """
        MERGE (r:Restaurant {restaurantId: $id})
        SET r.createdAt = coalesce(r.createdAt, $now)
        SET r += $props
        SET r.updatedAt = $now
        SET r.locationPoint = CASE
            WHEN $latitude IS NULL OR $longitude IS NULL THEN r.locationPoint
            ELSE point({latitude: $latitude, longitude: $longitude})
        END
        """

        async with self.db.session() as session:
            result = await session.run(
                query,
                id=restaurant.restaurant_id,
                props=restaurant.to_dict(),
                latitude=restaurant.latitude,
                longitude=restaurant.longitude,
                now=utcnow(),
            )
            await result.consume()

        if restaurant.cuisine:
            ref = NodeRef("Restaurant", {"restaurantId": restaurant.restaurant_id})
            await self.link_taxonomy(ref, CUISINE, restaurant.cuisine)

    async def create_behavior(self, email: str, behavior: BehaviorNode) -> str:
        props = {k: v for k, v in behavior.to_dict().items() if v is not None}
        query = """
        MATCH (u:User {email: $email})
        CREATE (b:Behavior)
        SET b = $behavior
        CREATE (u)-[rel:PERFORMED]->(b)
        SET rel.timestamp = $behavior.timestamp
        RETURN b.behaviorId AS behavior_id
        """

        async with self.db.session() as session:
            result = await session.run(query, email=email, behavior=props)
            record = await result.single()

        if not record:
            raise UserNotFoundError(email)
        return record["behavior_id"]

    async def delete_behaviors_before(self, cutoff: datetime) -> int:
        query = """
        MATCH (b:Behavior)
        WHERE b.timestamp < $cutoff
        DETACH DELETE b
        RETURN count(b) AS deleted
        """

        async with self.db.session() as session:
            result = await session.run(query, cutoff=cutoff)
            record = await result.single()
            return record["deleted"] if record else 0

    # ==================== READS ====================

    async def get_user_profile(self, email: str, since: datetime) -> Optional[UserProfile]:
        query = """
        MATCH (u:User {email: $email})
        OPTIONAL MATCH (u)-[:PERFORMED]->(b:Behavior)
        WHERE b.timestamp >= $since
        OPTIONAL MATCH (r:Restaurant {restaurantId: b.context})
        WITH u, b, r
        ORDER BY b.timestamp DESC
        WITH u, collect(
            CASE WHEN b IS NULL THEN NULL
            ELSE b {.*, restaurantName: r.name, restaurantCuisine: r.cuisine} END
        ) AS behaviors
        RETURN u {.*} AS user,
               [(u)-[hp:HAS_PREFERENCE]->(p:Preference) | p {.*, strength: hp.strength}] AS preferences,
               [(u)-[:FOLLOWS_DIET]->(d:DietType) | d.name] AS diet_types,
               [(u)-[:BELONGS_TO_AGE_GROUP]->(ag:AgeGroup) | ag.name] AS age_groups,
               [(u)-[:LIVES_IN]->(loc:Location) | loc.name] AS locations,
               behaviors
        """

        async with self.db.session() as session:
            result = await session.run(query, email=email, since=since)
            record = await result.single()

            if not record:
                return None

            behaviors = []
            for b in record["behaviors"]:
                b = dict(b)
                behaviors.append(
                    BehaviorNode.from_record(b).to_profile(
                        restaurant_name=b.get("restaurantName"),
                        restaurant_cuisine=b.get("restaurantCuisine"),
                    )
                )

            return UserProfile(
                user=UserNode.from_record(dict(record["user"])).to_summary(),
                preferences=[
                    PreferenceNode.from_record(p).to_profile(strength=p.get("strength"))
                    for p in record["preferences"]
                ],
                diet_types=sorted(set(record["diet_types"])),
                age_groups=sorted(set(record["age_groups"])),
                locations=sorted(set(record["locations"])),
                recent_behaviors=behaviors,
            )

    async def find_similar_users(self, email: str, limit: int = 10) -> list[SimilarUser]:
        query = """
        MATCH (u1:User {email: $email})-[:HAS_PREFERENCE]->(p:Preference)<-[:HAS_PREFERENCE]-(u2:User)
        WHERE u1 <> u2 AND u2.email <> $email
        WITH u2, count(DISTINCT p) AS shared, collect(DISTINCT p.value) AS common
        ORDER BY shared DESC, u2.email ASC
        LIMIT $limit
        RETURN u2.email AS email,
               u2.name AS name,
               shared AS shared_preferences,
               common AS common_preferences,
               [(u2)-[:HAS_PREFERENCE]->(ap:Preference) | ap.value] AS all_preferences
        ORDER BY shared_preferences DESC, email ASC
        """

        async with self.db.session() as session:
            result = await session.run(query, email=email, limit=limit)
            records = await result.data()

            return [
                SimilarUser(
                    email=r["email"],
                    name=r["name"],
                    shared_preferences=r["shared_preferences"],
                    common_preferences=sorted(r["common_preferences"]),
                    all_preferences=list(dict.fromkeys(r["all_preferences"])),
                )
                for r in records
            ]
