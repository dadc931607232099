"""Graph store interface.

Writes are expressed as merge-by-identity-then-set so concurrent writers
converge instead of duplicating. Backends implement the two primitives,
``merge_node`` and ``merge_edge``, plus the read queries; the domain write
operations below are built on the primitives and may be overridden with
batched backend-specific versions.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from ..graph.nodes import BehaviorNode, RestaurantNode, UserNode, utcnow
from ..graph.rels import CUISINE, HAS_PREFERENCE, TaxonomyLink
from ..models.preference import PreferenceInput
from ..models.profile import SimilarUser, UserProfile

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_identifier(name: str) -> str:
    """Labels, relationship types and keys are interpolated into queries."""
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid graph identifier: {name!r}")
    return name


@dataclass(frozen=True)
class NodeRef:
    """Reference to a node by label and identity properties."""

    label: str
    identity: dict = field(default_factory=dict)


def user_ref(email: str) -> NodeRef:
    return NodeRef("User", {"email": email})


class GraphStore(ABC):
    """Property-graph backend for the knowledge graph."""

    # ==================== LIFECYCLE ====================

    async def initialize_schema(self) -> list[str]:
        """Create constraints and indexes; idempotent."""
        return []

    async def close(self) -> None:
        """Release backend resources."""

    # ==================== PRIMITIVES ====================

    @abstractmethod
    async def merge_node(
        self,
        label: str,
        identity: dict,
        props: Optional[dict] = None,
        on_create: Optional[dict] = None,
    ) -> dict:
        """Create the node if absent, then set ``props``.

        ``on_create`` values are written only where the property is currently absent.
        ``None`` values in ``props`` remove the property.

        Returns:
            The node's properties after the write.
        """

    @abstractmethod
    async def merge_edge(
        self,
        source: NodeRef,
        rel_type: str,
        target: NodeRef,
        props: Optional[dict] = None,
        on_create: Optional[dict] = None,
    ) -> bool:
        """Create the edge if absent, then set ``props``.

        Returns:
            False if either endpoint does not exist.
        """

    # ==================== WRITES ====================

    async def upsert_user(self, user: UserNode, extra: Optional[dict] = None) -> str:
        """Merge the User by e-mail; ``userId`` is assigned once."""
        props = user.mutable_props()
        props.update(extra or {})
        node = await self.merge_node("User", {"email": user.email}, props, user.creation_props())
        return node["userId"]

    async def upsert_preferences(self, email: str, preferences: list[PreferenceInput]) -> int:
        """Merge Preference nodes and the user's HAS_PREFERENCE edges."""
        for pref in preferences:
            now = utcnow()
            await self.merge_node(
                "Preference",
                pref.identity,
                {
                    "weight": pref.weight,
                    "preference": pref.preference,
                    "source": pref.source,
                    "updatedAt": now,
                },
                {"preferenceId": str(uuid4()), "createdAt": now},
            )
            await self.merge_edge(
                user_ref(email),
                HAS_PREFERENCE,
                NodeRef("Preference", pref.identity),
                {"strength": pref.weight, "updatedAt": now},
                {"createdAt": now},
            )
        return len(preferences)

    async def link_taxonomy(self, source: NodeRef, link: TaxonomyLink, name: str) -> bool:
        """Merge a singleton taxonomy node and link ``source`` to it."""
        await self.merge_node(link.label, {"name": name})
        return await self.merge_edge(
            source,
            link.rel_type,
            NodeRef(link.label, {"name": name}),
            on_create={"createdAt": utcnow()},
        )

    async def upsert_restaurant(self, restaurant: RestaurantNode) -> None:
        """Merge the Restaurant by id and link its Cuisine."""
        now = utcnow()
        props = restaurant.to_dict()
        props["updatedAt"] = now
        if restaurant.has_point:
            props["locationPoint"] = {
                "latitude": restaurant.latitude,
                "longitude": restaurant.longitude,
            }
        ref = NodeRef("Restaurant", {"restaurantId": restaurant.restaurant_id})
        await self.merge_node(ref.label, ref.identity, props, {"createdAt": now})
        if restaurant.cuisine:
            await self.link_taxonomy(ref, CUISINE, restaurant.cuisine)

    @abstractmethod
    async def create_behavior(self, email: str, behavior: BehaviorNode) -> str:
        """Create a Behavior and its PERFORMED edge.

        Raises:
            UserNotFoundError: If the User node does not exist.
        """

    @abstractmethod
    async def delete_behaviors_before(self, cutoff: datetime) -> int:
        """Delete Behavior nodes (and edges) older than ``cutoff``."""

    # ==================== READS ====================

    @abstractmethod
    async def get_user_profile(self, email: str, since: datetime) -> Optional[UserProfile]:
        """User, preferences, taxonomy names and behaviors newer than ``since``."""

    @abstractmethod
    async def find_similar_users(self, email: str, limit: int = 10) -> list[SimilarUser]:
        """Users sharing Preference nodes, most shared first, ties by e-mail."""
