"""In-process graph store.

Same merge semantics as the Neo4j store, kept in dictionaries. Used for local
development without a database and by the test suite.
"""

from collections import defaultdict
from datetime import datetime
from typing import Optional

from ..exceptions import UserNotFoundError
from ..graph.nodes import BehaviorNode, PreferenceNode, UserNode
from ..graph.rels import (
    AGE_GROUP,
    DIET_TYPE,
    HAS_PREFERENCE,
    LOCATION,
    PERFORMED,
    TaxonomyLink,
)
from ..models.profile import SimilarUser, UserProfile
from .base import GraphStore, NodeRef, check_identifier, user_ref

NodeKey = tuple[str, tuple]


def _key(label: str, identity: dict) -> NodeKey:
    return (label, tuple(sorted(identity.items())))


def _apply(target: dict, props: Optional[dict], on_create: Optional[dict]) -> None:
    for k, v in (on_create or {}).items():
        if target.get(k) is None:
            target[k] = v
    for k, v in (props or {}).items():
        if v is None:
            target.pop(k, None)
        else:
            target[k] = v


class MemoryGraphStore(GraphStore):
    """Dictionary-backed property graph."""

    def __init__(self):
        self.nodes: dict[NodeKey, dict] = {}
        # (source, rel_type, target) -> edge properties
        self.edges: dict[tuple[NodeKey, str, NodeKey], dict] = {}
        self._out: dict[tuple[NodeKey, str], list[NodeKey]] = defaultdict(list)

    def _find(self, ref: NodeRef) -> Optional[NodeKey]:
        key = _key(ref.label, ref.identity)
        if key in self.nodes:
            return key
        # Lookup by a non-identity property, e.g. Restaurant by restaurantId
        for candidate, props in self.nodes.items():
            if candidate[0] == ref.label and all(
                props.get(k) == v for k, v in ref.identity.items()
            ):
                return candidate
        return None

    def _targets(self, source: NodeKey, rel_type: str) -> list[tuple[dict, dict]]:
        """(edge props, target node props) for outgoing edges of one type."""
        return [
            (self.edges[(source, rel_type, target)], self.nodes[target])
            for target in self._out.get((source, rel_type), [])
            if target in self.nodes
        ]

    # ==================== PRIMITIVES ====================

    async def merge_node(
        self,
        label: str,
        identity: dict,
        props: Optional[dict] = None,
        on_create: Optional[dict] = None,
    ) -> dict:
        check_identifier(label)
        key = _key(label, identity)
        node = self.nodes.setdefault(key, dict(identity))
        _apply(node, props, on_create)
        return dict(node)

    async def merge_edge(
        self,
        source: NodeRef,
        rel_type: str,
        target: NodeRef,
        props: Optional[dict] = None,
        on_create: Optional[dict] = None,
    ) -> bool:
        check_identifier(rel_type)
        a = self._find(source)
        b = self._find(target)
        if a is None or b is None:
            return False

        edge_key = (a, rel_type, b)
        if edge_key not in self.edges:
            self.edges[edge_key] = {}
            self._out[(a, rel_type)].append(b)
        _apply(self.edges[edge_key], props, on_create)
        return True

    # ==================== WRITES ====================

    async def create_behavior(self, email: str, behavior: BehaviorNode) -> str:
        user = self._find(user_ref(email))
        if user is None:
            raise UserNotFoundError(email)

        props = {k: v for k, v in behavior.to_dict().items() if v is not None}
        key = _key("Behavior", {"behaviorId": behavior.behavior_id})
        self.nodes[key] = props
        self.edges[(user, PERFORMED, key)] = {"timestamp": behavior.timestamp}
        self._out[(user, PERFORMED)].append(key)
        return behavior.behavior_id

    async def delete_behaviors_before(self, cutoff: datetime) -> int:
        doomed = {
            key
            for key, props in self.nodes.items()
            if key[0] == "Behavior" and props["timestamp"] < cutoff
        }
        for key in doomed:
            del self.nodes[key]
        for edge_key in [e for e in self.edges if e[0] in doomed or e[2] in doomed]:
            del self.edges[edge_key]
        for out_key, targets in self._out.items():
            targets[:] = [t for t in targets if t not in doomed]
        return len(doomed)

    # ==================== READS ====================

    def _taxonomy(self, user: NodeKey, link: TaxonomyLink) -> list[str]:
        return sorted({node["name"] for _, node in self._targets(user, link.rel_type)})

    def _restaurant(self, restaurant_id: Optional[str]) -> dict:
        if not restaurant_id:
            return {}
        key = self._find(NodeRef("Restaurant", {"restaurantId": restaurant_id}))
        return self.nodes[key] if key else {}

    async def get_user_profile(self, email: str, since: datetime) -> Optional[UserProfile]:
        user = self._find(user_ref(email))
        if user is None:
            return None

        behaviors = []
        for _, props in self._targets(user, PERFORMED):
            if props["timestamp"] < since:
                continue
            node = BehaviorNode.from_record(props)
            restaurant = self._restaurant(node.context)
            behaviors.append(
                node.to_profile(
                    restaurant_name=restaurant.get("name"),
                    restaurant_cuisine=restaurant.get("cuisine"),
                )
            )
        behaviors.sort(key=lambda b: b.timestamp, reverse=True)

        return UserProfile(
            user=UserNode.from_record(self.nodes[user]).to_summary(),
            preferences=[
                PreferenceNode.from_record(node).to_profile(strength=edge.get("strength"))
                for edge, node in self._targets(user, HAS_PREFERENCE)
            ],
            diet_types=self._taxonomy(user, DIET_TYPE),
            age_groups=self._taxonomy(user, AGE_GROUP),
            locations=self._taxonomy(user, LOCATION),
            recent_behaviors=behaviors,
        )

    async def find_similar_users(self, email: str, limit: int = 10) -> list[SimilarUser]:
        user = self._find(user_ref(email))
        if user is None:
            return []
        mine = set(self._out.get((user, HAS_PREFERENCE), []))

        similar = []
        for key, props in self.nodes.items():
            if key[0] != "User" or key == user or props.get("email") == email:
                continue
            theirs = self._out.get((key, HAS_PREFERENCE), [])
            shared = mine.intersection(theirs)
            if not shared:
                continue
            similar.append(
                SimilarUser(
                    email=props["email"],
                    name=props.get("name"),
                    shared_preferences=len(shared),
                    common_preferences=sorted({self.nodes[p]["value"] for p in shared}),
                    all_preferences=list(dict.fromkeys(self.nodes[p]["value"] for p in theirs)),
                )
            )

        similar.sort(key=lambda s: (-s.shared_preferences, s.email))
        return similar[:limit]
