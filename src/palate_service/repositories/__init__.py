"""Graph store implementations."""

from .base import GraphStore, NodeRef, user_ref
from .memory_store import MemoryGraphStore
from .neo4j_store import Neo4jGraphStore

__all__ = ["GraphStore", "NodeRef", "user_ref", "MemoryGraphStore", "Neo4jGraphStore"]
