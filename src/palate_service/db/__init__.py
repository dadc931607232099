"""Database connections."""

from .neo4j import Neo4jDatabase
from .postgres import PostgresDatabase

__all__ = ["Neo4jDatabase", "PostgresDatabase"]
