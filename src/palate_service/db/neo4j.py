"""Neo4j async connection and schema bootstrap."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession

from ..config import Settings, get_settings
from ..graph.schema import SCHEMA_STATEMENTS, is_already_exists_error, schema_item_name

logger = logging.getLogger("neo4j_database")


class Neo4jDatabase:
    """Neo4j connection manager.

    One instance owns one pooled driver, created lazily on first use and
    shared by every caller holding the instance. ``close()`` releases it.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._driver: AsyncDriver | None = None
        self._reported_existing: set[str] = set()

    @property
    def driver(self) -> AsyncDriver:
        """Get or create the Neo4j driver."""
        if self._driver is None:
            self._driver = AsyncGraphDatabase.driver(
                self._settings.neo4j_uri,
                auth=(self._settings.neo4j_user, self._settings.neo4j_password),
                max_connection_pool_size=self._settings.neo4j_max_pool_size,
                connection_acquisition_timeout=self._settings.neo4j_connection_timeout,
                connection_timeout=self._settings.neo4j_connection_timeout,
            )
        return self._driver

    async def verify_connectivity(self) -> None:
        """Raise if the database is not reachable."""
        await self.driver.verify_connectivity()

    async def close(self) -> None:
        """Close Neo4j connection."""
        if self._driver is not None:
            await self._driver.close()
            self._driver = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a Neo4j session, closed on every exit path."""
        session = self.driver.session(database=self._settings.neo4j_database)
        try:
            yield session
        finally:
            await session.close()

    async def initialize_schema(self) -> list[str]:
        """Create constraints and indexes.

        Safe to repeat: "already exists" errors are swallowed, anything else
        propagates. Items created before a failure stay created.

        Returns:
            Names of the schema items whose statement ran without error.
        """
        applied = []
        async with self.session() as session:
            for statement in SCHEMA_STATEMENTS:
                name = schema_item_name(statement)
                try:
                    result = await session.run(statement)
                    await result.consume()
                except Exception as e:
                    if not is_already_exists_error(e):
                        logger.error(f"Failed to create schema item {name}: {e}")
                        raise
                    if name not in self._reported_existing:
                        self._reported_existing.add(name)
                        logger.info(f"Schema item already exists: {name}")
                    continue
                applied.append(name)
        logger.info(f"Knowledge graph schema ready ({len(applied)} statements applied)")
        return applied
