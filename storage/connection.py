"""
Metadata Store Connection - Pooled SQLAlchemy engine.

This is the service's OWN database (tool history and the prompt library),
not one of the ad-hoc databases reached through the gateway. It provides:
- A pooled engine for PostgreSQL / MySQL (QueuePool, pre-ping, recycle)
- A single shared connection for SQLite (StaticPool), used locally and in tests
- Transaction-scoped helpers for reads, writes and inserts
- Connection health checking
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional, Union

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool, StaticPool

from config import MetadataDBConfig, MetadataDBType, config

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """The metadata store failed to read or write."""


class NotFoundError(LookupError):
    """The requested record does not exist."""


_DRIVERS = {
    MetadataDBType.POSTGRESQL: "postgresql+psycopg2",
    MetadataDBType.MYSQL: "mysql+pymysql",
}


class MetadataDatabase:
    """
    Manages metadata store connections with connection pooling.

    Supports PostgreSQL, MySQL and SQLite.
    """

    def __init__(self, db_config: Optional[MetadataDBConfig] = None):
        """
        Initialize database connection manager.

        Args:
            db_config: Metadata store configuration. Uses global config if not provided.
        """
        self.config = db_config or config.metadata
        self._engine: Optional[Engine] = None

    @property
    def db_type(self) -> MetadataDBType:
        """Get the current database type."""
        return self.config.resolved_type

    @property
    def connection_url(self) -> Union[str, URL]:
        if self.config.url:
            return self.config.url
        if self.db_type == MetadataDBType.SQLITE:
            return f"sqlite:///{self.config.database}"
        return URL.create(
            _DRIVERS[self.db_type],
            username=self.config.username,
            password=self.config.password or None,
            host=self.config.host,
            port=self.config.port,
            database=self.config.database,
        )

    def _create_engine(self) -> Engine:
        """
        Create SQLAlchemy engine with appropriate settings for each database type.

        Returns:
            Configured SQLAlchemy Engine instance
        """
        if self.db_type == MetadataDBType.SQLITE:
            return create_engine(
                self.connection_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=False
            )

        # No idle-timeout knob in QueuePool: recycle bounds connection lifetime
        # and pre-ping discards connections the server has dropped
        return create_engine(
            self.connection_url,
            poolclass=QueuePool,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
            pool_recycle=self.config.pool_recycle,
            pool_pre_ping=True,
            echo=False
        )

    @property
    def engine(self) -> Engine:
        """Get or create the SQLAlchemy engine."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    @contextmanager
    def get_connection(self) -> Generator[Connection, None, None]:
        """
        Context manager for a transaction on a pooled connection.

        Commits when the block succeeds, rolls back when it raises.

        Example:
            with db.get_connection() as conn:
                conn.execute(text("DELETE FROM tool_history WHERE id = :id"), {"id": 1})
        """
        try:
            with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error(f"Metadata store error: {e}")
            raise StorageError(str(e)) from e

    def execute_query(self, query: str, params: Optional[dict] = None) -> List[Dict[str, Any]]:
        """
        Execute a read query and return results.

        Returns:
            List of result rows as dictionaries
        """
        with self.get_connection() as conn:
            result = conn.execute(text(query), params or {})
            return [dict(row) for row in result.mappings().all()]

    def execute_write(self, query: str, params: Optional[dict] = None) -> int:
        """
        Execute a write operation (UPDATE, DELETE, CREATE).

        Returns:
            Number of rows matched by the statement
        """
        with self.get_connection() as conn:
            result = conn.execute(text(query), params or {})
            return result.rowcount

    def execute_insert(self, query: str, params: Optional[dict] = None) -> int:
        """
        Execute an INSERT and return the new row's id.

        PostgreSQL reports the id through RETURNING; MySQL and SQLite
        through the cursor's lastrowid.
        """
        with self.get_connection() as conn:
            if self.db_type == MetadataDBType.POSTGRESQL:
                result = conn.execute(text(f"{query} RETURNING id"), params or {})
                return int(result.scalar_one())
            result = conn.execute(text(query), params or {})
            return int(result.lastrowid)

    def test_connection(self) -> tuple[bool, str]:
        """
        Test database connectivity.

        Returns:
            tuple: (success: bool, message: str)
        """
        try:
            rows = self.execute_query("SELECT 1 AS health_check")
            if rows and rows[0]["health_check"] == 1:
                return True, f"{self.db_type.value.upper()} connection successful"
            return False, "Unexpected result from health check query"
        except StorageError as e:
            return False, f"Connection failed: {e}"

    def close(self):
        """Close all connections and dispose of the engine."""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            logger.info("Metadata store connections closed")
