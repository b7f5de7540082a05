"""
Database Gateway - the four operations exposed to clients.

connect, list_catalogs, get_schema and execute_query each:
1. validate their own required fields (no I/O on failure)
2. open one ephemeral connection from the request payload
3. run the operation
4. release the connection, whatever happened

Failures are logged here and re-raised as the gateway error taxonomy.
"""

import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .cells import metadata_text
from .connection import ConnectionConfig, ConnectionManager, driver_message
from .errors import GatewayError, QueryError, ValidationError
from .executor import QueryExecutor, QueryResult
from .schema_introspector import SchemaIntrospector, SchemaReport

logger = logging.getLogger(__name__)


class DatabaseGateway:
    """Stateless facade; safe to share between concurrent requests."""

    def __init__(
        self,
        connections: Optional[ConnectionManager] = None,
        executor: Optional[QueryExecutor] = None,
    ):
        self.connections = connections or ConnectionManager()
        self.executor = executor or QueryExecutor()

    def connect(self, payload: Mapping[str, Any]) -> str:
        """Open, ping and close. Returns a success message."""
        config = ConnectionConfig.from_payload(payload)
        try:
            with self.connections.open(config) as conn:
                self.connections.ping(conn)
        except GatewayError as e:
            self._log_failure("connect", config, e)
            raise

        logger.info(f"{config.descriptor.label} connection to {config.host}:{config.port} verified")
        return "Connection successful"

    def list_catalogs(self, payload: Mapping[str, Any]) -> List[str]:
        """List the databases visible on the server, in server order."""
        config = ConnectionConfig.from_payload(payload)
        try:
            with self.connections.open(config) as conn:
                try:
                    result = conn.execute(text(config.descriptor.list_catalogs_sql))
                    return [metadata_text(row[0]) for row in result.fetchall()]
                except SQLAlchemyError as e:
                    raise QueryError(driver_message(e)) from e
        except GatewayError as e:
            self._log_failure("list_catalogs", config, e)
            raise

    def get_schema(self, payload: Mapping[str, Any]) -> SchemaReport:
        """Introspect the database named in the payload."""
        config = ConnectionConfig.from_payload(payload)
        if not config.database:
            raise ValidationError("Host, user, and database are required")

        introspector = SchemaIntrospector(config.descriptor)
        try:
            with self.connections.open(config) as conn:
                return introspector.introspect(conn, config.database)
        except GatewayError as e:
            self._log_failure("get_schema", config, e)
            raise

    def execute_query(self, payload: Mapping[str, Any]) -> QueryResult:
        """
        Execute a read-only statement against the payload's database.

        The statement gate runs before a connection is opened.
        """
        statement = str(payload.get("sql") or "")
        if not statement.strip():
            raise ValidationError("SQL query is required")

        config = ConnectionConfig.from_payload(payload)
        if not config.database:
            raise ValidationError("Host, user, and database are required")

        self.executor.check(statement)

        try:
            with self.connections.open(config) as conn:
                return self.executor.execute(conn, statement)
        except GatewayError as e:
            self._log_failure("execute_query", config, e)
            raise

    def _log_failure(self, operation: str, config: ConnectionConfig, error: Exception) -> None:
        logger.error(
            f"{operation} failed for {config.descriptor.label} "
            f"{config.user}@{config.host}:{config.port}: {error}"
        )

