"""
Database Connection Module - Ephemeral per-request connections.

This module provides:
- ConnectionConfig, built fresh from each request payload
- One SQLAlchemy engine and one connection per request (no pooling)
- Guaranteed release of the connection on every exit path
- TLS and optional timeout settings per dialect
- Connection health checking
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Generator, Mapping, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.pool import NullPool

from config import GatewayConfig, config as app_config
from .dialects import Dialect, DialectDescriptor, get_dialect
from .errors import DatabaseConnectionError, ValidationError

logger = logging.getLogger(__name__)


def driver_message(exc: SQLAlchemyError) -> str:
    """Return the underlying driver's message for a SQLAlchemy error."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig).strip()
    return str(exc)


def _resolve_port(raw: Any, default: int) -> int:
    if raw is None or raw == "" or raw == 0:
        return default
    if isinstance(raw, bool):
        raise ValidationError("Port must be an integer")
    try:
        port = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Port must be an integer")
    if not 0 < port < 65536:
        raise ValidationError(f"Port out of range: {port}")
    return port


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Credentials and target for one external database.

    Constructed per request and never persisted. ``port`` is always
    resolved; an absent port becomes the dialect's default.
    """
    dialect: Dialect
    host: str
    user: str
    port: int
    password: str = ""
    database: str = ""
    use_tls: bool = False

    @property
    def descriptor(self) -> DialectDescriptor:
        return get_dialect(self.dialect)

    def validate(self) -> None:
        """Reject configs that must never reach the network."""
        if not self.host or not self.user:
            raise ValidationError("Host and user are required")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ConnectionConfig":
        """
        Build a config from a client payload.

        Accepts the wire field names: type, host, port, user, password,
        database, ssl.
        """
        dialect = Dialect.from_tag(payload.get("type"))
        descriptor = get_dialect(dialect)
        config = cls(
            dialect=dialect,
            host=str(payload.get("host") or "").strip(),
            user=str(payload.get("user") or "").strip(),
            port=_resolve_port(payload.get("port"), descriptor.default_port),
            password=str(payload.get("password") or ""),
            database=str(payload.get("database") or "").strip(),
            use_tls=bool(payload.get("ssl", False)),
        )
        config.validate()
        return config


class ConnectionManager:
    """
    Opens exactly one connection per request.

    There is no pool and no retry: each ``open`` creates an engine with
    ``NullPool``, connects once, and disposes the engine on the way out.
    """

    def __init__(
        self,
        gateway_config: Optional[GatewayConfig] = None,
        engine_factory: Callable[..., Engine] = create_engine,
    ):
        """
        Args:
            gateway_config: Timeouts and TLS CA. Uses global config if not provided.
            engine_factory: Engine constructor, replaceable for tests.
        """
        self.config = gateway_config or app_config.gateway
        self._engine_factory = engine_factory

    def _create_engine(self, config: ConnectionConfig) -> Engine:
        descriptor = config.descriptor
        connect_args = descriptor.connect_args(
            use_tls=config.use_tls,
            ssl_ca=self.config.ssl_ca,
            connect_timeout=self.config.connect_timeout,
            query_timeout=self.config.query_timeout,
        )
        return self._engine_factory(
            descriptor.build_url(config),
            poolclass=NullPool,
            connect_args=connect_args,
            echo=False,
            **descriptor.engine_options(),
        )

    @contextmanager
    def open(self, config: ConnectionConfig) -> Generator[Connection, None, None]:
        """
        Context manager for a single ephemeral connection.

        The connection is closed (rolling back anything uncommitted) and the
        engine disposed before control returns to the caller, whether the
        body succeeded or raised.

        Example:
            with manager.open(config) as conn:
                rows = conn.execute(text("SELECT 1")).fetchall()
        """
        config.validate()
        engine = self._create_engine(config)
        try:
            try:
                connection = engine.connect()
            except SQLAlchemyError as e:
                logger.error(f"{config.descriptor.label} connection to {config.host}:{config.port} failed: {e}")
                raise DatabaseConnectionError(driver_message(e)) from e

            try:
                yield connection
            finally:
                connection.close()
        finally:
            engine.dispose()

    def ping(self, connection: Connection) -> None:
        """Verify the connection with a trivial round trip."""
        try:
            row = connection.execute(text("SELECT 1 AS health_check")).fetchone()
        except SQLAlchemyError as e:
            logger.error(f"Connection health check failed: {e}")
            raise DatabaseConnectionError(driver_message(e)) from e
        if row is None or row[0] != 1:
            raise DatabaseConnectionError("Unexpected result from health check query")
