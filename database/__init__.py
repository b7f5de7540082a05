"""
Database module for the multi-dialect gateway.

Provides:
- Dialect descriptors for PostgreSQL and the MySQL family
- Ephemeral per-request connection management
- Schema introspection normalized across dialects
- Gated, read-only query execution
"""

from .cells import NULL_TEXT, CellKind, render_cell
from .connection import ConnectionConfig, ConnectionManager
from .dialects import Dialect, DialectDescriptor, get_dialect
from .errors import (
    GatewayError,
    ValidationError,
    DatabaseConnectionError,
    SecurityError,
    QueryError,
)
from .executor import QueryExecutor, QueryResult
from .gateway import DatabaseGateway
from .schema_introspector import (
    SchemaIntrospector,
    SchemaReport,
    SchemaTable,
    SchemaColumn,
)

__all__ = [
    "NULL_TEXT",
    "CellKind",
    "render_cell",
    "ConnectionConfig",
    "ConnectionManager",
    "Dialect",
    "DialectDescriptor",
    "get_dialect",
    "GatewayError",
    "ValidationError",
    "DatabaseConnectionError",
    "SecurityError",
    "QueryError",
    "QueryExecutor",
    "QueryResult",
    "DatabaseGateway",
    "SchemaIntrospector",
    "SchemaReport",
    "SchemaTable",
    "SchemaColumn",
]
