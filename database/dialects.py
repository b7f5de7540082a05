"""
Dialect descriptors - per-engine connection and catalog policy.

Each supported engine gets one descriptor that knows:
- its default port and SQLAlchemy driver
- how to list catalogs on a server
- how to introspect a database's columns and how to read the
  nullable / primary-key indicators out of that result
- which driver arguments carry TLS and timeout settings

The registry is built once at import time and is read-only afterwards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from sqlalchemy.engine import URL

from .cells import metadata_text
from .errors import ValidationError

if TYPE_CHECKING:
    from .connection import ConnectionConfig


class Dialect(Enum):
    """Supported database engines."""
    POSTGRES = "postgres"
    MYSQL = "mysql"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "Dialect":
        """
        Resolve the client-supplied ``type`` field.

        An absent or empty tag means the MySQL family.
        """
        normalized = (tag or "").strip().lower()
        if not normalized:
            return cls.MYSQL
        if normalized in _DIALECT_ALIASES:
            return _DIALECT_ALIASES[normalized]
        raise ValidationError(f"Unsupported database type: {tag}")


_DIALECT_ALIASES = {
    "postgres": Dialect.POSTGRES,
    "postgresql": Dialect.POSTGRES,
    "mysql": Dialect.MYSQL,
    "mariadb": Dialect.MYSQL,
}


def keep_json_text(raw: str) -> str:
    """JSON loader that leaves the document as the server sent it."""
    return raw


class DialectDescriptor(ABC):
    """Capability interface implemented once per dialect."""

    dialect: Dialect
    label: str
    drivername: str
    default_port: int
    list_catalogs_sql: str
    schema_sql: str
    primary_key_indicator: Any

    def build_url(self, config: "ConnectionConfig") -> URL:
        """Build the connection target from discrete fields."""
        return URL.create(
            self.drivername,
            username=config.user,
            password=config.password or None,
            host=config.host,
            port=config.port,
            database=config.database or None,
        )

    def schema_params(self, database: str) -> Dict[str, Any]:
        """Bound parameters for ``schema_sql``."""
        return {}

    def engine_options(self) -> Dict[str, Any]:
        """Extra ``create_engine`` keyword arguments for this dialect."""
        return {}

    def is_primary_key(self, raw: Any) -> bool:
        return raw == self.primary_key_indicator

    @abstractmethod
    def is_nullable(self, raw: Any) -> bool:
        pass

    @abstractmethod
    def connect_args(
        self,
        use_tls: bool,
        ssl_ca: Optional[str] = None,
        connect_timeout: int = 0,
        query_timeout: int = 0,
    ) -> Dict[str, Any]:
        pass


class PostgresDialect(DialectDescriptor):
    dialect = Dialect.POSTGRES
    label = "PostgreSQL"
    drivername = "postgresql+psycopg2"
    default_port = 5432
    primary_key_indicator = True

    list_catalogs_sql = (
        "SELECT datname FROM pg_database "
        "WHERE datname NOT IN ('postgres', 'template0', 'template1') "
        "ORDER BY datname"
    )

    schema_sql = """
        SELECT
            t.table_name AS table_name,
            c.column_name AS column_name,
            c.data_type AS data_type,
            c.is_nullable = 'YES' AS is_nullable,
            COALESCE(pk.is_primary_key, false) AS column_key
        FROM information_schema.columns c
        JOIN information_schema.tables t
            ON c.table_schema = t.table_schema AND c.table_name = t.table_name
        LEFT JOIN (
            SELECT a.attname AS column_name, rel.relname AS table_name, true AS is_primary_key
            FROM pg_index i
            JOIN pg_attribute a ON a.attrelid = i.indrelid AND a.attnum = ANY(i.indkey)
            JOIN pg_class rel ON rel.oid = i.indrelid
            JOIN pg_namespace n ON n.oid = rel.relnamespace
            WHERE i.indisprimary AND n.nspname = 'public'
        ) pk ON pk.column_name = c.column_name AND pk.table_name = c.table_name
        WHERE c.table_schema = 'public' AND t.table_schema = 'public'
        ORDER BY t.table_name, c.ordinal_position
    """

    def is_nullable(self, raw: Any) -> bool:
        return bool(raw)

    def engine_options(self) -> Dict[str, Any]:
        # SQLAlchemy registers json_deserializer as psycopg2's json/jsonb
        # loader on every new connection; hstore stays as server text too
        return {
            "json_deserializer": keep_json_text,
            "use_native_hstore": False,
        }

    def connect_args(
        self,
        use_tls: bool,
        ssl_ca: Optional[str] = None,
        connect_timeout: int = 0,
        query_timeout: int = 0,
    ) -> Dict[str, Any]:
        args: Dict[str, Any] = {}
        if use_tls and ssl_ca:
            args["sslmode"] = "verify-full"
            args["sslrootcert"] = ssl_ca
        elif use_tls:
            args["sslmode"] = "require"
        else:
            args["sslmode"] = "disable"

        if connect_timeout > 0:
            args["connect_timeout"] = connect_timeout
        if query_timeout > 0:
            args["options"] = f"-c statement_timeout={query_timeout * 1000}"
        return args


class MySQLDialect(DialectDescriptor):
    dialect = Dialect.MYSQL
    label = "MySQL"
    drivername = "mysql+pymysql"
    default_port = 3306
    primary_key_indicator = "PRI"

    list_catalogs_sql = "SHOW DATABASES"

    # Target database travels as a bound parameter, never inside the SQL text
    schema_sql = """
        SELECT
            TABLE_NAME AS table_name,
            COLUMN_NAME AS column_name,
            COLUMN_TYPE AS data_type,
            IS_NULLABLE AS is_nullable,
            COLUMN_KEY AS column_key
        FROM information_schema.COLUMNS
        WHERE TABLE_SCHEMA = :database
        ORDER BY TABLE_NAME, ORDINAL_POSITION
    """

    def schema_params(self, database: str) -> Dict[str, Any]:
        return {"database": database}

    def is_primary_key(self, raw: Any) -> bool:
        return metadata_text(raw) == self.primary_key_indicator

    def is_nullable(self, raw: Any) -> bool:
        return metadata_text(raw).upper() == "YES"

    def connect_args(
        self,
        use_tls: bool,
        ssl_ca: Optional[str] = None,
        connect_timeout: int = 0,
        query_timeout: int = 0,
    ) -> Dict[str, Any]:
        args: Dict[str, Any] = {}
        if use_tls and ssl_ca:
            args["ssl"] = {
                "ca": ssl_ca,
                "check_hostname": True,
                "verify_mode": True,
            }
        elif use_tls:
            # Encrypted, but without a CA there is nothing to verify against
            args["ssl"] = {"check_hostname": False}

        if connect_timeout > 0:
            args["connect_timeout"] = connect_timeout
        if query_timeout > 0:
            args["read_timeout"] = query_timeout
        return args


DIALECTS: Mapping[Dialect, DialectDescriptor] = MappingProxyType({
    Dialect.POSTGRES: PostgresDialect(),
    Dialect.MYSQL: MySQLDialect(),
})


def get_dialect(dialect: Dialect) -> DialectDescriptor:
    """Look up the descriptor for a dialect."""
    return DIALECTS[dialect]
