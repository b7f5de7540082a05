"""
Dynamic Schema Introspection Module - Multi-Database Support.

Runs the dialect's canonical introspection statement and normalizes the two
incompatible information-schema shapes into one:
- every table in the target database
- every column with its declared type, nullability and primary-key flag

Columns keep the database's native ordinal order. Tables are aggregated by
name and emitted sorted by name, so repeated calls against an unmodified
schema return identical output.

NEVER hardcodes any table or column names.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from .cells import metadata_text
from .connection import driver_message
from .dialects import DialectDescriptor
from .errors import QueryError

logger = logging.getLogger(__name__)


@dataclass
class SchemaColumn:
    """Information about a single database column."""
    table_name: str
    name: str
    data_type: str
    nullable: bool
    is_primary_key: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.data_type,
            "nullable": self.nullable,
            "isPrimaryKey": self.is_primary_key,
        }


@dataclass
class SchemaTable:
    """A table and its columns in ordinal order."""
    name: str
    columns: List[SchemaColumn] = field(default_factory=list)

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "columns": [col.to_dict() for col in self.columns],
        }


@dataclass
class SchemaReport:
    """Introspection result: structured tables plus a text rendering."""
    tables: List[SchemaTable]
    formatted: str

    @property
    def table_names(self) -> List[str]:
        return [table.name for table in self.tables]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tables": [table.to_dict() for table in self.tables],
            "formatted": self.formatted,
        }


def group_columns(columns: List[SchemaColumn]) -> List[SchemaTable]:
    """
    Aggregate columns into tables keyed by table name.

    Input rows need not be contiguous per table. Column order within a table
    follows input order; tables come out sorted by name.
    """
    tables: Dict[str, SchemaTable] = {}
    for col in columns:
        table = tables.get(col.table_name)
        if table is None:
            table = tables[col.table_name] = SchemaTable(name=col.table_name)
        table.columns.append(col)
    return [tables[name] for name in sorted(tables)]


def format_schema(tables: List[SchemaTable]) -> str:
    """
    Render tables as the human-readable schema report.

    Output is a pure function of ``tables``.
    """
    lines = ["Database Schema:", ""]
    for table in tables:
        lines.append(f"Table: {table.name}")
        lines.append("  Columns:")
        for col in table.columns:
            pk_marker = " (PRIMARY KEY)" if col.is_primary_key else ""
            lines.append(f"    - {col.name} {col.data_type}{pk_marker}")
        lines.append("")
    return "\n".join(lines) + "\n"


class SchemaIntrospector:
    """
    Introspects one database through an already-open connection.

    The dialect descriptor supplies the statement, its parameters, and the
    interpretation of the nullable / primary-key indicators.
    """

    def __init__(self, descriptor: DialectDescriptor):
        self.descriptor = descriptor

    def introspect(self, connection: Connection, database: str) -> SchemaReport:
        """
        Perform schema introspection.

        Args:
            connection: Open connection to the target database
            database: Target database name (bound as a parameter where the
                dialect's statement needs it)

        Returns:
            SchemaReport with tables and the formatted text
        """
        logger.info(f"Starting {self.descriptor.label} schema introspection of {database}...")
        try:
            result = connection.execute(
                text(self.descriptor.schema_sql),
                self.descriptor.schema_params(database),
            )
            rows = result.mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"Error introspecting {database}: {e}")
            raise QueryError(driver_message(e)) from e

        columns = [self._to_column(row) for row in rows]
        tables = group_columns(columns)

        logger.info(f"Schema introspection complete. Found {len(tables)} tables.")
        return SchemaReport(tables=tables, formatted=format_schema(tables))

    def _to_column(self, row: Any) -> SchemaColumn:
        return SchemaColumn(
            table_name=metadata_text(row["table_name"]),
            name=metadata_text(row["column_name"]),
            data_type=metadata_text(row["data_type"]),
            nullable=self.descriptor.is_nullable(row["is_nullable"]),
            is_primary_key=self.descriptor.is_primary_key(row["column_key"]),
        )
