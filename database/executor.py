"""
Query Executor - Gated execution with a generic result scan.

Runs caller-supplied literal SQL that passed the read-only gate and marshals
whatever comes back (unknown column count, unknown driver types) into
tab-separated text rows.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from sql.validator import SQLValidator, get_sql_validator
from .cells import render_cell
from .connection import driver_message
from .errors import QueryError, SecurityError

logger = logging.getLogger(__name__)

# Reserved field separator for header and rows
FIELD_SEPARATOR = "\t"


@dataclass
class QueryResult:
    """Materialized result set rendered as text."""
    columns: List[str] = field(default_factory=list)
    rows: List[str] = field(default_factory=list)

    @property
    def header(self) -> str:
        return FIELD_SEPARATOR.join(self.columns)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": self.rows,
            "header": self.header,
            "rowCount": self.row_count,
            "hasTabs": True,
        }


def render_row(values: Sequence[Any]) -> str:
    return FIELD_SEPARATOR.join(render_cell(value) for value in values)


class QueryExecutor:
    """Executes read-only statements against an open connection."""

    def __init__(self, validator: Optional[SQLValidator] = None):
        self.validator = validator or get_sql_validator()

    def check(self, statement: str) -> str:
        """
        Apply the statement gate. Call before opening a connection.

        Returns the statement with surrounding whitespace trimmed and its
        casing intact; this is the text that gets executed.
        """
        is_valid, message, sql = self.validator.validate(statement)
        if not is_valid:
            raise SecurityError(message)
        return sql

    def execute(self, connection: Connection, statement: str) -> QueryResult:
        """
        Execute a statement and render its result set.

        The trimmed statement returned by check() is sent as literal SQL
        with no bound parameters, so colons and percent signs in it reach
        the database untouched.

        Raises:
            SecurityError: statement fails the gate (nothing is executed)
            QueryError: the database rejected or failed the statement
        """
        sql = self.check(statement)

        try:
            result = connection.execution_options(no_parameters=True).exec_driver_sql(sql)
            if not result.returns_rows:
                result.close()
                return QueryResult()
            columns = [str(name) for name in result.keys()]
            raw_rows = result.fetchall()
        except SQLAlchemyError as e:
            logger.error(f"Query execution failed: {e}")
            raise QueryError(driver_message(e)) from e

        rows = [render_row(row) for row in raw_rows]
        logger.info(f"Query returned {len(rows)} rows across {len(columns)} columns")
        return QueryResult(columns=columns, rows=rows)
