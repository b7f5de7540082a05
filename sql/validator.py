"""
SQL Validator - Read-only statement gate.

Accepts a statement only when its trimmed, upper-cased text begins with one
of the allowed leading keywords. The trimmed statement, in its original
casing, is what gets executed; the upper-cased copy is used for comparison
only.

This is a prefix check, not a parser. A statement that looks read-only can
still mutate through a data-modifying CTE (``WITH d AS (DELETE ...)``) or a
side-effecting function call. Those are residual risks of the gate.
"""

import logging
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


ALLOWED_PREFIXES: Tuple[str, ...] = ("SELECT", "SHOW", "DESCRIBE", "EXPLAIN", "WITH")


class SQLValidator:
    """Validates SQL statements against the leading-keyword allowlist."""

    def __init__(self, allowed_prefixes: Iterable[str] = ALLOWED_PREFIXES):
        self.allowed_prefixes = tuple(p.upper() for p in allowed_prefixes)

    @property
    def rejection_message(self) -> str:
        return f"Only {', '.join(self.allowed_prefixes)} queries are allowed"

    def validate(self, sql: str) -> Tuple[bool, str, Optional[str]]:
        """
        Validate SQL statement against the allowlist.

        Returns:
            Tuple of (is_valid, message, statement) where statement has
            surrounding whitespace removed and its casing intact
        """
        if not sql or not sql.strip():
            return False, "Empty SQL query", None

        statement = sql.strip()
        if not statement.upper().startswith(self.allowed_prefixes):
            logger.warning(f"Rejected statement with disallowed prefix: {statement[:40]!r}")
            return False, self.rejection_message, None

        return True, "Query validated successfully", statement


_validator: Optional[SQLValidator] = None


def get_sql_validator() -> SQLValidator:
    global _validator
    if _validator is None:
        _validator = SQLValidator()
    return _validator
