"""SQL module exports."""

from .validator import SQLValidator, ALLOWED_PREFIXES, get_sql_validator
from .generator import SQLGenerator, build_sql_prompt, extract_sql

__all__ = [
    "SQLValidator", "ALLOWED_PREFIXES", "get_sql_validator",
    "SQLGenerator", "build_sql_prompt", "extract_sql"
]
