"""
Cell rendering for result sets of unknown shape.

A cell is classified into one kind when it is read, and each kind has
exactly one text rendering. Unforeseen driver types fall through to
SCALAR and render with ``str()``.

psycopg2 hands back some PostgreSQL values as Python structures. Those are
rendered the way the server prints them:
- boolean as ``true`` / ``false``
- arrays as array literals (``{x,y}``, ``{{1,2},{3,4}}``)
- JSON documents as JSON text
"""

import json
from enum import Enum
from typing import Any, Sequence

# Text shown for SQL NULL. Stable across executions and dialects.
NULL_TEXT = "NULL"

BINARY_TYPES = (bytes, bytearray, memoryview)
ARRAY_TYPES = (list, tuple)

# Array elements containing any of these (or whitespace) are double-quoted
_ARRAY_SPECIAL_CHARS = frozenset('{},"\\')


class CellKind(Enum):
    TEXT = "text"
    BINARY = "binary"
    NULL = "null"
    BOOLEAN = "boolean"
    ARRAY = "array"
    DOCUMENT = "document"
    SCALAR = "scalar"


def classify_cell(value: Any) -> CellKind:
    if value is None:
        return CellKind.NULL
    if isinstance(value, str):
        return CellKind.TEXT
    if isinstance(value, BINARY_TYPES):
        return CellKind.BINARY
    # bool before SCALAR: bool is an int
    if isinstance(value, bool):
        return CellKind.BOOLEAN
    if isinstance(value, ARRAY_TYPES):
        return CellKind.ARRAY
    if isinstance(value, dict):
        return CellKind.DOCUMENT
    return CellKind.SCALAR


def decode_bytes(value: Any) -> str:
    """Decode a byte sequence as raw text; invalid UTF-8 becomes U+FFFD."""
    return bytes(value).decode("utf-8", errors="replace")


def _quote_array_element(text: str) -> str:
    needs_quotes = (
        text == ""
        or text.upper() == NULL_TEXT
        or any(ch in _ARRAY_SPECIAL_CHARS or ch.isspace() for ch in text)
    )
    if not needs_quotes:
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_array(values: Sequence[Any]) -> str:
    """Render a (possibly nested) sequence as a PostgreSQL array literal."""
    parts = []
    for value in values:
        if value is None:
            parts.append(NULL_TEXT)
        elif isinstance(value, ARRAY_TYPES):
            parts.append(render_array(value))
        elif isinstance(value, bool):
            parts.append("t" if value else "f")
        else:
            parts.append(_quote_array_element(render_cell(value)))
    return "{" + ",".join(parts) + "}"


def render_cell(value: Any) -> str:
    """Render any driver value as display text."""
    kind = classify_cell(value)
    if kind is CellKind.NULL:
        return NULL_TEXT
    if kind is CellKind.TEXT:
        return value
    if kind is CellKind.BINARY:
        return decode_bytes(value)
    if kind is CellKind.BOOLEAN:
        return "true" if value else "false"
    if kind is CellKind.ARRAY:
        return render_array(value)
    if kind is CellKind.DOCUMENT:
        return json.dumps(value, default=str)
    return str(value)


def metadata_text(value: Any) -> str:
    """Like ``render_cell`` but an absent catalog value is the empty string."""
    if value is None:
        return ""
    return render_cell(value)
