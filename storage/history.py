"""
Tool History - persisted inputs and outputs of tool runs.

Supports PostgreSQL, MySQL, and SQLite with dialect-specific DDL.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from config import MetadataDBType
from .connection import MetadataDatabase, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


def get_history_table_ddl(db_type: MetadataDBType) -> List[str]:
    """Get the DDL for the history table based on database type."""
    if db_type == MetadataDBType.POSTGRESQL:
        return [
            """
            CREATE TABLE IF NOT EXISTS tool_history (
                id BIGSERIAL PRIMARY KEY,
                tool_name VARCHAR(100) NOT NULL,
                input_data JSONB,
                output_data JSONB,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_tool_history_tool ON tool_history(tool_name, created_at)",
        ]
    elif db_type == MetadataDBType.SQLITE:
        return [
            """
            CREATE TABLE IF NOT EXISTS tool_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                tool_name TEXT NOT NULL,
                input_data TEXT,
                output_data TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_tool_history_tool ON tool_history(tool_name, created_at)",
        ]
    else:  # MySQL
        return [
            """
            CREATE TABLE IF NOT EXISTS tool_history (
                id BIGINT AUTO_INCREMENT PRIMARY KEY,
                tool_name VARCHAR(100) NOT NULL,
                input_data JSON,
                output_data JSON,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                INDEX idx_tool_history_tool (tool_name, created_at)
            )
            """,
        ]


def _load_json(value: Any) -> Any:
    # JSONB comes back decoded from psycopg2; TEXT/JSON columns come back as str
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    return value


def _timestamp(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


@dataclass
class ToolHistory:
    id: int
    tool_name: str
    input_data: Any = None
    output_data: Any = None
    created_at: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "tool_name": self.tool_name,
            "input_data": self.input_data,
            "output_data": self.output_data,
            "created_at": _timestamp(self.created_at),
        }


class HistoryRepository:
    """Stores and retrieves tool history records."""

    def __init__(self, db: MetadataDatabase):
        self.db = db

    def ensure_tables(self) -> None:
        for ddl in get_history_table_ddl(self.db.db_type):
            self.db.execute_write(ddl)

    def save(self, tool_name: str, input_data: Any = None, output_data: Any = None) -> int:
        """Persist one history entry. Returns its id."""
        history_id = self.db.execute_insert(
            """
            INSERT INTO tool_history (tool_name, input_data, output_data)
            VALUES (:tool_name, :input_data, :output_data)
            """,
            {
                "tool_name": tool_name,
                "input_data": json.dumps(input_data),
                "output_data": json.dumps(output_data),
            },
        )
        logger.debug(f"Saved history {history_id} for {tool_name}")
        return history_id

    def list_for_tool(self, tool_name: str, limit: int = DEFAULT_HISTORY_LIMIT) -> List[ToolHistory]:
        """Most recent entries for a tool, newest first."""
        if limit <= 0:
            limit = DEFAULT_HISTORY_LIMIT

        rows = self.db.execute_query(
            """
            SELECT id, tool_name, input_data, output_data, created_at
            FROM tool_history
            WHERE tool_name = :tool_name
            ORDER BY created_at DESC, id DESC
            LIMIT :limit
            """,
            {"tool_name": tool_name, "limit": limit},
        )
        return [
            ToolHistory(
                id=row["id"],
                tool_name=row["tool_name"],
                input_data=_load_json(row["input_data"]),
                output_data=_load_json(row["output_data"]),
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def delete(self, history_id: int) -> None:
        deleted = self.db.execute_write(
            "DELETE FROM tool_history WHERE id = :id", {"id": history_id}
        )
        if deleted == 0:
            raise NotFoundError(f"History entry {history_id} not found")

    def clear(self, tool_name: str) -> int:
        """Delete every entry for a tool. Returns how many were removed."""
        deleted = self.db.execute_write(
            "DELETE FROM tool_history WHERE tool_name = :tool_name", {"tool_name": tool_name}
        )
        logger.info(f"Cleared {deleted} history entries for {tool_name}")
        return deleted
