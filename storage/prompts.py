"""
Prompt Library - reusable prompts with tags and usage counts.

Tags are stored as a JSON array so the same table works on every
supported backend; tag filtering happens after the SQL search.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from config import MetadataDBType
from .connection import MetadataDatabase, NotFoundError
from .history import _load_json, _timestamp

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_LIMIT = 100


def get_prompts_table_ddl(db_type: MetadataDBType) -> List[str]:
    """Get the DDL for the prompts table based on database type."""
    if db_type == MetadataDBType.POSTGRESQL:
        return [
            """
            CREATE TABLE IF NOT EXISTS prompts (
                id BIGSERIAL PRIMARY KEY,
                title VARCHAR(255) NOT NULL,
                content TEXT NOT NULL,
                tags JSONB NOT NULL DEFAULT '[]',
                use_count INT NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_prompts_created ON prompts(created_at)",
        ]
    elif db_type == MetadataDBType.SQLITE:
        return [
            """
            CREATE TABLE IF NOT EXISTS prompts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                tags TEXT NOT NULL DEFAULT '[]',
                use_count INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_prompts_created ON prompts(created_at)",
        ]
    else:  # MySQL
        return [
            """
            CREATE TABLE IF NOT EXISTS prompts (
                id BIGINT AUTO_INCREMENT PRIMARY KEY,
                title VARCHAR(255) NOT NULL,
                content TEXT NOT NULL,
                tags JSON NOT NULL,
                use_count INT NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
                INDEX idx_prompts_created (created_at)
            )
            """,
        ]


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Strip blanks and duplicates, keeping first-seen order."""
    cleaned = [str(t).strip() for t in (tags or [])]
    return list(dict.fromkeys(t for t in cleaned if t))


@dataclass
class Prompt:
    id: int
    title: str
    content: str
    tags: List[str] = field(default_factory=list)
    use_count: int = 0
    created_at: Any = None
    updated_at: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": self.tags,
            "use_count": self.use_count,
            "created_at": _timestamp(self.created_at),
            "updated_at": _timestamp(self.updated_at),
        }


_SELECT_PROMPT = "SELECT id, title, content, tags, use_count, created_at, updated_at FROM prompts"


class PromptRepository:
    """CRUD for the prompt library."""

    def __init__(self, db: MetadataDatabase):
        self.db = db

    def ensure_tables(self) -> None:
        for ddl in get_prompts_table_ddl(self.db.db_type):
            self.db.execute_write(ddl)

    @staticmethod
    def _to_prompt(row: Dict[str, Any]) -> Prompt:
        return Prompt(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            tags=list(_load_json(row["tags"]) or []),
            use_count=int(row["use_count"] or 0),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def create(self, title: str, content: str, tags: Optional[Iterable[str]] = None) -> Prompt:
        prompt_id = self.db.execute_insert(
            "INSERT INTO prompts (title, content, tags) VALUES (:title, :content, :tags)",
            {"title": title, "content": content, "tags": json.dumps(normalize_tags(tags))},
        )
        logger.info(f"Created prompt {prompt_id}: {title}")
        return self.get(prompt_id)

    def get(self, prompt_id: int) -> Prompt:
        rows = self.db.execute_query(f"{_SELECT_PROMPT} WHERE id = :id", {"id": prompt_id})
        if not rows:
            raise NotFoundError(f"Prompt {prompt_id} not found")
        return self._to_prompt(rows[0])

    def search(
        self,
        search: str = "",
        tags: Optional[Iterable[str]] = None,
        limit: int = DEFAULT_PROMPT_LIMIT,
    ) -> List[Prompt]:
        """
        List prompts, newest first.

        Args:
            search: Case-insensitive substring matched against title or content
            tags: Keep prompts carrying at least one of these tags
            limit: Maximum number of prompts returned
        """
        if limit <= 0:
            limit = DEFAULT_PROMPT_LIMIT
        wanted = set(normalize_tags(tags))

        query = f"{_SELECT_PROMPT} WHERE 1=1"
        params: Dict[str, Any] = {}
        if search:
            query += " AND (LOWER(title) LIKE :pattern OR LOWER(content) LIKE :pattern)"
            params["pattern"] = f"%{search.lower()}%"
        query += " ORDER BY created_at DESC, id DESC"
        if not wanted:
            query += " LIMIT :limit"
            params["limit"] = limit

        prompts = [self._to_prompt(row) for row in self.db.execute_query(query, params)]
        if wanted:
            prompts = [p for p in prompts if wanted.intersection(p.tags)][:limit]
        return prompts

    def update(self, prompt_id: int, title: str, content: str, tags: Optional[Iterable[str]] = None) -> None:
        updated = self.db.execute_write(
            """
            UPDATE prompts
            SET title = :title, content = :content, tags = :tags, updated_at = CURRENT_TIMESTAMP
            WHERE id = :id
            """,
            {
                "id": prompt_id,
                "title": title,
                "content": content,
                "tags": json.dumps(normalize_tags(tags)),
            },
        )
        if updated == 0:
            raise NotFoundError(f"Prompt {prompt_id} not found")

    def delete(self, prompt_id: int) -> None:
        deleted = self.db.execute_write("DELETE FROM prompts WHERE id = :id", {"id": prompt_id})
        if deleted == 0:
            raise NotFoundError(f"Prompt {prompt_id} not found")

    def increment_use_count(self, prompt_id: int) -> None:
        updated = self.db.execute_write(
            "UPDATE prompts SET use_count = use_count + 1 WHERE id = :id", {"id": prompt_id}
        )
        if updated == 0:
            raise NotFoundError(f"Prompt {prompt_id} not found")

    def all_tags(self) -> List[str]:
        """Every distinct tag in use, sorted."""
        rows = self.db.execute_query("SELECT tags FROM prompts")
        tags = set()
        for row in rows:
            tags.update(_load_json(row["tags"]) or [])
        return sorted(tags)
