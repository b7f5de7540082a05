"""
Storage module for the service's own metadata.

Provides:
- A pooled metadata store engine (PostgreSQL, MySQL or SQLite)
- Tool history persistence
- The prompt library
"""

from .connection import MetadataDatabase, StorageError, NotFoundError
from .history import HistoryRepository, ToolHistory
from .prompts import PromptRepository, Prompt
from .store import MetadataStore, init_metadata_store

__all__ = [
    "MetadataDatabase",
    "StorageError",
    "NotFoundError",
    "HistoryRepository",
    "ToolHistory",
    "PromptRepository",
    "Prompt",
    "MetadataStore",
    "init_metadata_store",
]
