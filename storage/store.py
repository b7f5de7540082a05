"""
Metadata Store - startup wiring for history and the prompt library.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from config import MetadataDBConfig
from .connection import MetadataDatabase, StorageError
from .history import HistoryRepository
from .prompts import PromptRepository

logger = logging.getLogger(__name__)


@dataclass
class MetadataStore:
    db: MetadataDatabase
    history: HistoryRepository
    prompts: PromptRepository

    def close(self) -> None:
        self.db.close()


def init_metadata_store(
    db_config: Optional[MetadataDBConfig] = None,
    db: Optional[MetadataDatabase] = None,
) -> MetadataStore:
    """
    Connect to the metadata store and create its tables.

    Raises:
        StorageError: if the store is unreachable or the DDL fails
    """
    db = db or MetadataDatabase(db_config)
    ok, message = db.test_connection()
    if not ok:
        raise StorageError(message)
    logger.info(message)

    store = MetadataStore(db=db, history=HistoryRepository(db), prompts=PromptRepository(db))
    store.history.ensure_tables()
    store.prompts.ensure_tables()
    return store
