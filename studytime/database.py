"""Record store lifecycle for the running application."""
import logging
from typing import Optional

from studytime.store import InMemoryRecordStore, RecordStore

logger = logging.getLogger(__name__)


class Database:
    """Holds the process's record store between startup and shutdown."""

    store: Optional[RecordStore] = None

    def connect(self) -> None:
        """Create a fresh in-memory store."""
        self.store = InMemoryRecordStore()
        logger.info("Record store ready (in-memory)")

    def disconnect(self) -> None:
        """Drop the store; everything recorded is lost."""
        if self.store is not None:
            self.store = None
            logger.info("Record store released")


# Global database instance
database = Database()


def get_database() -> RecordStore:
    """Dependency to get the record store."""
    if database.store is None:
        raise RuntimeError("Record store not connected")
    return database.store
