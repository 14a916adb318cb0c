"""Storage infrastructure implementations."""

from scoutboard.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteRecordStore,
    close_pool,
    get_pool,
    get_record_store,
)

__all__ = [
    "ConnectionPool",
    "SQLiteRecordStore",
    "get_pool",
    "close_pool",
    "get_record_store",
]
