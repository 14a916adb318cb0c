"""
Abstract interface for the record store.

Records are untyped mappings grouped into named collections. Each record
carries an opaque string ``id`` and a ``created_at`` timestamp set by the
store on insert.
"""

from abc import ABC, abstractmethod
from typing import Any


class IRecordStore(ABC):
    """
    Abstract interface for generic record persistence.

    Filters are equality maps; a list or tuple value means "field IN values".
    """

    @abstractmethod
    async def fetch_all(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch all records of a collection matching the filters, newest first."""
        pass

    @abstractmethod
    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Get a single record by id."""
        pass

    @abstractmethod
    async def insert(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a record and return it with ``id`` and ``created_at`` filled in."""
        pass

    @abstractmethod
    async def update(
        self,
        collection: str,
        record_id: str,
        patch: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Merge ``patch`` into a record and return the stored result.

        Raises:
            RecordNotFoundError: If the record does not exist.
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
        pass
