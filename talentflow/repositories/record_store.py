"""
Record store interface.

The pipeline engine reads and writes through this surface only. Records are
plain dicts keyed by column name; failures are raised as StoreError with a
kind the callers can branch on.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


Record = Dict[str, Any]

# (field, descending)
OrderBy = Tuple[str, bool]

JOBS = "jobs"
CANDIDATES = "candidates"


class StoreErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONSTRAINT_VIOLATION = "constraint_violation"
    UNREACHABLE = "unreachable"


class StoreError(Exception):
    """Structured store failure."""

    def __init__(self, kind: StoreErrorKind, message: str, collection: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.collection = collection

    def __repr__(self) -> str:
        return f"StoreError({self.kind.value!r}, {self.message!r})"


class RecordStore(ABC):
    """
    Abstract CRUD/query surface over the jobs and candidates collections.

    filters map a field to a required value; a list, tuple or set value
    means "field is one of these values". order is a sequence of
    (field, descending) pairs applied left to right.
    """

    @abstractmethod
    async def list(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[Sequence[OrderBy]] = None,
    ) -> List[Record]:
        ...

    @abstractmethod
    async def get(self, collection: str, record_id: Any) -> Record:
        """Fetch one record or raise StoreError(NOT_FOUND)."""
        ...

    @abstractmethod
    async def insert(self, collection: str, record: Mapping[str, Any]) -> Record:
        """Insert one record and return it as stored (ids and timestamps filled)."""
        ...

    @abstractmethod
    async def update(self, collection: str, record_id: Any, changes: Mapping[str, Any]) -> Record:
        """Apply all changes in one write, or none of them."""
        ...

    async def count(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        return len(await self.list(collection, filters))
