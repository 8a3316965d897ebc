"""
Snapshot Store Interface

🔒 The store enforces uniqueness on date: insert never overwrites, and always
returns the snapshot that is actually persisted for that date.
"""

from abc import ABC, abstractmethod
from typing import Any

from cnvtbot.models import RateSnapshot


class StoreError(Exception):
    """Persistence read/write failure."""

    def __init__(
        self,
        message: str,
        operation: str,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.operation = operation
        self.details = details or {}


class SnapshotStore(ABC):
    """Persistent rate snapshots keyed by calendar date."""

    @abstractmethod
    async def find_by_date(self, date: str) -> RateSnapshot | None:
        """Return the snapshot stored for `date`, or None."""
        pass

    @abstractmethod
    async def insert(self, snapshot: RateSnapshot) -> RateSnapshot:
        """
        Persist a new snapshot.

        If a snapshot for the same date already exists (a concurrent writer
        got there first) the stored one is returned and the argument is
        discarded.

        Raises:
            StoreError: If the write fails
        """
        pass

    async def health_check(self) -> bool:
        return True
