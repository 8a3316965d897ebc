"""
CNVTBOT Snapshot Storage Module
"""

from cnvtbot.storage.base import SnapshotStore, StoreError
from cnvtbot.storage.postgres import PostgresSnapshotStore

__all__ = [
    "SnapshotStore",
    "StoreError",
    "PostgresSnapshotStore",
]
