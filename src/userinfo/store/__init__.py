"""Record store interface and implementations."""

from .base import RecordStore
from .memory import InMemoryRecordStore
from .sqlite import SQLiteRecordStore

__all__ = [
    "InMemoryRecordStore",
    "RecordStore",
    "SQLiteRecordStore",
]
