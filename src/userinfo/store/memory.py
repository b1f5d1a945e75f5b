"""In-process record store."""

import threading
from dataclasses import replace
from datetime import datetime, timezone

from ..errors import RecordNotFound, StorageError
from ..models import AttributeRecord
from .base import RecordStore


class InMemoryRecordStore(RecordStore):
    """Keeps every version in a dict, latest last. Nothing survives the process."""

    def __init__(self) -> None:
        self._versions: dict[str, list[AttributeRecord]] = {}
        self._lock = threading.Lock()

    def fetch(self, key: str) -> AttributeRecord:
        with self._lock:
            versions = self._versions.get(key)
            if not versions:
                raise RecordNotFound(key)
            record = versions[-1]
        self._check_readable(record)
        return record

    def store(self, record: AttributeRecord) -> None:
        self._check_writable(record)
        with self._lock:
            versions = self._versions.setdefault(record.key, [])
            latest = versions[-1].version if versions else None
            if record.previous_version != latest:
                raise StorageError(
                    f"Version conflict on '{record.key}': expected predecessor "
                    f"{latest}, got {record.previous_version}"
                )
            versions.append(
                replace(record, created_at=datetime.now(timezone.utc).isoformat())
            )

    def history(self, key: str) -> list[AttributeRecord]:
        """All stored versions under ``key``, oldest first. No access checks."""
        with self._lock:
            return list(self._versions.get(key, []))
