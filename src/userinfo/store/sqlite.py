"""SQLite storage for attribute records."""

import logging
import sqlite3
import threading
from pathlib import Path

from ..errors import RecordNotFound, SerializationError, StorageError
from ..identity import Owner
from ..models import AttributeRecord, Visibility
from .base import RecordStore

logger = logging.getLogger(__name__)

_COLUMNS = "key, version, previous_version, owner_id, value, visibility, created_at"


class SQLiteRecordStore(RecordStore):
    """Persistent record storage using SQLite.

    Every version is kept as its own row; the row with the highest version
    for a key is the one ``fetch`` returns.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the versions table if it doesn't exist."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS attribute_versions (
                key              TEXT NOT NULL,
                version          INTEGER NOT NULL,
                previous_version INTEGER,
                owner_id         TEXT NOT NULL,
                value            TEXT NOT NULL,
                visibility       TEXT NOT NULL,
                created_at       TEXT NOT NULL DEFAULT (datetime('now')),
                PRIMARY KEY (key, version)
            )
        """)
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_attribute_versions_key "
            "ON attribute_versions(key)"
        )
        conn.commit()

    def fetch(self, key: str) -> AttributeRecord:
        try:
            with self._lock:
                row = self._get_connection().execute(
                    f"SELECT {_COLUMNS} FROM attribute_versions "
                    "WHERE key = ? ORDER BY version DESC LIMIT 1",
                    (key,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read '{key}': {e}") from e

        if row is None:
            raise RecordNotFound(key)

        record = self._row_to_record(row)
        self._check_readable(record)
        return record

    def store(self, record: AttributeRecord) -> None:
        self._check_writable(record)
        try:
            with self._lock:
                conn = self._get_connection()
                with conn:
                    latest = conn.execute(
                        "SELECT MAX(version) FROM attribute_versions WHERE key = ?",
                        (record.key,),
                    ).fetchone()[0]
                    if record.previous_version != latest:
                        raise StorageError(
                            f"Version conflict on '{record.key}': expected predecessor "
                            f"{latest}, got {record.previous_version}"
                        )
                    conn.execute(
                        """
                        INSERT INTO attribute_versions
                            (key, version, previous_version, owner_id, value, visibility)
                        VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        (
                            record.key,
                            record.version,
                            record.previous_version,
                            record.owner.id,
                            record.value,
                            record.visibility.value,
                        ),
                    )
        except sqlite3.Error as e:
            raise StorageError(f"Cannot store '{record.key}': {e}") from e

        logger.debug("Stored %s version %d", record.key, record.version)

    def history(self, key: str) -> list[AttributeRecord]:
        """Get every stored version under a key, oldest first.

        No access checks are applied; this is an operator view.

        Args:
            key: Storage key.

        Returns:
            List of records, empty if nothing is stored.
        """
        try:
            with self._lock:
                rows = self._get_connection().execute(
                    f"SELECT {_COLUMNS} FROM attribute_versions "
                    "WHERE key = ? ORDER BY version",
                    (key,),
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read '{key}': {e}") from e
        return [self._row_to_record(row) for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _row_to_record(self, row: sqlite3.Row) -> AttributeRecord:
        """Convert a database row to an AttributeRecord."""
        try:
            return AttributeRecord(
                key=row["key"],
                owner=Owner(row["owner_id"]),
                value=row["value"],
                visibility=Visibility(row["visibility"]),
                version=row["version"],
                previous_version=row["previous_version"],
                created_at=row["created_at"],
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Corrupt row for '{row['key']}': {e}") from e
