"""Interface of the versioned, access-controlled record store."""

from abc import ABC, abstractmethod
from dataclasses import replace

from ..context import current_caller
from ..errors import AccessDenied
from ..identity import Identity
from ..models import AttributeRecord, Visibility


class RecordStore(ABC):
    """Base interface for record stores.

    Subclasses implement ``fetch`` and ``store``. Version chaining and the
    visibility primitives are shared. Every check reads the caller from the
    invocation context.
    """

    @abstractmethod
    def fetch(self, key: str) -> AttributeRecord:
        """Return the latest version stored under ``key``.

        Raises:
            RecordNotFound: Nothing is stored under the key.
            AccessDenied: The record is private and the caller is not its owner.
            StorageError: The store could not be read.
        """
        ...

    @abstractmethod
    def store(self, record: AttributeRecord) -> None:
        """Persist a record version.

        Raises:
            AccessDenied: The caller is not the record's owner.
            StorageError: The predecessor is stale or the write failed.
        """
        ...

    def create_record(self, key: str, owner: Identity) -> AttributeRecord:
        """Build an unpersisted, private, empty record for ``owner``."""
        return AttributeRecord(key=key, owner=owner)

    def create_version(self, previous: AttributeRecord, new_text: str) -> AttributeRecord:
        """Build the version that supersedes ``previous`` with a new value."""
        return self._next_version(previous, value=new_text)

    def is_encrypted(self, record: AttributeRecord) -> bool:
        """Whether reads of the record are restricted to its owner."""
        return record.visibility is Visibility.PRIVATE

    def set_public_access(self, record: AttributeRecord) -> AttributeRecord:
        """New version of ``record`` readable by anyone."""
        return self._next_version(record, visibility=Visibility.PUBLIC)

    def restrict_to_owner(self, record: AttributeRecord) -> AttributeRecord:
        """New version of ``record`` readable by its owner only."""
        return self._next_version(record, visibility=Visibility.PRIVATE)

    def _next_version(self, previous: AttributeRecord, **changes) -> AttributeRecord:
        return replace(
            previous,
            version=previous.version + 1,
            previous_version=previous.version if previous.is_persisted else None,
            created_at=None,
            **changes,
        )

    def _check_readable(self, record: AttributeRecord) -> None:
        if self.is_encrypted(record) and current_caller() != record.owner:
            raise AccessDenied(f"'{record.key}' is readable by its owner only")

    def _check_writable(self, record: AttributeRecord) -> None:
        caller = current_caller()
        if caller.is_anonymous:
            raise AccessDenied("Data cannot be stored for anonymous")
        if caller != record.owner:
            raise AccessDenied(f"'{record.key}' can only be written by its owner")
