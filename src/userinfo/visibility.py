"""Inspect and toggle a record's read-access scope."""

import logging

from .errors import OperationFailed, UserInfoError
from .models import AttributeRecord, Visibility
from .store import RecordStore

logger = logging.getLogger(__name__)


class VisibilityController:
    """Moves records between PUBLIC and PRIVATE through the store's primitives."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def is_public(self, record: AttributeRecord) -> bool:
        return record.visibility is Visibility.PUBLIC

    def set_visibility(self, record: AttributeRecord, want_public: bool) -> AttributeRecord:
        """Apply the requested visibility and persist the new version.

        Returns the record unchanged, without writing a version, when it
        already has the requested visibility.

        Raises:
            OperationFailed: The store refused or failed the transition.
        """
        if self.is_public(record) == want_public:
            return record

        try:
            if want_public:
                updated = self.store.set_public_access(record)
            else:
                updated = self.store.restrict_to_owner(record)
            self.store.store(updated)
        except UserInfoError as e:
            raise OperationFailed(f"Cannot change visibility of '{record.key}': {e}") from e

        logger.info("%s is now %s", record.key, updated.visibility.value)
        return updated
