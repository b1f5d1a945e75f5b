"""Tests for VisibilityController."""

from unittest.mock import MagicMock

import pytest

from userinfo import (
    InMemoryRecordStore,
    OperationFailed,
    Owner,
    RecordStore,
    StorageError,
    Visibility,
    VisibilityController,
    acting_as,
)

KEY = "USER-INFORMATION_bart_firstName"


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def stored(store: InMemoryRecordStore):
    """A private record stored for bart."""
    record = store.create_version(store.create_record(KEY, Owner("bart")), "Bart")
    with acting_as("bart"):
        store.store(record)
    return record


class TestVisibilityController:
    """Tests for is_public / set_visibility."""

    def test_private_by_default(self, store: InMemoryRecordStore, stored):
        """Stored records start private."""
        assert not VisibilityController(store).is_public(stored)

    def test_make_public(self, store: InMemoryRecordStore, stored):
        """Switching to public stores a new version with the same value."""
        controller = VisibilityController(store)
        with acting_as("bart"):
            updated = controller.set_visibility(stored, True)
        assert controller.is_public(updated)
        assert updated.value == "Bart"
        assert store.fetch(KEY).visibility is Visibility.PUBLIC
        assert len(store.history(KEY)) == 2

    def test_make_private_again(self, store: InMemoryRecordStore, stored):
        """Switching back restricts reads to the owner."""
        controller = VisibilityController(store)
        with acting_as("bart"):
            public = controller.set_visibility(stored, True)
            private = controller.set_visibility(public, False)
        assert not controller.is_public(private)
        assert len(store.history(KEY)) == 3

    def test_same_visibility_is_noop(self, store: InMemoryRecordStore, stored):
        """Requesting the current visibility writes nothing."""
        controller = VisibilityController(store)
        with acting_as("bart"):
            result = controller.set_visibility(stored, False)
        assert result is stored
        assert len(store.history(KEY)) == 1

    def test_non_owner_fails(self, store: InMemoryRecordStore, stored):
        """Store refusals surface as OperationFailed."""
        controller = VisibilityController(store)
        with acting_as("lisa"):
            with pytest.raises(OperationFailed):
                controller.set_visibility(stored, True)
        assert len(store.history(KEY)) == 1

    def test_store_error_not_retried(self, stored):
        """A failing store is called once and the error wrapped."""
        store = MagicMock(spec=RecordStore)
        store.set_public_access.return_value = stored
        store.store.side_effect = StorageError("unreachable")
        with pytest.raises(OperationFailed, match="unreachable"):
            VisibilityController(store).set_visibility(stored, True)
        store.store.assert_called_once()
