"""Storage key derivation and fetch-or-create of attribute records.

``RecordResolver.resolve`` never raises for store faults. It returns one of
three outcomes that callers match on:

- ``Found``: the latest stored version.
- ``NotFound``: nothing stored yet; carries a fresh, unpersisted record
  (empty text, private) scoped to the owner.
- ``Failed``: any other fault, wrapped in ``OperationFailed``.
"""

import logging
from dataclasses import dataclass
from typing import Union

from .errors import OperationFailed, RecordNotFound, UserInfoError
from .fields import Field
from .identity import Identity
from .models import AttributeRecord
from .store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "USER-INFORMATION_"


@dataclass(frozen=True)
class Found:
    record: AttributeRecord


@dataclass(frozen=True)
class NotFound:
    record: AttributeRecord


@dataclass(frozen=True)
class Failed:
    error: OperationFailed


Resolution = Union[Found, NotFound, Failed]


def storage_key(owner_id: str, field: Field | str, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Key of the record holding ``field`` for ``owner_id``.

    Field names never contain ``_``, so the suffix after the last ``_`` is
    always the field and keys cannot collide across owners.
    """
    name = field.value if isinstance(field, Field) else field
    return f"{prefix}{owner_id}_{name}"


class RecordResolver:
    """Maps (owner, field) to the record that backs it."""

    def __init__(self, store: RecordStore, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self.store = store
        self.key_prefix = key_prefix

    def storage_key(self, owner: Identity, field: Field | str) -> str:
        if owner.is_anonymous:
            raise ValueError("Anonymous identities do not own records")
        return storage_key(owner.id, field, self.key_prefix)

    def resolve(self, owner: Identity, field: Field | str) -> Resolution:
        if owner.is_anonymous:
            return Failed(OperationFailed("Anonymous identities do not own records"))

        key = self.storage_key(owner, field)
        try:
            record = self.store.fetch(key)
        except RecordNotFound:
            return NotFound(self.store.create_record(key, owner))
        except UserInfoError as e:
            logger.debug("Resolving %s failed: %s", key, e)
            error = OperationFailed(f"Cannot resolve '{key}': {e}")
            error.__cause__ = e
            return Failed(error)

        return Found(record)
