"""Data models for attribute records."""

from dataclasses import dataclass
from enum import Enum

from .identity import Identity


class Visibility(Enum):
    """Read-access scope of a record."""

    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def from_flag(cls, is_public: bool) -> "Visibility":
        return cls.PUBLIC if is_public else cls.PRIVATE


@dataclass(frozen=True)
class AttributeRecord:
    """One version of the value stored for an (owner, field) pair.

    Attributes:
        key: Storage key the record lives under.
        owner: Identity allowed to write the record.
        value: Current text value.
        visibility: PUBLIC or PRIVATE.
        version: Version number, 0 for a record that was never stored.
        previous_version: Version this one supersedes, None for the first.
        created_at: ISO timestamp set by the store when persisted.
    """

    key: str
    owner: Identity
    value: str = ""
    visibility: Visibility = Visibility.PRIVATE
    version: int = 0
    previous_version: int | None = None
    created_at: str | None = None

    @property
    def is_persisted(self) -> bool:
        return self.version > 0
