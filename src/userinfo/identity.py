"""Caller and owner identities."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Owner:
    """A concrete identity that can own attribute records."""

    id: str

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("Owner id must be a non-empty string")

    @property
    def is_anonymous(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class Anonymous:
    """The distinguished unauthenticated identity. Never owns records."""

    @property
    def is_anonymous(self) -> bool:
        return True

    def __str__(self) -> str:
        return "anonymous"


ANONYMOUS = Anonymous()

Identity = Union[Owner, Anonymous]


def as_identity(value: "Identity | str | int | None") -> Identity:
    """Coerce an id (or None for anonymous) into an Identity."""
    if isinstance(value, (Owner, Anonymous)):
        return value
    if value is None:
        return ANONYMOUS
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise TypeError(f"Cannot build an identity from {type(value).__name__}")
    return Owner(str(value))
