"""Catalog of the attribute fields this service manages."""

from enum import Enum
from typing import Any

from .errors import ValidationError


class Field(str, Enum):
    """Recognized attribute names. Values are always text."""

    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    USER_IMAGE = "userImage"  # reference to a file held by a file service


FIELD_NAMES = frozenset(f.value for f in Field)

_MISSING = object()


def is_valid(field_name: Any, value: Any = _MISSING) -> bool:
    """Check a field name and, on the write path, its value.

    Args:
        field_name: Name of the requested field.
        value: Value to be written. Leave out to check the name only.

    Returns:
        True if the name is recognized and the value (if given) is text.
    """
    if value is not _MISSING and not isinstance(value, str):
        return False
    return isinstance(field_name, str) and field_name in FIELD_NAMES


def validate(field_name: Any, value: Any = _MISSING) -> Field:
    """Like ``is_valid`` but returns the Field or raises.

    Raises:
        ValidationError: Unknown field name or non-text value.
    """
    if value is not _MISSING and not isinstance(value, str):
        raise ValidationError(
            f"Value for {field_name!r} must be text, got {type(value).__name__}"
        )
    if not is_valid(field_name):
        raise ValidationError(f"Unknown field {field_name!r}")
    return Field(field_name)
