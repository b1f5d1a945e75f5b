"""Exception hierarchy for the attribute store."""


class UserInfoError(Exception):
    """Base class for all attribute store errors."""


class ValidationError(UserInfoError):
    """Unrecognized field name or wrong value type."""


class RecordNotFound(UserInfoError):
    """No record is stored under the requested key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"No record stored under '{key}'")
        self.key = key


class AccessDenied(UserInfoError):
    """The calling identity lacks read or write rights on a record."""


class StorageError(UserInfoError):
    """The backing store failed to read or persist a record."""


class SerializationError(StorageError):
    """A stored record could not be decoded."""


class OperationFailed(UserInfoError):
    """A store fault crossed the resolver or visibility boundary.

    The original store error is kept as ``__cause__``.
    """
