"""Per-identity user information with per-field visibility control."""

from .context import acting_as, current_caller
from .errors import (
    AccessDenied,
    OperationFailed,
    RecordNotFound,
    SerializationError,
    StorageError,
    UserInfoError,
    ValidationError,
)
from .fields import Field, is_valid, validate
from .identity import ANONYMOUS, Anonymous, Identity, Owner, as_identity
from .models import AttributeRecord, Visibility
from .resolver import Failed, Found, NotFound, RecordResolver, storage_key
from .service import UserInformationService, create_service
from .store import InMemoryRecordStore, RecordStore, SQLiteRecordStore
from .visibility import VisibilityController

__all__ = [
    "ANONYMOUS",
    "AccessDenied",
    "Anonymous",
    "AttributeRecord",
    "Failed",
    "Field",
    "Found",
    "Identity",
    "InMemoryRecordStore",
    "NotFound",
    "OperationFailed",
    "Owner",
    "RecordNotFound",
    "RecordResolver",
    "RecordStore",
    "SQLiteRecordStore",
    "SerializationError",
    "StorageError",
    "UserInfoError",
    "UserInformationService",
    "ValidationError",
    "Visibility",
    "VisibilityController",
    "acting_as",
    "as_identity",
    "create_service",
    "current_caller",
    "is_valid",
    "storage_key",
    "validate",
]
