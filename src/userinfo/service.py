"""Attribute facade: the four operations exposed to collaborating services.

Batch hazard: ``write`` and ``write_permissions`` are fail-fast but not
atomic. Entries applied before the failing one stay applied, so a False
result means "possibly partially applied".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from .context import current_caller
from .errors import OperationFailed, UserInfoError, ValidationError
from .fields import is_valid, validate
from .identity import Identity, as_identity
from .resolver import DEFAULT_KEY_PREFIX, Failed, Found, NotFound, RecordResolver
from .store import InMemoryRecordStore, RecordStore, SQLiteRecordStore
from .visibility import VisibilityController

if TYPE_CHECKING:
    from .config import ServiceConfig
    from .logging import JSONLLogger

logger = logging.getLogger(__name__)


class UserInformationService:
    """Stores first name, last name and user image per identity.

    The acting caller is taken from the invocation context
    (see ``userinfo.context.acting_as``). Callers only ever write their own
    attributes.
    """

    def __init__(
        self,
        store: RecordStore,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        audit: JSONLLogger | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Backing record store.
            key_prefix: Prefix of every storage key.
            audit: Optional JSONL audit logger.
        """
        self.store = store
        self.resolver = RecordResolver(store, key_prefix)
        self.visibility = VisibilityController(store)
        self.audit = audit

    def read(self, owner_id: Identity | str | int, fields: Iterable[Any]) -> dict[str, str]:
        """Fetch attributes of any identity.

        Unknown fields are skipped. Fields never written come back as "".
        Fields that cannot be read (private to another caller, corrupt) are
        left out. Never raises.

        Args:
            owner_id: Identity whose attributes are requested.
            fields: Requested field names, in order.

        Returns:
            Mapping of field name to value, possibly partial.
        """
        fields = list(fields)
        result: dict[str, str] = {}
        try:
            owner = as_identity(owner_id)
        except (TypeError, ValueError) as e:
            logger.warning("read: invalid owner id %r: %s", owner_id, e)
            self._audit("read", fields, False, owner=str(owner_id), error=str(e))
            return result

        for field in fields:
            if not is_valid(field):
                continue
            match self.resolver.resolve(owner, field):
                case Found(record):
                    result[field] = record.value
                case NotFound():
                    result[field] = ""
                case Failed(error):
                    logger.debug("read: omitting %s: %s", field, error)

        self._audit("read", fields, True, owner=str(owner))
        return result

    def write(self, values: Mapping[str, Any]) -> bool:
        """Set attributes of the calling identity.

        Args:
            values: Field name to new text value, applied in order.

        Returns:
            True if every entry was stored. False on the first invalid entry
            or store failure; earlier entries remain stored.
        """
        names = list(values) if isinstance(values, Mapping) else []
        ok, error = self._write(values)
        if not ok:
            logger.warning("write failed: %s", error)
        self._audit("write", names, ok, error=error)
        return ok

    def _write(self, values: Mapping[str, Any]) -> tuple[bool, str | None]:
        if not isinstance(values, Mapping):
            return False, "values must be a mapping"

        caller = current_caller()
        if caller.is_anonymous:
            return False, "anonymous callers cannot store data"

        for field, value in values.items():
            try:
                validate(field, value)
            except ValidationError as e:
                return False, str(e)

            match self.resolver.resolve(caller, field):
                case Found(record) | NotFound(record):
                    try:
                        self.store.store(self.store.create_version(record, value))
                    except UserInfoError as e:
                        return False, str(e)
                case Failed(error):
                    return False, str(error)

        return True, None

    def read_permissions(self, fields: Iterable[Any]) -> dict[str, bool] | None:
        """Report which of the caller's attributes are public.

        Fields never written are reported private.

        Args:
            fields: Requested field names, in order.

        Returns:
            Mapping of field name to True (public) / False (private), or None
            if any lookup failed.
        """
        fields = list(fields)
        caller = current_caller()
        result: dict[str, bool] = {}

        for field in fields:
            if not is_valid(field):
                continue
            match self.resolver.resolve(caller, field):
                case Found(record):
                    result[field] = self.visibility.is_public(record)
                case NotFound():
                    result[field] = False
                case Failed(error):
                    logger.warning("read_permissions failed on %s: %s", field, error)
                    self._audit("read_permissions", fields, False, error=str(error))
                    return None

        self._audit("read_permissions", fields, True)
        return result

    def write_permissions(self, permissions: Mapping[str, Any]) -> bool:
        """Make the caller's attributes public (True) or private (False).

        Fields with no stored value are left alone.

        Args:
            permissions: Field name to desired public flag, applied in order.

        Returns:
            True on success. False on the first invalid entry or store
            failure; earlier changes remain applied.
        """
        names = list(permissions) if isinstance(permissions, Mapping) else []
        ok, error = self._write_permissions(permissions)
        if not ok:
            logger.warning("write_permissions failed: %s", error)
        self._audit("write_permissions", names, ok, error=error)
        return ok

    def _write_permissions(self, permissions: Mapping[str, Any]) -> tuple[bool, str | None]:
        if not isinstance(permissions, Mapping):
            return False, "permissions must be a mapping"

        caller = current_caller()
        if caller.is_anonymous:
            return False, "anonymous callers cannot change permissions"

        for field, want_public in permissions.items():
            try:
                validate(field)
            except ValidationError as e:
                return False, str(e)
            if not isinstance(want_public, bool):
                return False, f"permission for {field!r} must be a boolean"

            match self.resolver.resolve(caller, field):
                case Found(record):
                    try:
                        self.visibility.set_visibility(record, want_public)
                    except OperationFailed as e:
                        return False, str(e)
                case NotFound():
                    # nothing stored, nothing to protect
                    continue
                case Failed(error):
                    return False, str(error)

        return True, None

    def _audit(
        self,
        operation: str,
        fields: list[Any],
        success: bool,
        *,
        owner: str | None = None,
        error: str | None = None,
    ) -> None:
        if self.audit is None:
            return
        try:
            self.audit.log_operation(
                operation,
                caller=str(current_caller()),
                fields=[str(f) for f in fields],
                success=success,
                owner=owner,
                error=error,
            )
        except OSError as e:
            logger.warning("Audit log write failed: %s", e)


def create_service(config: ServiceConfig) -> UserInformationService:
    """Build a service with the store and audit log described by ``config``."""
    from .logging import configure_logger

    if config.backend == "memory":
        store: RecordStore = InMemoryRecordStore()
    else:
        sqlite_store = SQLiteRecordStore(config.db_path)
        sqlite_store.init_db()
        store = sqlite_store

    audit = None
    if config.audit_log_enabled:
        audit = configure_logger(config.log_dir, config.log_max_size_mb)

    return UserInformationService(store, key_prefix=config.key_prefix, audit=audit)
