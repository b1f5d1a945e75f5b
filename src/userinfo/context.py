"""Per-invocation caller binding.

The hosting layer binds the authenticated caller before invoking a service
operation; the store reads it back to enforce ownership.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from .identity import ANONYMOUS, Identity, as_identity

_caller: ContextVar[Identity] = ContextVar("userinfo_caller", default=ANONYMOUS)


def current_caller() -> Identity:
    """Identity bound to the current execution context, anonymous if none."""
    return _caller.get()


@contextmanager
def acting_as(identity: "Identity | str | int | None") -> Iterator[Identity]:
    """Bind the caller for the duration of a block.

    Nested bindings restore the outer caller on exit.
    """
    bound = as_identity(identity)
    token = _caller.set(bound)
    try:
        yield bound
    finally:
        _caller.reset(token)
