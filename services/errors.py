"""Error taxonomy shared by the task store and its table adapters."""
from __future__ import annotations


class StoreError(Exception):
    """Base error; ``message`` is safe to show to the user."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class RemoteUnavailable(StoreError):
    """The persistence call itself failed (network, auth, quota, database)."""


class ValidationRejected(StoreError):
    """A local precondition failed before any remote call was attempted."""


class InconsistentState(RemoteUnavailable):
    """A read after a write returned data of an unexpected shape."""


__all__ = ["StoreError", "RemoteUnavailable", "ValidationRejected", "InconsistentState"]
