"""Error taxonomy shared by the store, services and API."""

from __future__ import annotations


class LighthouseStoreError(Exception):
    """Base class for all errors raised by this package."""


class NotFoundError(LighthouseStoreError):
    """No full report or metadata exists for the requested URL."""


class EmptyInputError(LighthouseStoreError, ValueError):
    """A median was requested over an empty sequence."""


class StorageError(LighthouseStoreError):
    """An underlying store call failed."""


class RemoteAuditError(LighthouseStoreError):
    """The audit API reported a non-success run outcome."""

    def __init__(self, code: str, message: str = "") -> None:
        self.code = code
        self.detail = message
        super().__init__(f"{code} {message}".strip())


__all__ = [
    "EmptyInputError",
    "LighthouseStoreError",
    "NotFoundError",
    "RemoteAuditError",
    "StorageError",
]
