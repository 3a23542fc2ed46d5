"""Core configuration and shared utilities."""

from dotenv import load_dotenv

from .config import Settings, get_settings
from .errors import (
    EmptyInputError,
    LighthouseStoreError,
    NotFoundError,
    RemoteAuditError,
    StorageError,
)

load_dotenv()

__all__ = [
    "EmptyInputError",
    "LighthouseStoreError",
    "NotFoundError",
    "RemoteAuditError",
    "Settings",
    "StorageError",
    "get_settings",
]
