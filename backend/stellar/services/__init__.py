# Services module

from stellar.services.table import RecordNotFoundError, ResourceTable
from stellar.services.user_directory import (
    UserConflictError,
    UserDirectory,
    UserNotFoundError,
    normalize_email,
)

__all__ = [
    "RecordNotFoundError",
    "ResourceTable",
    "UserConflictError",
    "UserDirectory",
    "UserNotFoundError",
    "normalize_email",
]
