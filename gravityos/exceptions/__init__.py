"""
GravityOS Exception Hierarchy

All custom exceptions inherit from GravityOSError, with one sub-category
per subsystem.

Architecture:
    GravityOSError (Base)
    ├── SessionException
    │   ├── BootFailureError
    │   └── ConfigValidationError
    ├── FileSystemException
    │   ├── NotFoundError
    │   ├── AlreadyExistsError
    │   ├── CapacityExceededError
    │   ├── PersistenceWriteError
    │   ├── MalformedRecordError
    │   └── InvalidNameError
    └── AppException
        ├── AppNotFoundError
        ├── UnknownPackageError
        └── PackageAlreadyInstalledError
"""

from .base import GravityOSError

from .session_exceptions import (
    SessionException,
    BootFailureError,
    ConfigValidationError,
)

from .fs_exceptions import (
    FileSystemException,
    NotFoundError,
    AlreadyExistsError,
    CapacityExceededError,
    PersistenceWriteError,
    MalformedRecordError,
    InvalidNameError,
)

from .app_exceptions import (
    AppException,
    AppNotFoundError,
    UnknownPackageError,
    PackageAlreadyInstalledError,
)

__all__ = [
    "GravityOSError",
    # Session exceptions
    "SessionException",
    "BootFailureError",
    "ConfigValidationError",
    # Filesystem exceptions
    "FileSystemException",
    "NotFoundError",
    "AlreadyExistsError",
    "CapacityExceededError",
    "PersistenceWriteError",
    "MalformedRecordError",
    "InvalidNameError",
    # App exceptions
    "AppException",
    "AppNotFoundError",
    "UnknownPackageError",
    "PackageAlreadyInstalledError",
]
