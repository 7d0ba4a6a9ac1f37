"""
Filesystem Exceptions

Exceptions related to the virtual file system, its disk image and
the on-disk store that holds it.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .base import GravityOSError


class FileSystemException(GravityOSError):
    """
    Base exception for all filesystem-related errors.

    Attributes:
        message: Human-readable error description
        path: Virtual path associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
    """

    default_code = 4000

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code=error_code, context=context)
        self.path = path

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.path:
            base = f"{base} (path={self.path})"
        return base


class NotFoundError(FileSystemException):
    """
    A name or path does not resolve to an existing entry.

    Example:
        >>> raise NotFoundError("/docs/a.txt", kind="file")
    """

    def __init__(
        self,
        path: str,
        kind: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if kind:
            ctx["kind"] = kind
        what = kind.capitalize() if kind else "Entry"
        super().__init__(
            message=f"{what} not found: {path}",
            path=path,
            error_code=4001,
            context=ctx
        )
        self.kind = kind


class AlreadyExistsError(FileSystemException):
    """
    A sibling with the same name already exists.

    Example:
        >>> raise AlreadyExistsError("/docs/")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Already exists: {path}",
            path=path,
            error_code=4002,
            context=context
        )


class CapacityExceededError(FileSystemException):
    """
    A directory reached its configured child limit.

    Only raised when filesystem.max_dirs_per_dir or
    filesystem.max_files_per_dir is set.
    """

    def __init__(
        self,
        path: str,
        kind: str,
        limit: int,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["kind"] = kind
        ctx["limit"] = limit
        super().__init__(
            message=f"Max {kind} reached in {path}",
            path=path,
            error_code=4003,
            context=ctx
        )
        self.kind = kind
        self.limit = limit


class PersistenceWriteError(FileSystemException):
    """
    The disk image could not be written.

    The in-memory mutation that triggered the save has already been
    applied and is not rolled back.
    """

    def __init__(
        self,
        disk_file: str,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message=f"Could not write disk file: {disk_file}",
            path=disk_file,
            error_code=4004,
            context=ctx
        )
        self.disk_file = disk_file
        self.reason = reason


class MalformedRecordError(FileSystemException):
    """
    A record in the disk image could not be parsed.

    The loader recovers from this by skipping the record.
    """

    def __init__(
        self,
        line_no: int,
        record: str,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["line"] = line_no
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message=f"Malformed record at line {line_no}: {record!r}",
            error_code=4005,
            context=ctx
        )
        self.line_no = line_no
        self.record = record
        self.reason = reason


class InvalidNameError(FileSystemException):
    """A directory or file name cannot be stored."""

    def __init__(
        self,
        name: str,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message=f"Invalid name: {name!r}",
            error_code=4006,
            context=ctx
        )
        self.name = name
        self.reason = reason
