"""
Session Exceptions

Exceptions raised while booting a session or loading its configuration.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .base import GravityOSError


class SessionException(GravityOSError):
    """Base exception for session lifecycle errors."""

    default_code = 1000


class BootFailureError(SessionException):
    """
    The session could not be brought up.

    Example:
        >>> raise BootFailureError("Disk image unreadable", subsystem="filesystem")
    """

    def __init__(
        self,
        message: str,
        subsystem: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if subsystem:
            ctx["subsystem"] = subsystem
        super().__init__(message, error_code=1001, context=ctx)
        self.subsystem = subsystem


class ConfigValidationError(SessionException):
    """Raised when a configuration key or value is invalid."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if key:
            ctx["key"] = key
        super().__init__(message, error_code=1002, context=ctx)
        self.key = key
