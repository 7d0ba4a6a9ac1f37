"""
App Exceptions

Exceptions related to the app registry, installer and runner.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .base import GravityOSError


class AppException(GravityOSError):
    """Base exception for app subsystem errors."""

    default_code = 5000


class AppNotFoundError(AppException):
    """
    No app with the given name is registered or installed.

    Example:
        >>> raise AppNotFoundError("hello")
    """

    def __init__(
        self,
        name: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            f"App not found: {name}",
            error_code=5001,
            context=context
        )
        self.name = name


class UnknownPackageError(AppException):
    """The installer does not know the requested package."""

    def __init__(
        self,
        package: str,
        known: Optional[list[str]] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if known:
            ctx["known"] = ", ".join(known)
        super().__init__(
            f"Unknown package: {package}",
            error_code=5002,
            context=ctx
        )
        self.package = package
        self.known = known or []


class PackageAlreadyInstalledError(AppException):
    """The package's app file already exists."""

    def __init__(
        self,
        package: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            f"Package already installed: {package}",
            error_code=5003,
            context=context
        )
        self.package = package
