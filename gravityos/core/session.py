"""
GravityOS Session

The session owns everything one user works with:
- The virtual filesystem and its disk store
- The app registry
- The package installer and the app runner

It is created explicitly at startup, booted once, and shut down at
exit, which writes a final disk image and frees the tree.

Author: YSNRFD
Version: 1.0.0
"""

from __future__ import annotations

from enum import Enum, auto
from pathlib import Path
from typing import Optional, Union

from gravityos.apps import AppRegistry, AppRunner, PackageInstaller, AppRecord
from gravityos.apps.runner import ReadLine
from gravityos.core.config_loader import Config, get_config
from gravityos.core.registry import SubsystemRegistry, SubsystemPriority
from gravityos.exceptions import BootFailureError
from gravityos.filesystem import DiskStore, VirtualFileSystem
from gravityos.logger import get_logger


class SessionState(Enum):
    """Session lifecycle state."""
    CREATED = auto()
    RUNNING = auto()
    SHUT_DOWN = auto()


class Session:
    """
    One user session.

    Example:
        >>> with Session(disk_file='savdisk.txt') as session:
        ...     session.filesystem.make_dir('docs')
        ...     session.install('hello')
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        disk_file: Optional[Union[str, Path]] = None,
        persist: bool = True
    ):
        self._config = config or get_config()
        self._logger = get_logger('session')
        self._state = SessionState.CREATED

        fs_config = self._config.filesystem
        self._store: Optional[DiskStore] = None
        if persist:
            self._store = DiskStore(disk_file or fs_config.disk_file, encoding=fs_config.encoding)

        self._vfs = VirtualFileSystem(fs_config, self._store)
        self._apps = AppRegistry(self._vfs, self._config.apps)
        self._installer = PackageInstaller(self._vfs, self._apps)
        self._runner = AppRunner(self._vfs, self._apps, self._config.system)

        self._registry = SubsystemRegistry()
        self._registry.register(self._vfs, priority=SubsystemPriority.CRITICAL)
        self._registry.register(self._apps, priority=SubsystemPriority.HIGH)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def config(self) -> Config:
        return self._config

    @property
    def filesystem(self) -> VirtualFileSystem:
        return self._vfs

    @property
    def apps(self) -> AppRegistry:
        return self._apps

    @property
    def installer(self) -> PackageInstaller:
        return self._installer

    @property
    def runner(self) -> AppRunner:
        return self._runner

    @property
    def subsystems(self) -> SubsystemRegistry:
        return self._registry

    def boot(self) -> 'Session':
        """
        Load the disk image and the app registry.

        Raises:
            BootFailureError: If a subsystem cannot be initialized
        """
        if self._state != SessionState.CREATED:
            return self

        try:
            self._registry.initialize_all()
        except (OSError, UnicodeError) as e:
            raise BootFailureError(f"Cannot read disk image: {e}", subsystem="filesystem") from e

        self._state = SessionState.RUNNING
        self._logger.info(
            f"{self._config.system.name} v{self._config.system.version} session started",
            context=self._vfs.get_stats()
        )
        return self

    def shutdown(self) -> None:
        """Save the tree one last time and free everything."""
        if self._state != SessionState.RUNNING:
            return
        self._registry.shutdown_all()
        self._state = SessionState.SHUT_DOWN
        self._logger.info("Session shut down")

    def __enter__(self) -> 'Session':
        return self.boot()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # Operations that span subsystems

    def wipe(self) -> None:
        """
        Delete all user data, keeping the root directory.

        Installed app records go too, since their files are gone.
        """
        try:
            self._vfs.wipe()
        finally:
            purged = self._apps.purge_installed()
            self._logger.info("Installed apps purged", context={'count': purged})

    def install(self, package: str) -> AppRecord:
        return self._installer.install(package)

    def uninstall(self, app_name: str) -> str:
        return self._installer.uninstall(app_name)

    def run(self, app_name: str, read_line: Optional[ReadLine] = None) -> AppRecord:
        return self._runner.run(app_name, read_line)
