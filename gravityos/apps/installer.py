"""
Package Installer Module

Installs and uninstalls apps by writing and deleting app files in the
apps directory.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import List

from .records import AppRecord, parse_app_file, render_app_file
from .registry import AppRegistry
from gravityos.exceptions import (
    AppNotFoundError,
    NotFoundError,
    PackageAlreadyInstalledError,
    UnknownPackageError,
)
from gravityos.filesystem.path_resolver import PathResolver
from gravityos.filesystem.vfs import VirtualFileSystem
from gravityos.logger import get_logger


@dataclass(frozen=True)
class Package:
    """A package the installer knows how to install."""
    name: str
    app_name: str
    description: str
    code: str

    def render(self) -> str:
        return render_app_file(self.app_name, self.description, self.code)


KNOWN_PACKAGES = {
    'hello': Package(
        name='hello',
        app_name='hello',
        description='Simple Hello App',
        code='PRINT:Hello from installed Hello App!',
    ),
    'simple-notepad': Package(
        name='simple-notepad',
        app_name='snotepad',
        description='Simple installed notepad (saves to given filename)',
        code='SCRIPT:NOTEPAD default_note.txt',
    ),
}


class PackageInstaller:
    """
    Installs known packages as app files.

    A package named P is installed as <apps_dir>/P<extension>. The app
    registry is rebuilt after every install and uninstall, also when
    saving the disk image fails.

    Example:
        >>> installer = PackageInstaller(vfs, apps)
        >>> installer.install('hello').name
        'hello'
    """

    def __init__(self, vfs: VirtualFileSystem, registry: AppRegistry):
        self._vfs = vfs
        self._registry = registry
        self._logger = get_logger('installer')

    @staticmethod
    def known_packages() -> List[str]:
        return sorted(KNOWN_PACKAGES)

    def package_path(self, package: str) -> str:
        """Virtual path of a package's app file."""
        return PathResolver.join(
            self._registry.apps_dir, f"{package}{self._registry.extension}"
        )

    def install(self, package: str) -> AppRecord:
        """
        Install a known package.

        Returns:
            The installed app's record

        Raises:
            UnknownPackageError: If the package is not known
            PackageAlreadyInstalledError: If its app file exists
        """
        pkg = KNOWN_PACKAGES.get(package)
        if pkg is None:
            raise UnknownPackageError(package, known=self.known_packages())

        path = self.package_path(package)
        if self._vfs.exists(path):
            raise PackageAlreadyInstalledError(package)

        try:
            self._vfs.write_path(path, pkg.render())
        finally:
            self._registry.refresh()

        self._logger.info("Installed package", context={'package': package, 'path': path})
        return self._registry.lookup(pkg.app_name)

    def find_app_file(self, app_name: str) -> str:
        """
        Find the app file that declares an app name.

        Raises:
            AppNotFoundError: If no app file declares that name
        """
        try:
            apps_dir = self._vfs.find_dir(self._registry.apps_dir)
        except NotFoundError:
            raise AppNotFoundError(app_name)

        _, files = self._vfs.list(apps_dir)
        for filename in files:
            if not filename.endswith(self._registry.extension):
                continue
            record = parse_app_file(self._vfs.read_file(filename, directory=apps_dir))
            if record is not None and record.name == app_name:
                return PathResolver.join(self._registry.apps_dir, filename)

        raise AppNotFoundError(app_name)

    def uninstall(self, app_name: str) -> str:
        """
        Delete the app file of an installed app.

        Returns:
            Path of the deleted app file

        Raises:
            AppNotFoundError: If no installed app has that name
        """
        path = self.find_app_file(app_name)
        try:
            self._vfs.remove_path(path)
        finally:
            self._registry.refresh()

        self._logger.info("Uninstalled app", context={'app': app_name, 'path': path})
        return path
