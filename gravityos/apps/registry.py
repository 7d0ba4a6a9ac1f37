"""
App Registry Module

Keeps the list of apps a session can run: the builtin apps, plus a
cache of installed apps parsed from the app files in the apps
directory. The files are the source of truth; the cache is rebuilt
from them whenever the set of installed apps changes.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, List

from .records import AppRecord, parse_app_file
from gravityos.core.registry import Subsystem
from gravityos.core.config_loader import AppsConfig, get_config
from gravityos.exceptions import AppNotFoundError, NotFoundError
from gravityos.filesystem.path_resolver import PathResolver
from gravityos.filesystem.vfs import VirtualFileSystem


BUILTIN_CALC = 'BUILTIN_CALC'
BUILTIN_NOTEPAD = 'BUILTIN_NOTEPAD'
BUILTIN_NUMBERGAME = 'BUILTIN_NUMBERGAME'
BUILTIN_ABOUT = 'BUILTIN_ABOUT'

BUILTIN_APPS = (
    AppRecord('calculator', 'Interactive calculator (+ - * /)', BUILTIN_CALC, builtin=True),
    AppRecord('notepad', 'Notepad (saves as a file in current dir)', BUILTIN_NOTEPAD, builtin=True),
    AppRecord('numbergame', 'Number Guess Game (1-100)', BUILTIN_NUMBERGAME, builtin=True),
    AppRecord('about', 'About GR4V1TYOS', BUILTIN_ABOUT, builtin=True),
)


class AppRegistry(Subsystem):
    """
    Registry of builtin and installed apps, keyed by name.

    Lookups scan builtin records first, then installed ones, in
    registration order; the first exact match wins.

    Example:
        >>> apps = AppRegistry(vfs)
        >>> apps.initialize()
        >>> apps.lookup('calculator').builtin
        True
    """

    def __init__(self, vfs: VirtualFileSystem, config: Optional[AppsConfig] = None):
        super().__init__('apps')
        self._vfs = vfs
        self._config = config or get_config().apps
        self._builtin: List[AppRecord] = []
        self._installed: List[AppRecord] = []

    @property
    def apps_dir(self) -> str:
        return self._config.apps_dir

    @property
    def extension(self) -> str:
        return self._config.extension

    def initialize(self) -> None:
        """Register the builtin apps and load the installed ones."""
        self._builtin = list(BUILTIN_APPS)
        self.refresh()
        self._logger.info(
            "App registry initialized",
            context={'builtin': len(self._builtin), 'installed': len(self._installed)}
        )

    def cleanup(self) -> None:
        self._builtin.clear()
        self._installed.clear()

    def register(self, record: AppRecord) -> None:
        """Add a record to the builtin or installed list."""
        if record.builtin:
            self._builtin.append(record)
        else:
            self._installed.append(record)
        self._logger.debug(
            "Registered app",
            context={'name': record.name, 'builtin': record.builtin}
        )

    def lookup(self, name: str) -> AppRecord:
        """
        Find an app by exact name.

        Raises:
            AppNotFoundError: If no app has that name
        """
        for record in self._builtin + self._installed:
            if record.name == name:
                return record
        raise AppNotFoundError(name)

    def list(self) -> List[AppRecord]:
        """All apps, builtin first."""
        return self._builtin + self._installed

    def list_installed(self) -> List[AppRecord]:
        return list(self._installed)

    def unregister(self, name: str) -> AppRecord:
        """
        Drop the first installed record with that name.

        Builtin records cannot be unregistered.

        Raises:
            AppNotFoundError: If no installed app has that name
        """
        for index, record in enumerate(self._installed):
            if record.name == name:
                del self._installed[index]
                self._logger.debug("Unregistered app", context={'name': name})
                return record
        raise AppNotFoundError(name)

    def purge_installed(self) -> int:
        """Drop every installed record, keeping the builtin ones."""
        count = len(self._installed)
        self._installed.clear()
        return count

    def refresh(self) -> int:
        """
        Rebuild the installed-app cache from the apps directory.

        Only files directly inside the directory whose names end with
        the app extension are read. Files without an APP_NAME are
        skipped. A missing directory means no installed apps.

        Returns:
            Number of installed apps now registered
        """
        self.purge_installed()

        try:
            apps_dir = self._vfs.find_dir(self._config.apps_dir)
        except NotFoundError:
            return 0

        _, files = self._vfs.list(apps_dir)
        for filename in files:
            if not filename.endswith(self._config.extension):
                continue

            source = PathResolver.join(self._config.apps_dir, filename)
            record = parse_app_file(self._vfs.read_file(filename, directory=apps_dir), source=source)
            if record is None:
                self._logger.debug("App file has no APP_NAME", context={'path': source})
                continue
            self.register(record)

        return len(self._installed)
