"""
Disk Store Module

Reads and writes the serialized disk image on the host filesystem.

Author: YSNRFD
Version: 1.0.0
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from gravityos.exceptions import PersistenceWriteError
from gravityos.logger import get_logger


class DiskStore:
    """
    The host file that holds the disk image.

    Every save writes a complete image to a temporary file next to the
    disk file and then renames it over the disk file, so a failed write
    leaves the previous image in place. Newlines are written and read
    untranslated so that file content survives byte for byte.

    Example:
        >>> store = DiskStore('savdisk.txt')
        >>> store.save('DIR /docs/\\n')
        >>> store.load()
        'DIR /docs/\\n'
    """

    def __init__(self, path: Union[str, Path], encoding: str = 'utf-8'):
        self._path = Path(path)
        self._encoding = encoding
        self._logger = get_logger('disk')

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> Optional[str]:
        """
        Read the disk image.

        Returns:
            The image text, or None when no disk file exists yet
        """
        if not self._path.exists():
            self._logger.info("No disk file yet", context={'path': str(self._path)})
            return None

        with open(self._path, 'r', encoding=self._encoding, newline='') as f:
            text = f.read()

        self._logger.debug(
            "Read disk file",
            context={'path': str(self._path), 'chars': len(text)}
        )
        return text

    def save(self, text: str) -> None:
        """
        Overwrite the disk file with a complete image.

        Raises:
            PersistenceWriteError: If the host file cannot be written
        """
        temp_path: Optional[Path] = None
        try:
            temp_fd, temp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix='.tmp',
                dir=self._path.parent
            )
            temp_path = Path(temp_name)
            with os.fdopen(temp_fd, 'w', encoding=self._encoding, newline='') as f:
                f.write(text)
            os.replace(temp_path, self._path)
        except (OSError, UnicodeError) as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            self._logger.error(
                "Could not write disk file",
                context={'path': str(self._path), 'error': str(e)}
            )
            raise PersistenceWriteError(str(self._path), reason=str(e)) from e

        self._logger.debug(
            "Wrote disk file",
            context={'path': str(self._path), 'chars': len(text)}
        )
