"""
Inode Module

Implements the node model of the virtual file system. Every directory
and file is an Inode stored in the filesystem's inode table and
addressed by its inode number.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Any, List

from gravityos.exceptions import InvalidNameError


class NodeType(Enum):
    """Types of nodes."""
    FILE = 1
    DIRECTORY = 2


# Characters that would break a DIR/FILE record line.
_FORBIDDEN_CHARS = ('/', '\n', '\r')


def validate_name(name: str) -> str:
    """
    Check that a directory or file name can live in the tree.

    Args:
        name: Proposed name

    Returns:
        The name, unchanged

    Raises:
        InvalidNameError: If the name is empty, '.', '..', or contains
            a path separator or line break
    """
    if not isinstance(name, str) or not name:
        raise InvalidNameError(str(name), reason="empty")
    if name in ('.', '..'):
        raise InvalidNameError(name, reason="reserved")
    for char in _FORBIDDEN_CHARS:
        if char in name:
            raise InvalidNameError(name, reason=f"contains {char!r}")
    return name


@dataclass
class Inode:
    """
    Index Node.

    A directory keeps the inode numbers of its children in two ordered
    lists, one per namespace, plus the number of its parent. A file
    keeps its content. The root is the only directory without a parent.
    """

    ino: int
    node_type: NodeType
    name: str
    parent: Optional[int] = None

    _content: str = field(default='', repr=False)
    _subdirs: List[int] = field(default_factory=list, repr=False)
    _files: List[int] = field(default_factory=list, repr=False)

    @property
    def is_directory(self) -> bool:
        return self.node_type == NodeType.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.node_type == NodeType.FILE

    @property
    def is_root(self) -> bool:
        return self.is_directory and self.parent is None

    @property
    def size(self) -> int:
        return len(self._content)

    # File operations

    def read(self) -> str:
        """Return the whole content of a file."""
        if not self.is_file:
            raise ValueError("Not a file")
        return self._content

    def write(self, content: str) -> int:
        """
        Replace the content of a file.

        Returns:
            Number of characters stored
        """
        if not self.is_file:
            raise ValueError("Not a file")
        self._content = content
        return len(content)

    # Directory operations

    def add_subdir(self, ino: int) -> None:
        """Append a child directory."""
        if not self.is_directory:
            raise ValueError("Not a directory")
        self._subdirs.append(ino)

    def add_file(self, ino: int) -> None:
        """Append a file entry."""
        if not self.is_directory:
            raise ValueError("Not a directory")
        self._files.append(ino)

    def remove_subdir(self, ino: int) -> None:
        """Drop a child directory, keeping the order of the rest."""
        self._subdirs.remove(ino)

    def remove_file(self, ino: int) -> None:
        """Drop a file entry, keeping the order of the rest."""
        self._files.remove(ino)

    def clear(self) -> tuple[List[int], List[int]]:
        """Detach every child and return the detached inode numbers."""
        subdirs, files = self._subdirs, self._files
        self._subdirs, self._files = [], []
        return subdirs, files

    def subdirs(self) -> List[int]:
        """Child directory inode numbers in insertion order."""
        return list(self._subdirs)

    def files(self) -> List[int]:
        """File inode numbers in insertion order."""
        return list(self._files)

    @property
    def is_empty(self) -> bool:
        return not self._subdirs and not self._files

    def to_dict(self) -> dict[str, Any]:
        """Convert inode to dictionary for display."""
        info: dict[str, Any] = {
            'ino': self.ino,
            'type': self.node_type.name,
            'name': self.name,
            'parent': self.parent,
        }
        if self.is_directory:
            info['dirs'] = len(self._subdirs)
            info['files'] = len(self._files)
        else:
            info['size'] = self.size
        return info
