"""
Path Resolver Module

String handling for virtual filesystem paths. Walking the tree is done
by VirtualFileSystem; this module only splits and joins.

Paths use '/' as separator. A leading '/' is optional and empty
segments are ignored, so "a/b", "/a/b" and "a//b" all name the same
directory.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import List, Tuple


@dataclass
class ParsedPath:
    """A parsed path with its components."""
    components: List[str]
    trailing_slash: bool = False

    def __str__(self) -> str:
        if not self.components:
            return '/'
        path = '/' + '/'.join(self.components)
        return path + '/' if self.trailing_slash else path


class PathResolver:
    """
    Splits and joins virtual filesystem paths.

    Example:
        >>> PathResolver.components('//docs//notes/')
        ['docs', 'notes']
        >>> PathResolver.split('/docs/a.txt')
        ('/docs', 'a.txt')
    """

    SEPARATOR = '/'

    @staticmethod
    def parse(path: str) -> ParsedPath:
        """
        Parse a path into components.

        Args:
            path: Path string to parse

        Returns:
            ParsedPath with its non-empty components
        """
        components = [c for c in path.split(PathResolver.SEPARATOR) if c]
        trailing = bool(components) and path.endswith(PathResolver.SEPARATOR)
        return ParsedPath(components=components, trailing_slash=trailing)

    @staticmethod
    def components(path: str) -> List[str]:
        """Non-empty segments of a path, in order."""
        return PathResolver.parse(path).components

    @staticmethod
    def normalize(path: str) -> str:
        """
        Normalize a path to its absolute, single-separator form.

        Args:
            path: Path to normalize

        Returns:
            '/'-rooted path without empty segments
        """
        return str(PathResolver.parse(path))

    @staticmethod
    def is_root(path: str) -> bool:
        """Check whether a path names the root directory."""
        return not PathResolver.components(path)

    @staticmethod
    def split(path: str) -> Tuple[str, str]:
        """
        Split a path into parent path and leaf name.

        Only the last separator counts, so a trailing '/' yields an
        empty leaf. A path without any separator yields an empty
        parent, which callers decide how to treat.

        Args:
            path: Path string

        Returns:
            Tuple of (parent, leaf)
        """
        head, sep, leaf = path.rpartition(PathResolver.SEPARATOR)
        if not sep:
            return ('', path)
        return (head or PathResolver.SEPARATOR, leaf)

    @staticmethod
    def join(directory: str, name: str) -> str:
        """
        Join a directory path and a child name.

        Args:
            directory: Directory path, with or without trailing '/'
            name: Child name

        Returns:
            Absolute path of the child
        """
        base = PathResolver.normalize(directory)
        if not base.endswith(PathResolver.SEPARATOR):
            base += PathResolver.SEPARATOR
        return base + name

    @staticmethod
    def get_depth(path: str) -> int:
        """
        Get the depth of a path (number of components).

        Args:
            path: Path string

        Returns:
            Depth of the path, 0 for root
        """
        return len(PathResolver.components(path))
