"""
Virtual File System (VFS) Module

Implements the in-memory directory tree with:
- An inode table addressed by stable inode numbers
- A current working directory
- Directory and file operations
- Whole-tree persistence after every mutation

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any, List, Tuple

from .inode import Inode, NodeType, validate_name
from .path_resolver import PathResolver
from .disk_image import serialize, deserialize, LoadReport
from .disk_store import DiskStore
from gravityos.core.registry import Subsystem, SubsystemState
from gravityos.core.config_loader import FilesystemConfig, get_config
from gravityos.exceptions import (
    NotFoundError,
    AlreadyExistsError,
    CapacityExceededError,
)


ROOT_INO = 1


class VirtualFileSystem(Subsystem):
    """
    Virtual File System Subsystem.

    Directories and files are Inodes kept in one table. Handles
    returned by this class are inode numbers; removing a subtree drops
    its inodes, after which their handles raise NotFoundError.

    Unless a directory handle is passed explicitly, name-based
    operations act on the current working directory. Every successful
    mutation rewrites the whole disk image before returning when a
    DiskStore is attached and autosave is on.

    Example:
        >>> vfs = VirtualFileSystem()
        >>> vfs.make_dir('docs')
        >>> vfs.change_dir('docs')
        >>> vfs.write_file('a.txt', 'hello\\n')
    """

    def __init__(
        self,
        config: Optional[FilesystemConfig] = None,
        store: Optional[DiskStore] = None
    ):
        super().__init__('filesystem')
        self._config = config or get_config().filesystem
        self._store = store
        self._inodes: dict[int, Inode] = {}
        self._next_ino = ROOT_INO + 1
        self._root_ino = ROOT_INO
        self._cwd = ROOT_INO
        self._last_report: Optional[LoadReport] = None
        self._create_root()

    def _create_root(self) -> None:
        self._inodes[ROOT_INO] = Inode(
            ino=ROOT_INO,
            node_type=NodeType.DIRECTORY,
            name='/'
        )

    # Lifecycle

    def initialize(self) -> None:
        """Rebuild the tree from the disk store, if any."""
        self._logger.info("Initializing virtual filesystem")
        if self._store is not None:
            self.load()
        self._logger.info(
            "Virtual filesystem initialized",
            context=self.get_stats()
        )

    def stop(self) -> None:
        """Write a final disk image."""
        self._logger.info("Stopping virtual filesystem")
        if self._store is not None:
            self.save()

    def cleanup(self) -> None:
        """Free the whole tree."""
        self._inodes.clear()
        self._cwd = ROOT_INO
        self._create_root()

    # Properties

    @property
    def root(self) -> int:
        """Handle of the root directory."""
        return self._root_ino

    @property
    def cwd(self) -> int:
        """Handle of the current working directory."""
        return self._cwd

    @property
    def cwd_path(self) -> str:
        return self.path_of(self._cwd)

    @property
    def store(self) -> Optional[DiskStore]:
        return self._store

    @property
    def last_load_report(self) -> Optional[LoadReport]:
        return self._last_report

    # Inode table

    def _generate_ino(self) -> int:
        """Generate a new inode number."""
        ino = self._next_ino
        self._next_ino += 1
        return ino

    def node(self, ino: int) -> Inode:
        """
        Get the inode behind a handle.

        Raises:
            NotFoundError: If the handle was never issued or its node
                has been removed
        """
        inode = self._inodes.get(ino)
        if inode is None:
            raise NotFoundError(f"inode {ino}")
        return inode

    def _directory(self, ino: Optional[int]) -> Inode:
        inode = self.node(self._cwd if ino is None else ino)
        if not inode.is_directory:
            raise NotFoundError(self.path_of(inode.ino), kind="directory")
        return inode

    def path_of(self, ino: int) -> str:
        """
        Absolute path of a node, rebuilt from parent links.

        Directories other than the root end with '/'.
        """
        inode = self.node(ino)
        if inode.is_root:
            return '/'

        names = []
        current: Optional[Inode] = inode
        while current is not None and not current.is_root:
            names.append(current.name)
            current = self._inodes.get(current.parent) if current.parent else None

        path = '/' + '/'.join(reversed(names))
        return path + '/' if inode.is_directory else path

    def _find_subdir(self, directory: Inode, name: str) -> Optional[int]:
        for ino in directory.subdirs():
            if self._inodes[ino].name == name:
                return ino
        return None

    def _find_file(self, directory: Inode, name: str) -> Optional[int]:
        for ino in directory.files():
            if self._inodes[ino].name == name:
                return ino
        return None

    def _new_directory(self, parent: Inode, name: str) -> int:
        ino = self._generate_ino()
        self._inodes[ino] = Inode(
            ino=ino,
            node_type=NodeType.DIRECTORY,
            name=name,
            parent=parent.ino
        )
        parent.add_subdir(ino)
        return ino

    def _check_capacity(self, directory: Inode, kind: str) -> None:
        if kind == 'directories':
            limit = self._config.max_dirs_per_dir
            count = len(directory.subdirs())
        else:
            limit = self._config.max_files_per_dir
            count = len(directory.files())
        if limit is not None and count >= limit:
            raise CapacityExceededError(self.path_of(directory.ino), kind=kind, limit=limit)

    def _free_subtree(self, ino: int) -> int:
        """Drop a node and all its descendants from the inode table."""
        freed = 0
        stack = [ino]
        while stack:
            inode = self._inodes.pop(stack.pop())
            freed += 1
            if inode.is_directory:
                subdirs, files = inode.clear()
                stack.extend(subdirs)
                stack.extend(files)
        return freed

    # Path resolution

    def resolve_or_create(self, path: str) -> int:
        """
        Walk a path from the root, creating missing directories.

        A leading '/' is optional and empty segments are ignored; ''
        and '/' resolve to the root. Files are never matched or created.
        Calling it twice with the same path returns the same handle.

        Args:
            path: '/'-separated directory path

        Returns:
            Handle of the directory reached

        Raises:
            InvalidNameError: If a missing segment is not a valid name
        """
        current = self._inodes[self._root_ino]

        for component in PathResolver.components(path):
            ino = self._find_subdir(current, component)
            if ino is None:
                validate_name(component)
                ino = self._new_directory(current, component)
                self._logger.debug(
                    "Created directory",
                    context={'path': self.path_of(ino), 'ino': ino}
                )
            current = self._inodes[ino]

        return current.ino

    def find_dir(self, path: str, start: Optional[int] = None) -> int:
        """
        Look up a directory without creating anything.

        Absolute paths start at the root, relative ones at start (the
        current directory by default). '.' and '..' are honoured; '..'
        at the root stays at the root.

        Raises:
            NotFoundError: If a segment does not exist
        """
        if path.startswith('/'):
            current = self._inodes[self._root_ino]
        else:
            current = self._directory(start)

        for component in PathResolver.components(path):
            if component == '.':
                continue
            if component == '..':
                if current.parent is not None:
                    current = self._inodes[current.parent]
                continue
            ino = self._find_subdir(current, component)
            if ino is None:
                raise NotFoundError(PathResolver.join(self.path_of(current.ino), component), kind="directory")
            current = self._inodes[ino]

        return current.ino

    def _split_file_path(self, path: str, create: bool) -> Tuple[int, str]:
        # Path-addressed operations always start at the root.
        parent_path, name = PathResolver.split(path)
        validate_name(name)
        if create:
            return self.resolve_or_create(parent_path), name
        return self.find_dir('/' + parent_path), name

    # Tree operations

    def list(self, directory: Optional[int] = None) -> Tuple[List[str], List[str]]:
        """
        List a directory.

        Returns:
            (directory names, file names), each in insertion order
        """
        inode = self._directory(directory)
        dirs = [self._inodes[ino].name for ino in inode.subdirs()]
        files = [self._inodes[ino].name for ino in inode.files()]
        return dirs, files

    def change_dir(self, name: str) -> bool:
        """
        Change the current directory to a child, or to the parent with '..'.

        Returns:
            False if '..' was requested at the root (no effect),
            True otherwise

        Raises:
            NotFoundError: If no child directory has that name
        """
        current = self._directory(None)

        if name == '..':
            if current.parent is None:
                return False
            self._cwd = current.parent
            return True

        ino = self._find_subdir(current, name)
        if ino is None:
            raise NotFoundError(PathResolver.join(self.path_of(current.ino), name), kind="directory")

        self._cwd = ino
        return True

    def change_dir_path(self, path: str) -> None:
        """Change the current directory to an absolute or relative path."""
        self._cwd = self.find_dir(path)

    def make_dir(self, name: str, directory: Optional[int] = None) -> int:
        """
        Create an empty child directory.

        Returns:
            Handle of the new directory

        Raises:
            InvalidNameError: If the name cannot be stored
            AlreadyExistsError: If a sibling directory has that name
            CapacityExceededError: If the configured limit is reached
        """
        validate_name(name)
        parent = self._directory(directory)

        if self._find_subdir(parent, name) is not None:
            raise AlreadyExistsError(PathResolver.join(self.path_of(parent.ino), name) + '/')

        self._check_capacity(parent, 'directories')

        ino = self._new_directory(parent, name)
        self._logger.debug("Created directory", context={'path': self.path_of(ino), 'ino': ino})
        self._commit()
        return ino

    def store_file(self, directory: int, name: str, content: str) -> Tuple[int, bool]:
        """
        Create or overwrite a file without saving.

        Used by the loader; everything else goes through write_file().

        Returns:
            (file handle, True if the file was created)
        """
        validate_name(name)
        parent = self._directory(directory)

        ino = self._find_file(parent, name)
        if ino is not None:
            self._inodes[ino].write(content)
            return ino, False

        ino = self._generate_ino()
        inode = Inode(ino=ino, node_type=NodeType.FILE, name=name, parent=parent.ino)
        inode.write(content)
        self._inodes[ino] = inode
        parent.add_file(ino)
        return ino, True

    def write_file(self, name: str, content: str, directory: Optional[int] = None) -> int:
        """
        Create a file, or replace the content of an existing one.

        Returns:
            Handle of the file

        Raises:
            InvalidNameError: If the name cannot be stored
            CapacityExceededError: If a new file would exceed the limit
        """
        validate_name(name)
        parent = self._directory(directory)

        if self._find_file(parent, name) is None:
            self._check_capacity(parent, 'files')

        ino, created = self.store_file(parent.ino, name, content)
        self._logger.debug(
            "Created file" if created else "Overwrote file",
            context={'path': self.path_of(ino), 'size': len(content)}
        )
        self._commit()
        return ino

    def read_file(self, name: str, directory: Optional[int] = None) -> str:
        """
        Read a file's content.

        Raises:
            NotFoundError: If no file has that name
        """
        parent = self._directory(directory)
        ino = self._find_file(parent, name)
        if ino is None:
            raise NotFoundError(PathResolver.join(self.path_of(parent.ino), name), kind="file")
        return self._inodes[ino].read()

    def remove_file(self, name: str, directory: Optional[int] = None) -> None:
        """
        Delete a file, keeping the order of the remaining files.

        Raises:
            NotFoundError: If no file has that name
        """
        parent = self._directory(directory)
        ino = self._find_file(parent, name)
        if ino is None:
            raise NotFoundError(PathResolver.join(self.path_of(parent.ino), name), kind="file")

        path = self.path_of(ino)
        parent.remove_file(ino)
        del self._inodes[ino]

        self._logger.debug("Deleted file", context={'path': path})
        self._commit()

    def remove_dir_recursive(self, name: str, directory: Optional[int] = None) -> None:
        """
        Delete a child directory and everything below it.

        If the current directory was inside the removed subtree, it
        moves to the directory the child was removed from.

        Raises:
            NotFoundError: If no child directory has that name
        """
        parent = self._directory(directory)
        ino = self._find_subdir(parent, name)
        if ino is None:
            raise NotFoundError(PathResolver.join(self.path_of(parent.ino), name), kind="directory")

        path = self.path_of(ino)
        parent.remove_subdir(ino)
        freed = self._free_subtree(ino)

        if self._cwd not in self._inodes:
            self._cwd = parent.ino

        self._logger.debug("Removed directory tree", context={'path': path, 'nodes': freed})
        self._commit()

    def wipe(self) -> None:
        """
        Remove every child of the root.

        The root handle stays valid and the current directory is reset
        to it.
        """
        root = self._inodes[self._root_ino]
        subdirs, files = root.clear()

        freed = 0
        for ino in subdirs + files:
            freed += self._free_subtree(ino)

        self._cwd = self._root_ino
        self._logger.info("Filesystem wiped", context={'nodes': freed})
        self._commit()

    # Path-addressed operations

    def write_path(self, path: str, content: str) -> int:
        """Create or overwrite the file at path, creating parent directories."""
        parent, name = self._split_file_path(path, create=True)
        return self.write_file(name, content, directory=parent)

    def read_path(self, path: str) -> str:
        """Read the file at path."""
        parent, name = self._split_file_path(path, create=False)
        return self.read_file(name, directory=parent)

    def remove_path(self, path: str) -> None:
        """Delete the file at path."""
        parent, name = self._split_file_path(path, create=False)
        self.remove_file(name, directory=parent)

    def exists(self, path: str) -> bool:
        """Check whether a directory or file exists at an absolute path."""
        components = PathResolver.components(path)
        if not components:
            return True
        try:
            parent = self._inodes[self.find_dir('/' + '/'.join(components[:-1]))]
        except NotFoundError:
            return False
        name = components[-1]
        return (
            self._find_subdir(parent, name) is not None
            or self._find_file(parent, name) is not None
        )

    # Persistence

    def _commit(self) -> None:
        if self._store is not None and self._config.autosave:
            self.save()

    def save(self) -> None:
        """
        Write the complete disk image.

        Raises:
            PersistenceWriteError: If the store cannot be written. The
                in-memory tree keeps the mutation.
        """
        if self._store is None:
            return
        self._store.save(serialize(self))

    def load(self) -> LoadReport:
        """
        Rebuild the tree from the disk store.

        A missing disk file leaves the tree empty. The tree is reset
        first, so loading twice never duplicates nodes.
        """
        self.cleanup()

        text = self._store.load() if self._store is not None else None
        if text is None:
            self._last_report = LoadReport()
            return self._last_report

        self._last_report = deserialize(text, self)
        if not self._last_report.clean:
            self._logger.warning(
                "Disk image loaded with problems",
                context={
                    'skipped': len(self._last_report.skipped),
                    'truncated': self._last_report.truncated,
                }
            )
        return self._last_report

    def get_stats(self) -> dict[str, Any]:
        """Get filesystem statistics."""
        dirs = sum(1 for inode in self._inodes.values() if inode.is_directory)
        return {
            'directories': dirs - 1,
            'files': len(self._inodes) - dirs,
            'cwd': self.cwd_path if self._cwd in self._inodes else None,
        }
