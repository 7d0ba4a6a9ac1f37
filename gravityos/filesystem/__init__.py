"""
GravityOS Virtual File System Module

Provides the in-memory file system:
- Inode-based directory tree
- Path resolution
- Tree operations
- Flat-text disk image and its host file
"""

from .inode import Inode, NodeType, validate_name
from .path_resolver import PathResolver, ParsedPath
from .disk_image import serialize, deserialize, LoadReport
from .disk_store import DiskStore
from .vfs import VirtualFileSystem, ROOT_INO

__all__ = [
    # Inode
    'Inode',
    'NodeType',
    'validate_name',
    # Path Resolver
    'PathResolver',
    'ParsedPath',
    # Disk image
    'serialize',
    'deserialize',
    'LoadReport',
    'DiskStore',
    # VFS
    'VirtualFileSystem',
    'ROOT_INO',
]
