"""
GravityOS - A Persistent Virtual Filesystem Shell

This package provides a single-user virtual filesystem that is saved to
a plain text disk image after every change, an app registry with
installable apps, and an interactive shell on top.
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

from .core.session import Session, SessionState
from .core.bootloader import Bootloader, BootResult, BootStage, boot_session
from .filesystem.vfs import VirtualFileSystem
from .shell.shell import Shell, create_shell

__all__ = [
    'Session',
    'SessionState',
    'Bootloader',
    'BootResult',
    'BootStage',
    'boot_session',
    'VirtualFileSystem',
    'Shell',
    'create_shell',
]
