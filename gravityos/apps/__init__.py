"""
GravityOS Apps Module

Provides the app library:
- App records and the installed app file format
- Registry of builtin and installed apps
- Package installer
- App runner
"""

from .records import (
    AppRecord,
    AppPayload,
    PayloadKind,
    parse_payload,
    parse_app_file,
    render_app_file,
)
from .registry import AppRegistry, BUILTIN_APPS
from .installer import PackageInstaller, Package, KNOWN_PACKAGES
from .runner import AppRunner, read_text_block, evaluate

__all__ = [
    # Records
    'AppRecord',
    'AppPayload',
    'PayloadKind',
    'parse_payload',
    'parse_app_file',
    'render_app_file',
    # Registry
    'AppRegistry',
    'BUILTIN_APPS',
    # Installer
    'PackageInstaller',
    'Package',
    'KNOWN_PACKAGES',
    # Runner
    'AppRunner',
    'read_text_block',
    'evaluate',
]
