"""
GravityOS Core Module

Core session components including:
- Subsystem Registry
- Configuration Loader

The Session and the Bootloader live in gravityos.core.session and
gravityos.core.bootloader, since they depend on every other package.
"""

from .registry import (
    SubsystemRegistry,
    Subsystem,
    SubsystemState,
    SubsystemPriority,
)
from .config_loader import ConfigLoader, Config, get_config

__all__ = [
    # Registry
    'SubsystemRegistry',
    'Subsystem',
    'SubsystemState',
    'SubsystemPriority',
    # Config
    'ConfigLoader',
    'Config',
    'get_config',
]
