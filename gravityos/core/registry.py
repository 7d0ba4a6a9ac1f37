"""
GravityOS Subsystem Registry

Lifecycle management for the pieces a session is made of:
- Subsystem registration
- Ordered initialization and start
- Reverse-order stop and cleanup

Author: YSNRFD
Version: 1.0.0
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, List

from gravityos.logger import Logger, get_logger


class SubsystemState(Enum):
    """Lifecycle state of a subsystem."""
    UNREGISTERED = auto()
    REGISTERED = auto()
    INITIALIZING = auto()
    INITIALIZED = auto()
    RUNNING = auto()
    STOPPED = auto()
    ERROR = auto()


class SubsystemPriority(Enum):
    """Initialization priority for subsystems."""
    CRITICAL = 0     # filesystem: everything else reads from it
    HIGH = 10        # app registry
    NORMAL = 20      # installer, runner


@dataclass
class SubsystemInfo:
    """Information about a registered subsystem."""
    name: str
    instance: 'Subsystem'
    priority: SubsystemPriority
    order: int
    error: Optional[Exception] = None


class Subsystem(ABC):
    """
    Abstract base class for all session subsystems.

    Lifecycle:
        1. __init__() - Subsystem is created
        2. initialize() - Subsystem is initialized
        3. start() - Subsystem starts operation
        4. stop() - Subsystem stops operation
        5. cleanup() - Subsystem releases its resources
    """

    def __init__(self, name: str):
        self._name = name
        self._logger = get_logger(name)
        self._state = SubsystemState.UNREGISTERED

    @property
    def name(self) -> str:
        """Get the subsystem name."""
        return self._name

    @property
    def state(self) -> SubsystemState:
        """Get the current state."""
        return self._state

    @property
    def logger(self) -> Logger:
        """Get the subsystem logger."""
        return self._logger

    def set_state(self, state: SubsystemState) -> None:
        """Set the subsystem state."""
        self._state = state
        self._logger.debug(f"State changed to {state.name}")

    @abstractmethod
    def initialize(self) -> None:
        """
        Initialize the subsystem.

        Called during boot, after every subsystem with a higher
        priority has been initialized.
        """

    def start(self) -> None:
        """Start the subsystem. Default implementation does nothing."""

    def stop(self) -> None:
        """Stop the subsystem. Default implementation does nothing."""

    def cleanup(self) -> None:
        """Release subsystem resources. Default implementation does nothing."""

    def health_check(self) -> bool:
        """Check if the subsystem is usable."""
        return self._state in (
            SubsystemState.INITIALIZED,
            SubsystemState.RUNNING
        )


class SubsystemRegistry:
    """
    Registry for the subsystems of one session.

    Unlike a process-wide service locator, each Session owns its own
    registry so that several sessions (e.g. in tests) never share state.

    Example:
        >>> registry = SubsystemRegistry()
        >>> registry.register(vfs, priority=SubsystemPriority.CRITICAL)
        >>> registry.initialize_all()
        >>> registry.get('filesystem') is vfs
        True
    """

    def __init__(self):
        self._subsystems: dict[str, SubsystemInfo] = {}
        self._logger = get_logger('registry')

    def register(
        self,
        subsystem: Subsystem,
        priority: SubsystemPriority = SubsystemPriority.NORMAL
    ) -> None:
        """
        Register a subsystem under its own name.

        Raises:
            ValueError: If a subsystem with that name already exists
        """
        if subsystem.name in self._subsystems:
            raise ValueError(f"Subsystem '{subsystem.name}' already registered")

        self._subsystems[subsystem.name] = SubsystemInfo(
            name=subsystem.name,
            instance=subsystem,
            priority=priority,
            order=len(self._subsystems),
        )
        subsystem.set_state(SubsystemState.REGISTERED)

        self._logger.debug(
            f"Registered subsystem '{subsystem.name}'",
            context={'priority': priority.name}
        )

    def get(self, name: str) -> Subsystem:
        """
        Get a subsystem by name.

        Raises:
            KeyError: If subsystem not found
        """
        if name not in self._subsystems:
            raise KeyError(f"Subsystem '{name}' not found")
        return self._subsystems[name].instance

    def _ordered(self) -> List[SubsystemInfo]:
        return sorted(
            self._subsystems.values(),
            key=lambda info: (info.priority.value, info.order)
        )

    def initialize_all(self) -> None:
        """
        Initialize and start every registered subsystem in priority order.

        Raises:
            Exception: Whatever the failing subsystem raised; it is left
                in the ERROR state.
        """
        for info in self._ordered():
            subsystem = info.instance
            if subsystem.state != SubsystemState.REGISTERED:
                continue
            try:
                subsystem.set_state(SubsystemState.INITIALIZING)
                subsystem.initialize()
                subsystem.set_state(SubsystemState.INITIALIZED)
                subsystem.start()
                subsystem.set_state(SubsystemState.RUNNING)
            except Exception as e:
                info.error = e
                subsystem.set_state(SubsystemState.ERROR)
                self._logger.error(
                    f"Failed to initialize '{info.name}': {e}",
                    context={'error': type(e).__name__}
                )
                raise

    def shutdown_all(self) -> None:
        """Stop and clean up every subsystem in reverse priority order."""
        for info in reversed(self._ordered()):
            subsystem = info.instance
            if subsystem.state == SubsystemState.RUNNING:
                try:
                    subsystem.stop()
                except Exception as e:
                    info.error = e
                    self._logger.error(f"Error stopping '{info.name}': {e}")
                subsystem.set_state(SubsystemState.STOPPED)
            if subsystem.state in (SubsystemState.INITIALIZED, SubsystemState.STOPPED):
                subsystem.cleanup()

    def list_subsystems(self) -> List[dict[str, Any]]:
        """List all registered subsystems with their status."""
        return [
            {
                'name': info.name,
                'priority': info.priority.name,
                'state': info.instance.state.name,
                'healthy': info.instance.health_check(),
            }
            for info in self._ordered()
        ]
