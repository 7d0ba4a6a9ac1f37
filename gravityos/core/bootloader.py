"""
GravityOS Bootloader

The bootloader is responsible for:
- Loading configuration
- Initializing logging
- Creating and booting the session
- Handling boot failures

Author: YSNRFD
Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional, Union
import time

from gravityos.core.config_loader import ConfigLoader, get_config
from gravityos.core.session import Session
from gravityos.exceptions import BootFailureError, GravityOSError
from gravityos.logger import Logger, LogLevel, get_logger


class BootStage(Enum):
    """Boot process stages."""
    PRE_INIT = auto()
    CONFIG_LOAD = auto()
    LOGGING_INIT = auto()
    SESSION_INIT = auto()
    COMPLETE = auto()
    FAILED = auto()


@dataclass
class BootResult:
    """Result of the boot process."""
    success: bool
    stage: BootStage
    message: str
    elapsed_time: float
    error: Optional[Exception] = None


class Bootloader:
    """
    The session bootloader.

    Boot Sequence:
        1. Load configuration (defaults if the file is missing)
        2. Initialize logging
        3. Create the session and load the disk image
        4. Complete

    Example:
        >>> bootloader = Bootloader('config.json')
        >>> result = bootloader.boot()
        >>> if result.success:
        ...     session = bootloader.get_session()
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = "config.json",
        disk_file: Optional[Union[str, Path]] = None
    ):
        self._config_path = config_path
        self._disk_file = disk_file
        self._stage = BootStage.PRE_INIT
        self._logger: Optional[Logger] = None
        self._session: Optional[Session] = None

    @property
    def stage(self) -> BootStage:
        """Get the current boot stage."""
        return self._stage

    def get_session(self) -> Optional[Session]:
        """Get the booted session."""
        return self._session

    def boot(self) -> BootResult:
        """
        Execute the boot sequence.

        Returns:
            BootResult indicating success or failure
        """
        start_time = time.time()

        try:
            self._stage = BootStage.CONFIG_LOAD
            self._load_config()

            self._stage = BootStage.LOGGING_INIT
            self._init_logging()
            self._logger = get_logger('bootloader')

            self._stage = BootStage.SESSION_INIT
            self._session = Session(get_config(), disk_file=self._disk_file)
            self._session.boot()

            self._stage = BootStage.COMPLETE
            elapsed = time.time() - start_time
            self._logger.info(
                "Boot complete",
                context={'elapsed_ms': f"{elapsed * 1000:.2f}"}
            )

            return BootResult(
                success=True,
                stage=self._stage,
                message="Session booted successfully",
                elapsed_time=elapsed
            )

        except GravityOSError as e:
            failed_stage = self._stage
            self._stage = BootStage.FAILED
            if self._logger:
                self._logger.critical(f"Boot failed at stage {failed_stage.name}: {e}")

            return BootResult(
                success=False,
                stage=failed_stage,
                message=f"Boot failed: {e.message}",
                elapsed_time=time.time() - start_time,
                error=e
            )

    def _load_config(self) -> None:
        """Load configuration, keeping defaults if there is no file."""
        loader = ConfigLoader()
        if self._config_path is None or not Path(self._config_path).exists():
            return
        loader.load(str(self._config_path))

    def _init_logging(self) -> None:
        """Initialize the logging system."""
        config = get_config()
        try:
            level = LogLevel[config.logging.level]
        except KeyError:
            raise BootFailureError(
                f"Unknown log level: {config.logging.level}",
                subsystem="logging"
            )

        Logger.initialize(
            level=level,
            log_file=config.logging.log_file,
            console_output=config.logging.console_output
        )

    def shutdown(self) -> None:
        """Shut down the session and the logging system."""
        if self._session is not None:
            self._session.shutdown()
        if self._logger:
            self._logger.info("Bootloader shutdown complete")
        Logger.shutdown()


def boot_session(
    config_path: Optional[Union[str, Path]] = "config.json",
    disk_file: Optional[Union[str, Path]] = None
) -> Session:
    """
    Boot a session in one call.

    Raises:
        BootFailureError: If the boot sequence fails
    """
    bootloader = Bootloader(config_path, disk_file)
    result = bootloader.boot()
    if not result.success:
        raise BootFailureError(result.message, subsystem=result.stage.name.lower())
    return bootloader.get_session()
