"""
GravityOS Logger Module

Logging for the shell session that provides:
- Structured logging with contextual information
- Multiple log levels (DEBUG, INFO, NOTICE, WARNING, ERROR, CRITICAL)
- Optional file output
- An in-memory buffer of recent session events
- Subsystem-specific loggers

Author: YSNRFD
Version: 1.0.0
"""

import logging
import sys
import threading
from collections import deque
from enum import IntEnum
from pathlib import Path
from typing import Optional, Any, List


class LogLevel(IntEnum):
    """Log levels, NOTICE included, ordered by severity."""
    DEBUG = 10
    INFO = 20
    NOTICE = 25
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


logging.addLevelName(LogLevel.NOTICE, 'NOTICE')


class LogFormatter(logging.Formatter):
    """
    Log formatter for GravityOS.

    Produces lines of the form:
        [2026-01-01 12:00:00.000] INFO     [filesystem] Saved disk image {dirs=3 files=5}
    """

    LEVEL_COLORS = {
        LogLevel.DEBUG: '\033[2m',
        LogLevel.INFO: '\033[32m',
        LogLevel.NOTICE: '\033[1;34m',
        LogLevel.WARNING: '\033[33m',
        LogLevel.ERROR: '\033[1;31m',
        LogLevel.CRITICAL: '\033[1;41m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, stream: Any = None):
        super().__init__(datefmt='%Y-%m-%d %H:%M:%S')
        self.use_colors = use_colors and self._supports_color(stream or sys.stderr)

    @staticmethod
    def _supports_color(stream: Any) -> bool:
        isatty = getattr(stream, 'isatty', None)
        return bool(isatty and isatty())

    def _level(self, record: logging.LogRecord) -> str:
        padded = record.levelname.ljust(8)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        return f"{color}{padded}{self.RESET}" if color else padded

    def format(self, record: logging.LogRecord) -> str:
        stamp = f"{self.formatTime(record, self.datefmt)}.{int(record.msecs):03d}"
        parts = [f"[{stamp}]", self._level(record)]

        subsystem = getattr(record, 'subsystem', None)
        if subsystem:
            parts.append(f"[{subsystem}]")

        parts.append(record.getMessage())

        context = getattr(record, 'context', None)
        if context:
            parts.append("{" + " ".join(f"{key}={value}" for key, value in context.items()) + "}")

        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class SessionLogHandler(logging.Handler):
    """
    Keeps the most recent log events in memory.

    Lets the shell and the tests inspect what the session did without
    scraping console output.
    """

    def __init__(self, max_entries: int = 1000):
        super().__init__()
        self._events: deque = deque(maxlen=max_entries)
        self._events_lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._events.maxlen

    def emit(self, record: logging.LogRecord) -> None:
        event = {
            'timestamp': record.created,
            'level': record.levelname,
            'subsystem': getattr(record, 'subsystem', None),
            'message': record.getMessage(),
            'context': dict(getattr(record, 'context', None) or {}),
        }
        with self._events_lock:
            self._events.append(event)

    def get_logs(
        self,
        level: Optional[str] = None,
        subsystem: Optional[str] = None,
        limit: int = 100
    ) -> List[dict[str, Any]]:
        """Return up to limit of the newest matching events, oldest first."""
        with self._events_lock:
            events = list(self._events)

        matching = [
            event for event in events
            if (level is None or event['level'] == level)
            and (subsystem is None or event['subsystem'] == subsystem)
        ]
        return matching[-limit:]

    def clear(self) -> None:
        with self._events_lock:
            self._events.clear()


class Logger:
    """
    Main logging class for GravityOS.

    One instance per subsystem name, all children of the 'gravityos'
    stdlib logger. Until Logger.initialize() runs, records propagate to
    whatever the host application configured.

    Example:
        >>> log = Logger('filesystem')
        >>> log.info("Disk image loaded", context={'files': 4})
    """

    ROOT_NAME = 'gravityos'

    _registry: dict[str, 'Logger'] = {}
    _lock = threading.Lock()
    _initialized = False
    _session_handler: Optional[SessionLogHandler] = None
    _handlers: List[logging.Handler] = []

    def __new__(cls, subsystem: str = 'session') -> 'Logger':
        with cls._lock:
            logger = cls._registry.get(subsystem)
            if logger is None:
                logger = super().__new__(cls)
                logger._subsystem = subsystem
                logger._logger = logging.getLogger(f'{cls.ROOT_NAME}.{subsystem}')
                cls._registry[subsystem] = logger
            return logger

    @property
    def subsystem(self) -> str:
        return self._subsystem

    @classmethod
    def initialize(
        cls,
        level: int = LogLevel.INFO,
        log_file: Optional[str] = None,
        console_output: bool = True,
        use_colors: bool = True
    ) -> None:
        """
        Attach the session buffer, and optionally console and file
        output, to the 'gravityos' logger.

        Only the first call has an effect until shutdown() is called.

        Args:
            level: Minimum level that is recorded anywhere
            log_file: Host path for a plain-text log, created with its
                parent directories
            console_output: Whether to log to stderr
            use_colors: Colour level names when stderr is a terminal
        """
        with cls._lock:
            if cls._initialized:
                return

            cls._session_handler = SessionLogHandler()
            handlers: List[logging.Handler] = [cls._session_handler]

            if console_output:
                console = logging.StreamHandler(sys.stderr)
                console.setFormatter(LogFormatter(use_colors=use_colors))
                handlers.append(console)

            if log_file:
                Path(log_file).parent.mkdir(parents=True, exist_ok=True)
                log_handler = logging.FileHandler(log_file, encoding='utf-8')
                log_handler.setFormatter(LogFormatter(use_colors=False))
                handlers.append(log_handler)

            base = logging.getLogger(cls.ROOT_NAME)
            base.setLevel(level)
            for handler in handlers:
                handler.setLevel(level)
                base.addHandler(handler)

            cls._handlers = handlers
            cls._initialized = True

    @classmethod
    def shutdown(cls) -> None:
        """Detach and close every handler installed by initialize()."""
        with cls._lock:
            base = logging.getLogger(cls.ROOT_NAME)
            for handler in cls._handlers:
                base.removeHandler(handler)
                handler.close()
            cls._handlers = []
            cls._session_handler = None
            cls._initialized = False

    @classmethod
    def get_session_logs(
        cls,
        level: Optional[str] = None,
        subsystem: Optional[str] = None,
        limit: int = 100
    ) -> List[dict[str, Any]]:
        """Get logs from the in-memory session buffer."""
        if cls._session_handler is None:
            return []
        return cls._session_handler.get_logs(level=level, subsystem=subsystem, limit=limit)

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[dict[str, Any]] = None,
        exc_info: Any = None
    ) -> None:
        self._logger.log(
            level,
            message,
            extra={'subsystem': self._subsystem, 'context': context or {}},
            exc_info=exc_info
        )

    def debug(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.INFO, message, context)

    def notice(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Between info and warning; used for session milestones."""
        self._log(LogLevel.NOTICE, message, context)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.WARNING, message, context)

    def error(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.ERROR, message, context)

    def critical(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.CRITICAL, message, context)

    def exception(
        self,
        message: str,
        exc: Optional[BaseException] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Log at ERROR with the traceback of exc, or of the exception being handled."""
        self._log(LogLevel.ERROR, message, context, exc_info=exc or True)


def get_logger(subsystem: str) -> Logger:
    """Get the logger for a subsystem such as 'filesystem', 'apps' or 'shell'."""
    return Logger(subsystem)
