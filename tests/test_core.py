#!/usr/bin/env python3
"""
GravityOS Core Tests

Tests for the exception hierarchy, logging, configuration and the
subsystem registry.

Run with: python -m pytest tests/ -v
Or: python -m unittest discover tests

Author: YSNRFD
Version: 1.0.0
"""

import json
import logging
import os
import tempfile
import unittest

from gravityos.core.config_loader import Config, ConfigLoader, get_config
from gravityos.core.registry import (
    Subsystem,
    SubsystemPriority,
    SubsystemRegistry,
    SubsystemState,
)
from gravityos.exceptions import (
    GravityOSError,
    FileSystemException,
    NotFoundError,
    AlreadyExistsError,
    CapacityExceededError,
    PersistenceWriteError,
    MalformedRecordError,
    InvalidNameError,
    AppException,
    AppNotFoundError,
    UnknownPackageError,
    PackageAlreadyInstalledError,
    BootFailureError,
    ConfigValidationError,
)
from gravityos.logger import Logger, LogLevel, LogFormatter, get_logger


class TestExceptions(unittest.TestCase):
    """Test the exception hierarchy."""

    def test_error_codes(self):
        """Each exception carries its own code."""
        cases = [
            (NotFoundError("/x"), 4001),
            (AlreadyExistsError("/x/"), 4002),
            (CapacityExceededError("/", kind="directories", limit=3), 4003),
            (PersistenceWriteError("savdisk.txt"), 4004),
            (MalformedRecordError(3, "BOGUS"), 4005),
            (InvalidNameError("a/b"), 4006),
            (AppNotFoundError("x"), 5001),
            (UnknownPackageError("x"), 5002),
            (PackageAlreadyInstalledError("hello"), 5003),
            (BootFailureError("no"), 1001),
            (ConfigValidationError("bad"), 1002),
        ]
        for exc, code in cases:
            with self.subTest(exc=type(exc).__name__):
                self.assertEqual(exc.error_code, code)
                self.assertIsInstance(exc, GravityOSError)
                self.assertIn(str(code), str(exc))

    def test_categories(self):
        """Exceptions group under their subsystem category."""
        self.assertIsInstance(NotFoundError("/x"), FileSystemException)
        self.assertIsInstance(UnknownPackageError("x"), AppException)

    def test_not_found_message(self):
        """NotFoundError names the kind and path."""
        exc = NotFoundError("/docs/a.txt", kind="file")

        self.assertEqual(exc.message, "File not found: /docs/a.txt")
        self.assertEqual(exc.path, "/docs/a.txt")
        self.assertIn("(path=/docs/a.txt)", str(exc))

    def test_malformed_record_context(self):
        """MalformedRecordError keeps line number and reason."""
        exc = MalformedRecordError(7, "FILE nosep", reason="no separator in path")

        self.assertEqual(exc.line_no, 7)
        self.assertEqual(exc.context['line'], 7)
        self.assertEqual(exc.reason, "no separator in path")

    def test_unknown_package_lists_known(self):
        """UnknownPackageError lists the known packages."""
        exc = UnknownPackageError("nope", known=["hello", "simple-notepad"])

        self.assertIn("hello, simple-notepad", str(exc))


class TestLogger(unittest.TestCase):
    """Test the logging system."""

    def tearDown(self):
        Logger.shutdown()

    def test_logger_creation(self):
        """Test logger creation and singleton."""
        log1 = Logger('test1')
        log2 = get_logger('test1')

        self.assertIs(log1, log2)
        self.assertEqual(log1.subsystem, 'test1')

    def test_log_levels(self):
        """Test log level filtering."""
        self.assertTrue(LogLevel.ERROR > LogLevel.INFO)
        self.assertTrue(LogLevel.DEBUG < LogLevel.NOTICE < LogLevel.WARNING)

    def test_session_logs(self):
        """Records land in the in-memory buffer with their context."""
        Logger.initialize(level=LogLevel.DEBUG, console_output=False)

        get_logger('test_buffer').info("Disk image loaded", context={'files': 2})

        logs = Logger.get_session_logs(subsystem='test_buffer')
        self.assertEqual(len(logs), 1)
        self.assertEqual(logs[0]['message'], "Disk image loaded")
        self.assertEqual(logs[0]['level'], 'INFO')
        self.assertEqual(logs[0]['context'], {'files': 2})

    def test_level_filter(self):
        """Records below the configured level are dropped."""
        Logger.initialize(level=LogLevel.WARNING, console_output=False)

        log = get_logger('test_filter')
        log.info("quiet")
        log.warning("loud")

        messages = [entry['message'] for entry in Logger.get_session_logs(subsystem='test_filter')]
        self.assertEqual(messages, ["loud"])

    def test_log_file(self):
        """A log file receives formatted records."""
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'logs', 'gravityos.log')
            Logger.initialize(level=LogLevel.INFO, log_file=path, console_output=False)

            get_logger('test_file').notice("Session started")
            Logger.shutdown()

            with open(path, encoding='utf-8') as f:
                text = f.read()

        self.assertIn("NOTICE", text)
        self.assertIn("[test_file] Session started", text)

    def test_formatter(self):
        """The formatter renders subsystem and context."""
        record = logging.LogRecord(
            'gravityos.filesystem', logging.INFO, __file__, 1, "Saved disk image", None, None
        )
        record.subsystem = 'filesystem'
        record.context = {'dirs': 3}

        line = LogFormatter(use_colors=False).format(record)

        self.assertIn("INFO", line)
        self.assertIn("[filesystem] Saved disk image {dirs=3}", line)


class TestConfig(unittest.TestCase):
    """Test the configuration system."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.loader = ConfigLoader()

    def tearDown(self):
        self.loader.reset()
        self._tmp.cleanup()

    def _write(self, data) -> str:
        path = os.path.join(self._tmp.name, 'config.json')
        with open(path, 'w', encoding='utf-8') as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)
        return path

    def test_default_config(self):
        """Test default configuration values."""
        config = Config()

        self.assertEqual(config.system.name, "GR4V1TYOS")
        self.assertEqual(config.filesystem.disk_file, "savdisk.txt")
        self.assertTrue(config.filesystem.autosave)
        self.assertIsNone(config.filesystem.max_dirs_per_dir)
        self.assertEqual(config.apps.apps_dir, "/apps")
        self.assertEqual(config.apps.extension, ".savapp")
        self.assertEqual(config.shell.wipe_confirmation, "yes")

    def test_singleton(self):
        """The loader is shared."""
        self.assertIs(ConfigLoader(), self.loader)

    def test_load(self):
        """Loaded values override defaults section by section."""
        path = self._write({
            'filesystem': {'disk_file': 'other.txt', 'max_files_per_dir': 5},
            'logging': {'level': 'DEBUG'},
        })

        config = self.loader.load(path)

        self.assertEqual(config.filesystem.disk_file, 'other.txt')
        self.assertEqual(config.filesystem.max_files_per_dir, 5)
        self.assertTrue(config.filesystem.autosave)
        self.assertEqual(config.logging.level, 'DEBUG')
        self.assertEqual(get_config().filesystem.disk_file, 'other.txt')

    def test_missing_file(self):
        """A missing file is a boot failure."""
        with self.assertRaises(BootFailureError):
            self.loader.load(os.path.join(self._tmp.name, 'nope.json'))

    def test_invalid_json(self):
        """Invalid JSON is a boot failure."""
        with self.assertRaises(BootFailureError):
            self.loader.load(self._write('{not json'))

    def test_unknown_key(self):
        """Unknown keys are rejected with their dotted name."""
        with self.assertRaises(ConfigValidationError) as ctx:
            self.loader.load(self._write({'filesystem': {'bogus': 1}}))

        self.assertEqual(ctx.exception.key, 'filesystem.bogus')

    def test_invalid_values(self):
        """Out-of-range values are rejected."""
        bad = [
            {'filesystem': {'max_dirs_per_dir': 0}},
            {'filesystem': {'disk_file': ''}},
            {'apps': {'apps_dir': 'apps'}},
            {'apps': {'extension': 'savapp'}},
            {'logging': {'level': 'LOUD'}},
        ]
        for data in bad:
            with self.subTest(data=data):
                with self.assertRaises(ConfigValidationError):
                    self.loader.parse(data)

    def test_get_and_set(self):
        """Dotted keys read and write values."""
        self.assertEqual(self.loader.get('apps.extension'), '.savapp')
        self.assertEqual(self.loader.get('apps.nope', 'fallback'), 'fallback')

        self.loader.set('filesystem.autosave', False)
        self.assertFalse(get_config().filesystem.autosave)

        with self.assertRaises(ConfigValidationError):
            self.loader.set('filesystem.nope', 1)


class _Recorder(Subsystem):
    """Subsystem that records its lifecycle calls."""

    def __init__(self, name, calls, fail=False):
        super().__init__(name)
        self._calls = calls
        self._fail = fail

    def initialize(self):
        if self._fail:
            raise RuntimeError("broken")
        self._calls.append(f"init:{self.name}")

    def stop(self):
        self._calls.append(f"stop:{self.name}")

    def cleanup(self):
        self._calls.append(f"cleanup:{self.name}")


class TestSubsystemRegistry(unittest.TestCase):
    """Test subsystem lifecycle ordering."""

    def test_priority_order(self):
        """Initialize by priority, shut down in reverse."""
        calls = []
        registry = SubsystemRegistry()
        registry.register(_Recorder('apps', calls), priority=SubsystemPriority.HIGH)
        registry.register(_Recorder('filesystem', calls), priority=SubsystemPriority.CRITICAL)

        registry.initialize_all()
        self.assertEqual(calls, ['init:filesystem', 'init:apps'])
        self.assertEqual(registry.get('apps').state, SubsystemState.RUNNING)

        calls.clear()
        registry.shutdown_all()
        self.assertEqual(
            calls,
            ['stop:apps', 'cleanup:apps', 'stop:filesystem', 'cleanup:filesystem']
        )

    def test_duplicate_name(self):
        """Names are unique."""
        registry = SubsystemRegistry()
        registry.register(_Recorder('a', []))

        with self.assertRaises(ValueError):
            registry.register(_Recorder('a', []))

    def test_failure_state(self):
        """A failing subsystem is left in ERROR and the error propagates."""
        registry = SubsystemRegistry()
        broken = _Recorder('broken', [], fail=True)
        registry.register(broken)

        with self.assertRaises(RuntimeError):
            registry.initialize_all()

        self.assertEqual(broken.state, SubsystemState.ERROR)
        self.assertFalse(registry.list_subsystems()[0]['healthy'])

    def test_missing_subsystem(self):
        with self.assertRaises(KeyError):
            SubsystemRegistry().get('nope')


if __name__ == '__main__':
    unittest.main()
