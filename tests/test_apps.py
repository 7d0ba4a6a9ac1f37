#!/usr/bin/env python3
"""
GravityOS App Tests

Tests for app records, the app registry, the package installer and the
app runner.

Author: YSNRFD
Version: 1.0.0
"""

import io
import random
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

from gravityos.apps import (
    AppRecord,
    AppRegistry,
    AppRunner,
    PackageInstaller,
    PayloadKind,
    evaluate,
    parse_app_file,
    parse_payload,
    read_text_block,
    render_app_file,
)
from gravityos.core.config_loader import AppsConfig, FilesystemConfig, SystemConfig
from gravityos.exceptions import (
    AppNotFoundError,
    PackageAlreadyInstalledError,
    PersistenceWriteError,
    UnknownPackageError,
)
from gravityos.filesystem import DiskStore, VirtualFileSystem


HELLO_APP = "APP_NAME=hello\nAPP_DESC=x\nCODE=PRINT:hi\nENDAPP\n"


class FixedRandom(random.Random):
    """Random source whose randint always returns the same number."""

    def __init__(self, value):
        super().__init__()
        self.value = value

    def randint(self, a, b):
        return self.value


class AppTestCase(unittest.TestCase):
    """Fresh filesystem and app registry per test."""

    def setUp(self):
        self.vfs = VirtualFileSystem(FilesystemConfig())
        self.apps = AppRegistry(self.vfs, AppsConfig())
        self.apps.initialize()
        self.installer = PackageInstaller(self.vfs, self.apps)
        self.runner = AppRunner(self.vfs, self.apps, SystemConfig(), rng=FixedRandom(42))

    def run_app(self, name, inputs=()):
        """Run an app with scripted input and return what it printed."""
        out = io.StringIO()
        with mock.patch('builtins.input', side_effect=list(inputs)), redirect_stdout(out):
            self.runner.run(name)
        return out.getvalue()


class TestAppRecords(unittest.TestCase):
    """Test the app file format and payloads."""

    def test_hello_scenario(self):
        record = parse_app_file(HELLO_APP)

        self.assertEqual(record.name, 'hello')
        self.assertEqual(record.description, 'x')
        self.assertFalse(record.builtin)
        self.assertEqual(record.payload.kind, PayloadKind.PRINT)
        self.assertEqual(record.payload.text, 'hi')

    def test_missing_name(self):
        self.assertIsNone(parse_app_file("APP_DESC=nameless\nCODE=PRINT:x\nENDAPP\n"))
        self.assertIsNone(parse_app_file(""))

    def test_multiline_code(self):
        """CODE takes following lines up to ENDAPP; the rest is ignored."""
        record = parse_app_file(
            "APP_DESC=d\nAPP_NAME=r\nCODE=line1\nline2\n\nENDAPP\nAPP_NAME=ignored\n"
        )

        self.assertEqual(record.name, 'r')
        self.assertEqual(record.code, 'line1\nline2\n\n')
        self.assertEqual(record.payload, parse_payload('line1\nline2\n\n'))
        self.assertEqual(record.payload.kind, PayloadKind.RAW)

    def test_code_without_endapp(self):
        record = parse_app_file("APP_NAME=r\nCODE=a\nb")

        self.assertEqual(record.code, 'a\nb\n')

    def test_payload_kinds(self):
        self.assertEqual(parse_payload('BUILTIN_CALC', builtin=True).kind, PayloadKind.BUILTIN)
        self.assertEqual(parse_payload('PRINT:hello\n').text, 'hello')

        capture = parse_payload('SCRIPT:NOTEPAD  out.txt\n')
        self.assertEqual(capture.kind, PayloadKind.SCRIPTED_CAPTURE)
        self.assertEqual(capture.text, 'out.txt')

        self.assertEqual(parse_payload('SCRIPT:NOTEPAD').text, '')
        self.assertEqual(parse_payload('echo me\n').text, 'echo me')

    def test_render(self):
        text = render_app_file('hello', 'x', 'PRINT:hi')

        self.assertEqual(text, HELLO_APP)

    def test_to_dict(self):
        record = AppRecord('calculator', 'calc', 'BUILTIN_CALC', builtin=True)

        self.assertEqual(record.to_dict()['type'], 'built-in')


class TestAppRegistry(AppTestCase):
    """Test the builtin and installed app lists."""

    def test_builtins(self):
        names = [record.name for record in self.apps.list()]

        self.assertEqual(names, ['calculator', 'notepad', 'numbergame', 'about'])
        self.assertTrue(self.apps.lookup('calculator').builtin)
        self.assertEqual(self.apps.list_installed(), [])

    def test_lookup_missing(self):
        with self.assertRaises(AppNotFoundError):
            self.apps.lookup('nope')

    def test_refresh_does_not_create_apps_dir(self):
        self.assertEqual(self.apps.refresh(), 0)
        self.assertFalse(self.vfs.exists('/apps'))

    def test_refresh_scans_app_files(self):
        """Only named .savapp files directly in /apps are registered."""
        self.vfs.write_path('/apps/hello.savapp', HELLO_APP)
        self.vfs.write_path('/apps/readme.txt', HELLO_APP.replace('hello', 'readme'))
        self.vfs.write_path('/apps/nameless.savapp', "CODE=PRINT:x\n")
        self.vfs.write_path('/apps/sub/deep.savapp', HELLO_APP.replace('hello', 'deep'))

        self.assertEqual(self.apps.refresh(), 1)

        record = self.apps.lookup('hello')
        self.assertFalse(record.builtin)
        self.assertEqual(record.source, '/apps/hello.savapp')

    def test_refresh_replaces_cache(self):
        self.vfs.write_path('/apps/hello.savapp', HELLO_APP)
        self.apps.refresh()
        self.vfs.remove_path('/apps/hello.savapp')

        self.apps.refresh()

        with self.assertRaises(AppNotFoundError):
            self.apps.lookup('hello')

    def test_builtin_wins(self):
        self.vfs.write_path('/apps/about.savapp', "APP_NAME=about\nCODE=PRINT:fake\n")
        self.apps.refresh()

        self.assertTrue(self.apps.lookup('about').builtin)
        self.assertEqual(len(self.apps.list_installed()), 1)

    def test_register_and_unregister(self):
        self.apps.register(AppRecord('mine', 'd', 'PRINT:x'))

        self.assertEqual(self.apps.unregister('mine').name, 'mine')
        with self.assertRaises(AppNotFoundError):
            self.apps.unregister('mine')
        with self.assertRaises(AppNotFoundError):
            self.apps.unregister('calculator')

    def test_purge_installed(self):
        self.apps.register(AppRecord('a', '', ''))
        self.apps.register(AppRecord('b', '', ''))

        self.assertEqual(self.apps.purge_installed(), 2)
        self.assertEqual(len(self.apps.list()), 4)


class TestPackageInstaller(AppTestCase):
    """Test install and uninstall."""

    def test_install_hello(self):
        record = self.installer.install('hello')

        self.assertEqual(record.name, 'hello')
        self.assertEqual(record.description, 'Simple Hello App')
        self.assertEqual(
            self.vfs.read_path('/apps/hello.savapp'),
            "APP_NAME=hello\n"
            "APP_DESC=Simple Hello App\n"
            "CODE=PRINT:Hello from installed Hello App!\n"
            "ENDAPP\n"
        )

    def test_install_twice(self):
        self.installer.install('hello')

        with self.assertRaises(PackageAlreadyInstalledError):
            self.installer.install('hello')

    def test_unknown_package(self):
        with self.assertRaises(UnknownPackageError) as ctx:
            self.installer.install('nope')

        self.assertEqual(ctx.exception.known, ['hello', 'simple-notepad'])
        self.assertFalse(self.vfs.exists('/apps'))

    def test_uninstall_by_app_name(self):
        """Apps are uninstalled by the name inside the file."""
        self.installer.install('simple-notepad')
        self.assertEqual(self.apps.lookup('snotepad').source, '/apps/simple-notepad.savapp')

        path = self.installer.uninstall('snotepad')

        self.assertEqual(path, '/apps/simple-notepad.savapp')
        self.assertFalse(self.vfs.exists(path))
        with self.assertRaises(AppNotFoundError):
            self.apps.lookup('snotepad')

    def test_cache_follows_files_when_save_fails(self):
        """The app cache is rebuilt even when the disk image cannot be written."""
        with tempfile.TemporaryDirectory() as tmp:
            vfs = VirtualFileSystem(FilesystemConfig(), DiskStore(tmp))
            apps = AppRegistry(vfs, AppsConfig())
            apps.initialize()
            installer = PackageInstaller(vfs, apps)

            with self.assertRaises(PersistenceWriteError):
                installer.install('hello')

            self.assertTrue(vfs.exists('/apps/hello.savapp'))
            self.assertFalse(apps.lookup('hello').builtin)

            with self.assertRaises(PersistenceWriteError):
                installer.uninstall('hello')

            self.assertFalse(vfs.exists('/apps/hello.savapp'))
            with self.assertRaises(AppNotFoundError):
                apps.lookup('hello')

    def test_uninstall_missing(self):
        with self.assertRaises(AppNotFoundError):
            self.installer.uninstall('hello')
        with self.assertRaises(AppNotFoundError):
            self.installer.uninstall('calculator')


class TestAppRunner(AppTestCase):
    """Test running builtin and installed apps."""

    def test_evaluate(self):
        self.assertEqual(evaluate('5 * 3'), 15.0)
        self.assertEqual(evaluate('-1.5*2'), -3.0)
        self.assertEqual(evaluate('1e2 / 4'), 25.0)
        with self.assertRaises(ValueError):
            evaluate('5 % 3')
        with self.assertRaises(ZeroDivisionError):
            evaluate('1 / 0')

    def test_read_text_block(self):
        with mock.patch('builtins.input', side_effect=['a', 'b', 'END', 'c']):
            self.assertEqual(read_text_block(), 'a\nb\n')
        with mock.patch('builtins.input', side_effect=['a', EOFError]):
            self.assertEqual(read_text_block(), 'a\n')

    def test_calculator(self):
        self.assertIn("Result: 15", self.run_app('calculator', ['5 * 3']))
        self.assertIn("Result: 0.333333", self.run_app('calculator', ['1 / 3']))
        self.assertIn("Error: divide by zero.", self.run_app('calculator', ['1 / 0']))
        self.assertIn("Invalid input.", self.run_app('calculator', ['abc']))

    def test_notepad(self):
        output = self.run_app('notepad', ['memo.txt', 'l1', 'l2', 'END'])

        self.assertIn("File 'memo.txt' saved.", output)
        self.assertEqual(self.vfs.read_file('memo.txt'), 'l1\nl2\n')

        output = self.run_app('notepad', ['memo.txt', 'new', 'END'])

        self.assertIn("File 'memo.txt' overwritten.", output)
        self.assertEqual(self.vfs.read_file('memo.txt'), 'new\n')

    def test_read_line_source(self):
        """A given line source replaces the terminal."""
        lines = iter(['memo.txt', 'x', 'END'])

        with mock.patch('builtins.input') as terminal, redirect_stdout(io.StringIO()):
            self.runner.run('notepad', read_line=lambda prompt: next(lines))

        terminal.assert_not_called()
        self.assertEqual(self.vfs.read_file('memo.txt'), 'x\n')

    def test_notepad_writes_to_cwd(self):
        self.vfs.make_dir('docs')
        self.vfs.change_dir('docs')

        self.run_app('notepad', ['memo.txt', 'x', 'END'])

        self.assertEqual(self.vfs.read_path('/docs/memo.txt'), 'x\n')

    def test_numbergame(self):
        output = self.run_app('numbergame', ['50', 'x', '10', '42'])

        self.assertIn("Too high!", output)
        self.assertIn("Invalid. Try again.", output)
        self.assertIn("Too low!", output)
        self.assertIn("Correct! You took 3 tries.", output)

    def test_about(self):
        self.assertIn("GR4V1TYOS Virtual Shell v4.0", self.run_app('about'))

    def test_installed_print(self):
        """The hello scenario prints its text."""
        self.vfs.write_path('/apps/hello.savapp', HELLO_APP)
        self.apps.refresh()

        self.assertEqual(self.run_app('hello'), "hi\n")

    def test_installed_scripted_capture(self):
        self.installer.install('simple-notepad')

        output = self.run_app('snotepad', ['hi', 'END'])

        self.assertIn("saving to 'default_note.txt'", output)
        self.assertEqual(self.vfs.read_file('default_note.txt'), 'hi\n')

    def test_installed_capture_without_target(self):
        self.vfs.write_path('/apps/n.savapp', "APP_NAME=n\nCODE=SCRIPT:NOTEPAD\nENDAPP\n")
        self.apps.refresh()

        self.assertIn("Installed notepad missing filename.", self.run_app('n'))

    def test_installed_raw(self):
        self.vfs.write_path('/apps/r.savapp', "APP_NAME=r\nCODE=echo me\nENDAPP\n")
        self.apps.refresh()

        self.assertEqual(self.run_app('r'), "--- App Output ---\necho me\n--- End ---\n")

    def test_run_missing(self):
        with self.assertRaises(AppNotFoundError):
            self.runner.run('nope')


if __name__ == '__main__':
    unittest.main()
