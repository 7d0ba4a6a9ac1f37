"""
App Runner Module

Runs apps by name: the builtin mini-programs and a small interpreter
for the code of installed apps.

Author: YSNRFD
Version: 1.0.0
"""

import random
import re
from typing import Callable, Optional

from .records import AppRecord, PayloadKind
from .registry import (
    AppRegistry,
    BUILTIN_CALC,
    BUILTIN_NOTEPAD,
    BUILTIN_NUMBERGAME,
    BUILTIN_ABOUT,
)
from gravityos.core.config_loader import SystemConfig, get_config
from gravityos.filesystem.vfs import VirtualFileSystem
from gravityos.logger import get_logger


TEXT_TERMINATOR = 'END'

ReadLine = Callable[[str], str]

_NUMBER = r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?'
_EXPRESSION = re.compile(rf'^\s*({_NUMBER})\s*([-+*/])\s*({_NUMBER})\s*$')


def read_text_block(prompt: str = '', read_line: Optional[ReadLine] = None) -> str:
    """
    Read lines until a line equal to END or end of input.

    Lines come from read_line, or from input() when it is not given.

    Returns:
        The lines read, each followed by a newline
    """
    read_line = read_line or input
    lines = []
    while True:
        try:
            line = read_line(prompt)
        except EOFError:
            break
        if line.rstrip('\r') == TEXT_TERMINATOR:
            break
        lines.append(line + '\n')
    return ''.join(lines)


def evaluate(expression: str) -> float:
    """
    Evaluate '<num> <op> <num>' with one of + - * /.

    Raises:
        ValueError: If the expression does not parse
        ZeroDivisionError: On division by zero
    """
    match = _EXPRESSION.match(expression)
    if match is None:
        raise ValueError(f"invalid expression: {expression!r}")

    a, op, b = float(match.group(1)), match.group(2), float(match.group(3))
    if op == '+':
        return a + b
    if op == '-':
        return a - b
    if op == '*':
        return a * b
    return a / b


class AppRunner:
    """
    Runs apps in the current directory of a filesystem.

    Apps talk to the user through print() and a read_line callable that
    defaults to input(); the shell passes its own when running a script.

    Example:
        >>> runner = AppRunner(vfs, apps)
        >>> runner.run('about')
    """

    def __init__(
        self,
        vfs: VirtualFileSystem,
        registry: AppRegistry,
        system: Optional[SystemConfig] = None,
        rng: Optional[random.Random] = None
    ):
        self._vfs = vfs
        self._registry = registry
        self._system = system or get_config().system
        self._rng = rng or random.Random()
        self._logger = get_logger('runner')
        self._builtins: dict[str, Callable[[ReadLine], None]] = {
            BUILTIN_CALC: self.calculator,
            BUILTIN_NOTEPAD: self.notepad,
            BUILTIN_NUMBERGAME: self.numbergame,
            BUILTIN_ABOUT: self.about,
        }

    def run(self, name: str, read_line: Optional[ReadLine] = None) -> AppRecord:
        """
        Run an app.

        Args:
            name: App name
            read_line: Where the app reads its input lines; input() by default

        Returns:
            The record that was run

        Raises:
            AppNotFoundError: If no app has that name
        """
        record = self._registry.lookup(name)
        payload = record.payload
        read_line = read_line or input
        self._logger.debug("Running app", context={'name': name, 'kind': payload.kind.value})

        if payload.kind == PayloadKind.BUILTIN:
            builtin = self._builtins.get(payload.text)
            if builtin is None:
                print("Builtin app stub.")
            else:
                builtin(read_line)
        elif payload.kind == PayloadKind.PRINT:
            print(payload.text)
        elif payload.kind == PayloadKind.SCRIPTED_CAPTURE:
            if not payload.text:
                print("Installed notepad missing filename.")
            else:
                print(f"Installed notepad saving to '{payload.text}' in current directory.")
                self._capture_to_file(payload.text, read_line)
        else:
            print(f"--- App Output ---\n{payload.text}\n--- End ---")

        return record

    def _capture_to_file(self, filename: str, read_line: ReadLine) -> None:
        print(f"Enter text lines. Type '{TEXT_TERMINATOR}' on its own line to finish.")
        content = read_text_block(read_line=read_line)

        _, files = self._vfs.list()
        existed = filename in files
        self._vfs.write_file(filename, content)

        if existed:
            print(f"File '{filename}' overwritten.")
        else:
            print(f"File '{filename}' saved.")

    # Builtin apps

    def calculator(self, read_line: ReadLine) -> None:
        print("Calculator - enter: <num> <op> <num>  (e.g. 5 * 3)")
        try:
            result = evaluate(read_line(''))
        except EOFError:
            return
        except ValueError:
            print("Invalid input.")
            return
        except ZeroDivisionError:
            print("Error: divide by zero.")
            return
        print(f"Result: {result:.6g}")

    def notepad(self, read_line: ReadLine) -> None:
        try:
            filename = read_line("Notepad - enter filename to save in current directory: ").strip()
        except EOFError:
            return
        if not filename:
            print("No filename given.")
            return
        self._capture_to_file(filename, read_line)

    def numbergame(self, read_line: ReadLine) -> None:
        target = self._rng.randint(1, 100)
        tries = 0
        print("Number Guess Game! Guess a number from 1 to 100.")

        while True:
            try:
                raw = read_line("Enter guess: ")
            except EOFError:
                print()
                return
            try:
                guess = int(raw.strip())
            except ValueError:
                print("Invalid. Try again.")
                continue

            tries += 1
            if guess > target:
                print("Too high!")
            elif guess < target:
                print("Too low!")
            else:
                print(f"Correct! You took {tries} tries.")
                return

    def about(self, read_line: ReadLine) -> None:
        print(f"{self._system.name} Virtual Shell v{self._system.version}")
        print(
            "Features: Virtual filesystem, autosave, app library, app install/uninstall, "
            "wipe, rmdir, notepad, calculator, number game."
        )
        print("All operations are sandboxed in the virtual filesystem.")
