"""
GravityOS Shell Module

The interactive command-line shell for GravityOS.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Iterator, Optional

from .parser import CommandParser, ParsedCommand
from .builtins import BuiltinCommands
from gravityos.logger import get_logger


class Shell:
    """
    GravityOS Interactive Shell.

    Reads command lines from the terminal, or from a script, and runs
    them as built-in commands. Command history is kept by the parser.

    Commands that need more input (file content, confirmations, app
    input) read it through read_line(), which takes the next script
    line while a script runs and prompts the terminal otherwise.

    Example:
        >>> shell = Shell(session)
        >>> shell.run()
    """

    def __init__(self, session):
        self._session = session
        self._logger = get_logger('shell')
        self._parser = CommandParser()
        self._builtins = BuiltinCommands(self)
        self._running = False
        self._exiting = False
        self._script: Optional[Iterator[str]] = None

    @property
    def session(self):
        return self._session

    @property
    def parser(self) -> CommandParser:
        return self._parser

    @property
    def builtins(self) -> BuiltinCommands:
        return self._builtins

    @property
    def exiting(self) -> bool:
        return self._exiting

    def run(self) -> None:
        """
        Run the interactive shell.

        This is the main REPL loop. It ends on 'exit' or end of input.
        """
        self._running = True

        config = self._session.config
        print(config.system.boot_message)
        print("Type 'help' for commands.")

        while self._running and not self._exiting:
            try:
                try:
                    line = input(self._get_prompt())
                except EOFError:
                    print()
                    break
                except KeyboardInterrupt:
                    print("^C")
                    continue

                self._execute_line(line)

            except Exception as e:
                self._logger.exception("Shell error", exc=e)
                print(f"shell: error: {e}")

        self._running = False

    def _get_prompt(self) -> str:
        """Generate the shell prompt."""
        prefix = self._session.config.shell.prompt
        return f"{prefix}{self._session.filesystem.cwd_path}> "

    def _execute_line(self, line: str) -> int:
        """
        Execute a command line.

        Returns:
            Exit code
        """
        cmd = self._parser.parse(line)

        if cmd is None:
            return 0

        return self._execute_command(cmd)

    def _execute_command(self, cmd: ParsedCommand) -> int:
        if self._builtins.is_builtin(cmd.command):
            return self._builtins.execute(cmd.command, cmd.args)

        print(f"Unknown command '{cmd.command}'. Type 'help' for commands.")
        return 127

    def read_line(self, prompt: str = '') -> str:
        """
        Read one line of input for a command.

        Raises:
            EOFError: At the end of the script or of terminal input
        """
        if self._script is None:
            return input(prompt)
        try:
            return next(self._script)
        except StopIteration:
            raise EOFError from None

    def request_exit(self) -> None:
        """Request the shell to exit."""
        self._exiting = True

    def stop(self) -> None:
        """Stop the shell."""
        self._running = False

    def run_script(self, script: str) -> int:
        """
        Run a script (multiple commands).

        Commands that read input take the lines that follow them, so
        'write' consumes content lines up to END. Stops early when a
        command asks the shell to exit.

        Returns:
            Last exit code
        """
        exit_code = 0
        self._script = iter(script.split('\n'))

        try:
            for line in self._script:
                if self._exiting:
                    break
                exit_code = self._execute_line(line)
        finally:
            self._script = None

        return exit_code


def create_shell(session) -> Shell:
    """Factory function to create a shell."""
    return Shell(session)
