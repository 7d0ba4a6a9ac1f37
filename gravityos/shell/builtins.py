"""
Shell Built-in Commands

Implements the commands of the GravityOS shell.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Callable, List

from gravityos.apps.runner import TEXT_TERMINATOR, read_text_block
from gravityos.exceptions import GravityOSError
from gravityos.filesystem.inode import validate_name
from gravityos.logger import get_logger


HELP_TEXT = """Available commands:
 help                - show this help
 ls                  - list contents of current directory
 cd <dir>            - change directory ('..' for parent, or a path)
 back                - go up one directory
 pwd                 - show current directory
 mkdir <name>        - create directory
 rmdir <name>        - delete directory and its contents
 write <file>        - create/write a file (use END to finish)
 cat <file>          - show file contents
 rm <file>           - delete file
 clear               - clear virtual screen
 wipe                - delete ALL user data (keeps the system)
 apps                - list apps (built-in + installed)
 run <app>           - run an app
 install <pkg>       - install package ({packages})
 uninstall <app>     - uninstall installed app
 appinfo <app>       - show info about an app
 exit                - exit {name} (auto-saved)"""

CLEAR_LINES = 50


class BuiltinCommands:
    """
    Built-in shell commands.

    Every command takes its argument list and returns an exit code.
    Errors raised by the session are reported here and never end the
    shell.
    """

    def __init__(self, shell):
        """
        Initialize built-in commands.

        Args:
            shell: The shell instance
        """
        self._shell = shell
        self._logger = get_logger('shell')
        self._commands: dict[str, Callable[[List[str]], int]] = {
            'help': self.cmd_help,
            'ls': self.cmd_ls,
            'cd': self.cmd_cd,
            'back': self.cmd_back,
            'pwd': self.cmd_pwd,
            'mkdir': self.cmd_mkdir,
            'rmdir': self.cmd_rmdir,
            'write': self.cmd_write,
            'cat': self.cmd_cat,
            'rm': self.cmd_rm,
            'clear': self.cmd_clear,
            'wipe': self.cmd_wipe,
            'apps': self.cmd_apps,
            'run': self.cmd_run,
            'install': self.cmd_install,
            'uninstall': self.cmd_uninstall,
            'appinfo': self.cmd_appinfo,
            'exit': self.cmd_exit,
        }

    @property
    def _session(self):
        return self._shell.session

    @property
    def _fs(self):
        return self._shell.session.filesystem

    def get_commands(self) -> dict[str, Callable[[List[str]], int]]:
        """Get all built-in commands."""
        return self._commands

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in."""
        return name in self._commands

    def execute(self, name: str, args: List[str]) -> int:
        """
        Execute a built-in command.

        Args:
            name: Command name
            args: Command arguments

        Returns:
            Exit code
        """
        cmd = self._commands.get(name)
        if cmd is None:
            return 127

        try:
            return cmd(args)
        except GravityOSError as e:
            self._logger.debug(f"Command failed: {name}", context={'error_code': e.error_code})
            print(f"{name}: {e}")
            return 1

    @staticmethod
    def _require(name: str, args: List[str], what: str) -> bool:
        if args:
            return True
        print(f"{name} needs {what}.")
        return False

    # Command implementations

    def cmd_help(self, args: List[str]) -> int:
        """Display help information."""
        print(HELP_TEXT.format(
            packages=', '.join(self._session.installer.known_packages()),
            name=self._session.config.system.name,
        ))
        return 0

    def cmd_ls(self, args: List[str]) -> int:
        """List the current directory."""
        dirs, files = self._fs.list()
        print("Directories:")
        for name in dirs:
            print(f"  [DIR] {name}")
        print("Files:")
        for name in files:
            print(f"  {name}")
        return 0

    def cmd_cd(self, args: List[str]) -> int:
        """Change directory."""
        if not self._require('cd', args, 'an argument'):
            return 1

        target = args[0]
        if '/' in target:
            self._fs.change_dir_path(target)
        elif not self._fs.change_dir(target):
            print("Already at root.")
        return 0

    def cmd_back(self, args: List[str]) -> int:
        """Go up one directory."""
        if not self._fs.change_dir('..'):
            print("Already at root.")
        return 0

    def cmd_pwd(self, args: List[str]) -> int:
        """Print working directory."""
        print(self._fs.cwd_path)
        return 0

    def cmd_mkdir(self, args: List[str]) -> int:
        """Create a directory."""
        if not self._require('mkdir', args, 'a name'):
            return 1

        self._fs.make_dir(args[0])
        print(f"Directory '{args[0]}' created.")
        return 0

    def cmd_rmdir(self, args: List[str]) -> int:
        """Remove a directory and everything in it."""
        if not self._require('rmdir', args, 'a name'):
            return 1

        self._fs.remove_dir_recursive(args[0])
        print(f"Directory '{args[0]}' and all contents removed.")
        return 0

    def cmd_write(self, args: List[str]) -> int:
        """Create or overwrite a file with lines typed by the user."""
        if not self._require('write', args, 'a filename'):
            return 1

        name = args[0]
        validate_name(name)

        _, files = self._fs.list()
        existed = name in files

        print(f"Enter file content. Type '{TEXT_TERMINATOR}' on its own line to finish.")
        self._fs.write_file(name, read_text_block(read_line=self._shell.read_line))

        print(f"File '{name}' {'overwritten' if existed else 'created'}.")
        return 0

    def cmd_cat(self, args: List[str]) -> int:
        """Display file contents."""
        if not self._require('cat', args, 'a filename'):
            return 1

        content = self._fs.read_file(args[0])
        print(f"---- {args[0]} ----")
        if content:
            print(content, end='' if content.endswith('\n') else '\n')
        else:
            print("(empty)")
        print("---- end ----")
        return 0

    def cmd_rm(self, args: List[str]) -> int:
        """Remove a file."""
        if not self._require('rm', args, 'a filename'):
            return 1

        self._fs.remove_file(args[0])
        print(f"File '{args[0]}' deleted.")
        return 0

    def cmd_clear(self, args: List[str]) -> int:
        """Clear the screen."""
        print('\n' * (CLEAR_LINES - 1))
        print("[screen cleared]")
        return 0

    def cmd_wipe(self, args: List[str]) -> int:
        """Delete all user data after confirmation."""
        expected = self._session.config.shell.wipe_confirmation
        try:
            answer = self._shell.read_line(
                "Are you sure you want to wipe ALL user data? "
                f"This cannot be undone (type '{expected}' to confirm): "
            )
        except EOFError:
            answer = ''

        if answer.strip() != expected:
            print("Wipe cancelled.")
            return 1

        self._session.wipe()
        print("All user data wiped. System intact.")
        return 0

    def cmd_apps(self, args: List[str]) -> int:
        """List builtin and installed apps."""
        print("Installed and built-in apps:")
        for record in self._session.apps.list():
            marker = " [built-in]" if record.builtin else ""
            print(f"  {record.name} - {record.description}{marker}")
        return 0

    def cmd_run(self, args: List[str]) -> int:
        """Run an app."""
        if not self._require('run', args, 'an app name'):
            return 1

        self._session.run(args[0], read_line=self._shell.read_line)
        return 0

    def cmd_install(self, args: List[str]) -> int:
        """Install a known package."""
        if not self._require('install', args, 'a package name'):
            return 1

        self._session.install(args[0])
        print(f"Package '{args[0]}' installed.")
        return 0

    def cmd_uninstall(self, args: List[str]) -> int:
        """Uninstall an installed app."""
        if not self._require('uninstall', args, 'an app name'):
            return 1

        self._session.uninstall(args[0])
        print(f"App '{args[0]}' uninstalled.")
        return 0

    def cmd_appinfo(self, args: List[str]) -> int:
        """Show details of an app."""
        if not self._require('appinfo', args, 'an app name'):
            return 1

        record = self._session.apps.lookup(args[0])
        info = record.to_dict()
        print(f"Name: {info['name']}")
        print(f"Desc: {info['description']}")
        print(f"Type: {info['type']}")
        if not record.builtin:
            print(f"File: {info['source']}")
            print("Code preview:")
            print(record.code.rstrip('\n'))
        return 0

    def cmd_exit(self, args: List[str]) -> int:
        """Save and leave the shell."""
        try:
            self._fs.save()
        finally:
            self._shell.request_exit()
        print(f"Exiting {self._session.config.system.name}... (filesystem saved)")
        return 0
