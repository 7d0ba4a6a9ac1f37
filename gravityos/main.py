#!/usr/bin/env python3
"""
GravityOS - A Persistent Virtual Filesystem Shell

This is the main entry point for GravityOS.

Features:
- In-memory directory tree saved to a single text disk image
- Autosave after every change
- Builtin apps (calculator, notepad, number game, about)
- Installable apps stored as files in /apps
- Interactive shell

Author: YSNRFD
Version: 1.0.0
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from gravityos.core.bootloader import Bootloader
from gravityos.exceptions import GravityOSError
from gravityos.shell.shell import Shell


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='gravityos',
        description='Persistent virtual filesystem shell.'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.json',
        help='JSON configuration file (defaults are used if it is missing)'
    )
    parser.add_argument(
        '-d', '--disk',
        default=None,
        help='disk image file, overriding filesystem.disk_file'
    )
    parser.add_argument(
        '--script',
        default=None,
        help='run the commands in this file instead of reading from the terminal'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for GravityOS.

    Boot sequence:
    1. Load configuration
    2. Initialize logging
    3. Load the disk image
    4. Start shell
    5. Save and shut down
    """
    args = _parse_args(argv)

    bootloader = Bootloader(args.config, disk_file=args.disk)
    result = bootloader.boot()

    if not result.success:
        print(f"Boot failed at stage {result.stage.name}")
        print(f"Error: {result.message}")
        return 1

    shell = Shell(bootloader.get_session())
    exit_code = 0

    try:
        if args.script:
            script = Path(args.script).read_text(encoding='utf-8')
            exit_code = shell.run_script(script)
        else:
            shell.run()
    except KeyboardInterrupt:
        print("\n\nInterrupted")
    finally:
        try:
            bootloader.shutdown()
        except GravityOSError as e:
            print(f"Shutdown error: {e}")
            exit_code = 1

    return exit_code


if __name__ == '__main__':
    sys.exit(main())
