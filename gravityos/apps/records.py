"""
App Records Module

Data types for apps and the text format of installed app files:

    APP_NAME=hello
    APP_DESC=Simple Hello App
    CODE=PRINT:Hello from installed Hello App!
    ENDAPP

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Any

from gravityos.filesystem.disk_image import iter_lines


NAME_KEY = 'APP_NAME='
DESC_KEY = 'APP_DESC='
CODE_KEY = 'CODE='
END_APP = 'ENDAPP'

PRINT_PREFIX = 'PRINT:'
NOTEPAD_PREFIX = 'SCRIPT:NOTEPAD'


class PayloadKind(Enum):
    """What an app's code asks the runner to do."""
    BUILTIN = "builtin"
    PRINT = "print"
    SCRIPTED_CAPTURE = "scripted_capture"
    RAW = "raw"


@dataclass(frozen=True)
class AppPayload:
    """
    Interpreted form of an app's code.

    text holds the builtin tag, the text to print, the target file name
    of a scripted capture, or the raw code, depending on kind.
    """
    kind: PayloadKind
    text: str


def parse_payload(code: str, builtin: bool = False) -> AppPayload:
    """
    Classify an app's code.

    Args:
        code: Stored code of the app
        builtin: Whether the code is a builtin tag

    Returns:
        AppPayload for the runner
    """
    if builtin:
        return AppPayload(PayloadKind.BUILTIN, code)

    if code.startswith(PRINT_PREFIX):
        return AppPayload(PayloadKind.PRINT, code[len(PRINT_PREFIX):].rstrip('\n'))

    if code.startswith(NOTEPAD_PREFIX):
        target = code[len(NOTEPAD_PREFIX):].split('\n', 1)[0].strip()
        return AppPayload(PayloadKind.SCRIPTED_CAPTURE, target)

    return AppPayload(PayloadKind.RAW, code.rstrip('\n'))


@dataclass(frozen=True)
class AppRecord:
    """
    A named, described unit of behaviour.

    Builtin records carry a tag in code and live for the whole process.
    Installed records carry free-text code and the path of the file
    they were parsed from.
    """
    name: str
    description: str
    code: str
    builtin: bool = False
    source: Optional[str] = None

    @property
    def payload(self) -> AppPayload:
        return parse_payload(self.code, self.builtin)

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for display."""
        return {
            'name': self.name,
            'description': self.description,
            'type': 'built-in' if self.builtin else 'installed',
            'source': self.source,
        }


def parse_app_file(content: str, source: Optional[str] = None) -> Optional[AppRecord]:
    """
    Parse the content of an installed app file.

    Keys before CODE= may come in any order. CODE= takes the rest of
    its line and every following line up to ENDAPP or the end of the
    content; anything after that is ignored.

    Args:
        content: File content
        source: Path of the file, kept on the record

    Returns:
        AppRecord, or None when the file has no APP_NAME
    """
    name = ''
    description = ''
    code_lines: list[str] = []

    lines = iter_lines(content)
    for line in lines:
        line = line.rstrip('\n')
        if line.startswith(NAME_KEY):
            name = line[len(NAME_KEY):]
        elif line.startswith(DESC_KEY):
            description = line[len(DESC_KEY):]
        elif line.startswith(CODE_KEY):
            code_lines.append(line[len(CODE_KEY):])
            for code_line in lines:
                code_line = code_line.rstrip('\n')
                if code_line == END_APP:
                    break
                code_lines.append(code_line)
            break

    if not name:
        return None

    code = ''.join(f"{line}\n" for line in code_lines)
    return AppRecord(name=name, description=description, code=code, source=source)


def render_app_file(name: str, description: str, code: str) -> str:
    """Build the content of an installed app file."""
    code = code.rstrip('\n')
    return (
        f"{NAME_KEY}{name}\n"
        f"{DESC_KEY}{description}\n"
        f"{CODE_KEY}{code}\n"
        f"{END_APP}\n"
    )
