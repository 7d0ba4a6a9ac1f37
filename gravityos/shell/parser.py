"""
Command Parser Module

Splits shell lines into a command name and its arguments.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass, field
from typing import Optional, List


@dataclass
class ParsedCommand:
    """A parsed command line."""
    command: str
    args: List[str] = field(default_factory=list)

    def arg(self, index: int = 0) -> Optional[str]:
        """Argument at index, or None if missing."""
        if index < len(self.args):
            return self.args[index]
        return None


class CommandParser:
    """
    Parses shell command lines.

    Handles:
    - Command and arguments separated by whitespace
    - Quoted strings ('...' and "...")
    - Backslash escapes
    - Comment lines starting with '#'

    Example:
        >>> parser = CommandParser()
        >>> parser.parse('write "my notes.txt"').args
        ['my notes.txt']
    """

    def __init__(self):
        self._history: List[str] = []

    def parse(self, line: str) -> Optional[ParsedCommand]:
        """
        Parse a command line.

        Args:
            line: Command line string

        Returns:
            ParsedCommand or None if empty
        """
        line = line.strip()

        if not line or line.startswith('#'):
            return None

        self._history.append(line)

        words = self.tokenize(line)
        if not words:
            return None

        return ParsedCommand(command=words[0], args=words[1:])

    @staticmethod
    def tokenize(line: str) -> List[str]:
        """Split a line into words."""
        words = []
        current = ""
        in_word = False
        in_quote = None
        i = 0

        while i < len(line):
            char = line[i]

            if char in ('"', "'") and in_quote is None:
                in_quote = char
                in_word = True
                i += 1
                continue

            if char == in_quote:
                in_quote = None
                i += 1
                continue

            if char == '\\' and i + 1 < len(line):
                current += line[i + 1]
                in_word = True
                i += 2
                continue

            if in_quote:
                current += char
                i += 1
                continue

            if char.isspace():
                if in_word:
                    words.append(current)
                    current = ""
                    in_word = False
                i += 1
                continue

            current += char
            in_word = True
            i += 1

        # Quoted empty strings still count as a word
        if in_word:
            words.append(current)

        return words

    def get_history(self) -> List[str]:
        """Get command history."""
        return self._history

    def clear_history(self) -> None:
        """Clear command history."""
        self._history.clear()
