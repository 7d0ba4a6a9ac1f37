"""
Disk Image Module

Converts the whole directory tree to the flat text disk image and back.

Format:
    DIR /docs/
    FILE /docs/a.txt
    hello
    END

Directories come before files at every level and subdirectories are
written pre-order. The root itself is never written.

Content is written verbatim between its FILE line and a sentinel line.
Two rules keep the round trip exact:

- A content line that reads like a sentinel (optionally preceded by
  backslashes) gets one more leading backslash, removed again on load.
- Content that does not end in a newline gets one for framing and is
  closed with END-NOEOL instead of END, which tells the loader to drop
  that newline again.

Author: YSNRFD
Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, TYPE_CHECKING

from .path_resolver import PathResolver
from .inode import validate_name
from gravityos.exceptions import MalformedRecordError, InvalidNameError
from gravityos.logger import get_logger

if TYPE_CHECKING:
    from .vfs import VirtualFileSystem


DIR_RECORD = 'DIR '
FILE_RECORD = 'FILE '
END = 'END'
END_NOEOL = 'END-NOEOL'
SENTINELS = (END, END_NOEOL)
ESCAPE = '\\'

_logger = get_logger('disk_image')


@dataclass
class LoadReport:
    """What a deserialize() call did."""
    directories: int = 0
    files: int = 0
    replaced: int = 0
    truncated: bool = False
    skipped: List[MalformedRecordError] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.skipped and not self.truncated


def iter_lines(text: str) -> Iterator[str]:
    """
    Yield the lines of text, each with its trailing newline if any.

    Only '\\n' ends a line; str.splitlines() would also split on '\\r'
    and other separators that belong to file content.
    """
    start = 0
    length = len(text)
    while start < length:
        end = text.find('\n', start)
        if end == -1:
            yield text[start:]
            return
        yield text[start:end + 1]
        start = end + 1


def _body(line: str) -> str:
    return line[:-1] if line.endswith('\n') else line


def _is_escaped_sentinel(body: str) -> bool:
    return body.lstrip(ESCAPE) in SENTINELS


def encode_content(content: str) -> List[str]:
    """
    Encode one file's content block, sentinel line included.

    Args:
        content: File content

    Returns:
        Lines of the block, each ending in a newline
    """
    lines: List[str] = []

    for line in iter_lines(content):
        if _is_escaped_sentinel(_body(line)):
            line = ESCAPE + line
        lines.append(line)

    if not content or content.endswith('\n'):
        lines.append(END + '\n')
    else:
        lines[-1] += '\n'
        lines.append(END_NOEOL + '\n')

    return lines


def decode_content(lines: List[str], sentinel: Optional[str]) -> str:
    """
    Decode the lines of one content block.

    Args:
        lines: Lines between the FILE record and the sentinel
        sentinel: The sentinel that closed the block, or None if the
            image ended first

    Returns:
        The original file content
    """
    decoded = []
    for line in lines:
        if line.startswith(ESCAPE) and _is_escaped_sentinel(_body(line)):
            line = line[1:]
        decoded.append(line)

    content = ''.join(decoded)
    if sentinel == END_NOEOL and content.endswith('\n'):
        content = content[:-1]
    return content


def serialize(vfs: VirtualFileSystem) -> str:
    """
    Serialize the whole tree into disk image text.

    Args:
        vfs: Filesystem to serialize

    Returns:
        Complete disk image
    """
    out: List[str] = []
    _emit_directory(vfs, vfs.root, '/', out)
    return ''.join(out)


def _emit_directory(
    vfs: VirtualFileSystem,
    ino: int,
    path: str,
    out: List[str]
) -> None:
    directory = vfs.node(ino)

    for child_ino in directory.subdirs():
        child_path = f"{path}{vfs.node(child_ino).name}/"
        out.append(f"{DIR_RECORD}{child_path}\n")
        _emit_directory(vfs, child_ino, child_path, out)

    for file_ino in directory.files():
        node = vfs.node(file_ino)
        out.append(f"{FILE_RECORD}{path}{node.name}\n")
        out.extend(encode_content(node.read()))


def deserialize(text: str, vfs: VirtualFileSystem) -> LoadReport:
    """
    Rebuild a tree from disk image text.

    Directories are created on demand. Malformed records are skipped
    and reported; a content block cut off by the end of the image keeps
    whatever was read. Loading is additive, so callers load into a
    fresh filesystem.

    Args:
        text: Disk image
        vfs: Filesystem to load into

    Returns:
        LoadReport describing the load
    """
    report = LoadReport()
    lines = iter_lines(text)
    line_no = 0

    for line in lines:
        line_no += 1
        body = _body(line)

        if not body.strip():
            continue

        try:
            if body.startswith(DIR_RECORD):
                _load_directory(vfs, body[len(DIR_RECORD):], line_no, body)
                report.directories += 1

            elif body.startswith(FILE_RECORD):
                record_no = line_no
                content_lines: List[str] = []
                sentinel = None
                for content_line in lines:
                    line_no += 1
                    if _body(content_line) in SENTINELS:
                        sentinel = _body(content_line)
                        break
                    content_lines.append(content_line)
                else:
                    report.truncated = True

                content = decode_content(content_lines, sentinel)
                created = _load_file(vfs, body[len(FILE_RECORD):], content, record_no, body)
                report.files += 1
                if not created:
                    report.replaced += 1

            else:
                raise MalformedRecordError(line_no, body, reason="unknown record")

        except MalformedRecordError as e:
            _logger.warning(f"Skipping record: {e.message}", context=e.context)
            report.skipped.append(e)

    if report.truncated:
        _logger.warning("Disk image ended inside a content block")

    _logger.debug(
        "Disk image loaded",
        context={
            'dirs': report.directories,
            'files': report.files,
            'skipped': len(report.skipped),
        }
    )
    return report


def _load_directory(vfs: VirtualFileSystem, path: str, line_no: int, record: str) -> None:
    try:
        vfs.resolve_or_create(path)
    except InvalidNameError as e:
        raise MalformedRecordError(line_no, record, reason=e.reason) from e


def _load_file(
    vfs: VirtualFileSystem,
    path: str,
    content: str,
    line_no: int,
    record: str
) -> bool:
    parent_path, name = PathResolver.split(path)

    if not parent_path:
        raise MalformedRecordError(line_no, record, reason="no separator in path")

    try:
        validate_name(name)
        parent = vfs.resolve_or_create(parent_path)
    except InvalidNameError as e:
        raise MalformedRecordError(line_no, record, reason=e.reason) from e

    _, created = vfs.store_file(parent, name, content)
    if not created:
        _logger.warning("Duplicate file record, content replaced", context={'path': path})
    return created
