"""
File system access used by the parser and writer.

The localization code only talks to the ``FileSystem`` protocol so tests and
embedding applications can provide their own storage. ``LocalFileSystem``
is the pathlib-backed implementation.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


@runtime_checkable
class FileSystem(Protocol):
    """Narrow file system contract for locale and source files."""

    def directory_exists(self, path: str) -> bool: ...

    def file_exists(self, path: str) -> bool: ...

    def get_files(self, path: str, pattern: str, recursive: bool = False) -> list[str]: ...

    def read_text(self, path: str) -> str: ...

    def read_lines(self, path: str) -> list[str]: ...

    def write_text(self, path: str, content: str) -> None: ...

    def write_lines(
        self, path: str, lines: list[str], newline: str = "\n"
    ) -> None: ...

    def delete_file(self, path: str) -> None: ...


def detect_newline(content: str) -> str:
    """Return the newline style used by ``content`` (LF when there is none)."""
    index = content.find("\n")
    if index > 0 and content[index - 1] == "\r":
        return "\r\n"
    return "\n"


def split_lines(content: str) -> list[str]:
    """Split text on CRLF or LF the way a line reader would (no trailing empty line)."""
    if not content:
        return []
    lines = content.replace("\r\n", "\n").split("\n")
    if lines[-1] == "":
        _ = lines.pop()
    return lines


def join_lines(lines: list[str], newline: str = "\n") -> str:
    """Join lines, terminating each one with ``newline``."""
    return "".join(f"{line}{newline}" for line in lines)


class LocalFileSystem:
    """FileSystem implementation backed by the local disk."""

    def directory_exists(self, path: str) -> bool:
        return Path(path).is_dir()

    def file_exists(self, path: str) -> bool:
        return Path(path).is_file()

    def get_files(self, path: str, pattern: str, recursive: bool = False) -> list[str]:
        """List files under ``path`` matching a glob pattern, sorted."""
        directory = Path(path)
        matches = directory.rglob(pattern) if recursive else directory.glob(pattern)
        return sorted(str(match) for match in matches if match.is_file())

    def read_text(self, path: str) -> str:
        """Read UTF-8 text with its original line endings and no BOM."""
        with Path(path).open("r", encoding="utf-8", newline="") as f:
            content = f.read()
        return content.removeprefix(_BOM)

    def read_lines(self, path: str) -> list[str]:
        return split_lines(self.read_text(path))

    def write_text(self, path: str, content: str) -> None:
        """
        Write UTF-8 text without a BOM, atomically.

        The content goes to a temporary file in the target directory which
        then replaces the target.

        Raises:
            OSError: If the file cannot be written
        """
        target = Path(path)
        temp_file = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                newline="",
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                _ = temp_file.write(content)
                temp_file.flush()
                temp_path = Path(temp_file.name)

            _ = temp_path.replace(target)

        except Exception as e:
            if temp_file and Path(temp_file.name).exists():
                Path(temp_file.name).unlink(missing_ok=True)
            raise OSError(f"Failed to write {target}: {e}") from e

    def write_lines(self, path: str, lines: list[str], newline: str = "\n") -> None:
        self.write_text(path, join_lines(lines, newline))

    def delete_file(self, path: str) -> None:
        Path(path).unlink(missing_ok=True)
        logger.debug(f"Deleted {path}")
