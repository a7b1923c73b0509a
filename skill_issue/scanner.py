"""File snapshots and the local skill directory walker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Tuple

from .logging import get_logger
from .utils import iter_files, read_text_file

logger = get_logger("scanner")

SKIP_DIRS = frozenset(
    {
        ".git",
        "node_modules",
        ".skill-issue-cache",
        "__pycache__",
        ".venv",
    }
)


class ScanError(RuntimeError):
    """Raised when a local scan root cannot be walked."""


class FileType(str, Enum):
    """Coarse file classification used to pick applicable rules."""

    MARKDOWN = "markdown"
    SCRIPT = "script"
    YAML = "yaml"
    TOML = "toml"
    JSON = "json"
    UNKNOWN = "unknown"

    @classmethod
    def from_path(cls, path: str | PurePosixPath | Path) -> "FileType":
        suffix = PurePosixPath(str(path)).suffix.lower().lstrip(".")
        return _TYPE_BY_EXTENSION.get(suffix, cls.UNKNOWN)


_TYPE_BY_EXTENSION = {
    "md": FileType.MARKDOWN,
    "mdx": FileType.MARKDOWN,
    "sh": FileType.SCRIPT,
    "bash": FileType.SCRIPT,
    "zsh": FileType.SCRIPT,
    "py": FileType.SCRIPT,
    "rb": FileType.SCRIPT,
    "js": FileType.SCRIPT,
    "ts": FileType.SCRIPT,
    "yml": FileType.YAML,
    "yaml": FileType.YAML,
    "toml": FileType.TOML,
    "json": FileType.JSON,
}


@dataclass(frozen=True)
class FileSnapshot:
    """Immutable in-memory copy of one file handed to the rules."""

    path: str
    relative_path: str
    file_type: FileType
    content: str

    @classmethod
    def create(cls, path: str, relative_path: str, content: str) -> "FileSnapshot":
        return cls(
            path=path,
            relative_path=relative_path,
            file_type=FileType.from_path(relative_path),
            content=content,
        )


def iter_lines(content: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_number, line)`` pairs, 1-based, without line terminators.

    Lines are split on ``\\n`` only; a trailing ``\\r`` is dropped and a final
    empty segment after a trailing newline is not reported as a line.
    """

    if not content:
        return
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    for index, line in enumerate(lines, start=1):
        if line.endswith("\r"):
            line = line[:-1]
        yield index, line


def scan_directory(root: Path) -> List[FileSnapshot]:
    """Read every text file beneath ``root`` into a snapshot.

    Files that are not valid UTF-8 (binaries, images) are skipped silently.
    """

    if not root.exists():
        raise ScanError(f"path does not exist: {root}")
    if not root.is_dir():
        raise ScanError(f"path is not a directory: {root}")

    snapshots: List[FileSnapshot] = []
    for path in iter_files(root, SKIP_DIRS):
        content = read_text_file(path)
        if content is None:
            logger.debug("skipping unreadable file %s", path)
            continue
        relative = path.relative_to(root).as_posix()
        snapshots.append(FileSnapshot.create(str(path), relative, content))
    return snapshots


__all__ = [
    "FileSnapshot",
    "FileType",
    "ScanError",
    "SKIP_DIRS",
    "iter_lines",
    "scan_directory",
]
