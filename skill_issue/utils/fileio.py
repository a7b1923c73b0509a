"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Generator

import yaml


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def read_text_file(path: Path) -> str | None:
    """Return the file contents as UTF-8 text, or ``None`` if it cannot be decoded."""

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def iter_files(root: Path, skip_dirs: frozenset[str] = frozenset()) -> Generator[Path, None, None]:
    """Yield regular files beneath ``root`` in sorted order, pruning ``skip_dirs``."""

    for path in sorted(root.iterdir()):
        if path.is_symlink():
            continue
        if path.is_dir():
            if path.name in skip_dirs:
                continue
            yield from iter_files(path, skip_dirs)
        elif path.is_file():
            yield path
