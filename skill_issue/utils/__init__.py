"""Utility helpers for the scanner."""

from .fileio import iter_files, read_text_file, read_yaml_file

__all__ = [
    "iter_files",
    "read_text_file",
    "read_yaml_file",
]
