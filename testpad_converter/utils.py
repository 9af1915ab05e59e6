"""Utility functions for Testpad conversion."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Union


PAD_SIZE = 3
PAD_CHAR = "0"
PREFIX_DELIMITER = "."


def tabs(depth: int) -> str:
    """Leading tabs for an outline entry of the given depth."""
    if depth <= 0:
        return ""
    return "\t" * (depth - 1)


def pad_index(index: int) -> str:
    """Left-pad an index with zeros to the fixed prefix width."""
    return str(index).rjust(PAD_SIZE, PAD_CHAR)


def join_indices(indices: Iterable[int]) -> str:
    """Render a sequence of indices as a dot-delimited prefix."""
    return PREFIX_DELIMITER.join(pad_index(index) for index in indices)


def safe_relpath(path: Union[str, Path], base: Union[str, Path]) -> str:
    """Get relative posix path, falling back to absolute on error."""
    try:
        relative = os.path.relpath(path, base)
    except ValueError:
        return Path(path).as_posix()
    if relative == os.curdir:
        return ""
    return Path(relative).as_posix()


def has_extension(path: Union[str, Path], extension: str) -> bool:
    """Check the file extension, case-sensitively and without the dot."""
    _, dot, suffix = Path(path).name.rpartition(".")
    return bool(dot) and suffix == extension


def base_name(path: Union[str, Path]) -> str:
    """File name without its last extension; ``.csv`` gives an empty name."""
    stem, dot, _ = Path(path).name.rpartition(".")
    return stem if dot else Path(path).name


def strip_newline(line: str) -> str:
    """Drop a single trailing line terminator."""
    if line.endswith("\n"):
        return line[:-1]
    return line


def split_naive(line: str, delimiter: str = ",") -> List[str]:
    """Split on every delimiter, ignoring quoting."""
    return line.split(delimiter)
