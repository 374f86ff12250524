"""Helpers for arguments that may be either a file path or file content."""
from __future__ import annotations

from pathlib import Path
from typing import Union

KeySource = Union[str, bytes, Path]


def is_existing_file(value: KeySource) -> bool:
    """Return True when ``value`` names a regular file on disk.

    PEM text handed in place of a path is usually far longer than the host's
    name limit and contains newlines, so lookup errors mean "not a path".
    """

    if isinstance(value, bytes):
        return False
    try:
        return Path(value).is_file()
    except (OSError, ValueError):
        return False


def read_key_source(value: KeySource) -> bytes:
    """Read ``value`` from disk when it is a path, else use it as the content."""

    if isinstance(value, bytes):
        return value
    if is_existing_file(value):
        return Path(value).read_bytes()
    if isinstance(value, Path):
        raise FileNotFoundError(f"Key file does not exist: {value}")
    return value.encode("utf-8")


__all__ = ["KeySource", "is_existing_file", "read_key_source"]
