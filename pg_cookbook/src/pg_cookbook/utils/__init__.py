"""Utility exports."""
from .sources import KeySource, is_existing_file, read_key_source

__all__ = ["KeySource", "is_existing_file", "read_key_source"]
