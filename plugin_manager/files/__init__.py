"""Bridges between directories on disk and file collections."""

from plugin_manager.files.reader import read_directory
from plugin_manager.files.writer import CollectionWriter

__all__ = ["CollectionWriter", "read_directory"]
