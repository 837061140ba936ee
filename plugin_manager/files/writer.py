"""CollectionWriter: writes a file collection back to disk."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from typing import Any

from plugin_manager.models import FileData

logger = logging.getLogger(__name__)


def _to_bytes(key: str, record: Any) -> bytes:
    """Extract file contents from the record shapes plugins tend to return."""
    if isinstance(record, FileData):
        return record.contents
    if isinstance(record, Mapping) and "contents" in record:
        return FileData(contents=record["contents"]).contents
    if isinstance(record, bytes):
        return record
    if isinstance(record, str):
        return record.encode("utf-8")
    raise TypeError(f"Cannot write '{key}': unsupported record type {type(record).__name__}")


def _check_conflicts(keys: list[str], dests: list[Path], base_dir: Path) -> None:
    """Reject keys that map to the same file, or where one must be a file and a directory."""
    owners: dict[tuple[str, ...], str] = {}
    for key, dest in zip(keys, dests):
        parts = dest.relative_to(base_dir).parts
        if parts in owners:
            raise ValueError(f"Output path {key!r} conflicts with {owners[parts]!r}")
        owners[parts] = key
    for key, dest in zip(keys, dests):
        parts = dest.relative_to(base_dir).parts
        for i in range(1, len(parts)):
            if parts[:i] in owners:
                raise ValueError(f"Output path {key!r} conflicts with {owners[parts[:i]]!r}")


class CollectionWriter:
    """Writes each record of a collection to ``base_dir / key``.

    Keys must be relative paths that stay inside ``base_dir``.
    """

    def __init__(self, base_dir: Path | str) -> None:
        self.base_dir = Path(base_dir)

    def destination(self, key: str) -> Path:
        rel = PurePosixPath(key.replace("\\", "/"))
        if rel.is_absolute() or not rel.parts or ".." in rel.parts:
            raise ValueError(f"Output path escapes base directory: {key!r}")
        dest = self.base_dir.joinpath(*rel.parts)
        if not dest.resolve().is_relative_to(self.base_dir.resolve()):
            raise ValueError(f"Output path escapes base directory: {key!r}")
        return dest

    def write(self, files: Mapping[str, Any], *, dry_run: bool = False) -> list[Path]:
        """Write all records. Returns destination paths in sorted key order."""
        # Validate everything first so a bad key never leaves a half-written tree
        planned = [(self.destination(key), _to_bytes(key, files[key])) for key in sorted(files)]
        _check_conflicts(sorted(files), [dest for dest, _ in planned], self.base_dir)

        if dry_run:
            for dest, _ in planned:
                logger.debug("dry-run: would write %s", dest)
            return [dest for dest, _ in planned]

        for dest, data in planned:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(data)
            logger.info("wrote %s (%d bytes)", dest, len(data))
        return [dest for dest, _ in planned]
