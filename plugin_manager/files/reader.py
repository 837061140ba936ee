"""Read a directory tree into a file collection."""

from __future__ import annotations

import logging
from pathlib import Path

from plugin_manager.models import FileData

logger = logging.getLogger(__name__)

DEFAULT_IGNORE = {
    ".git",
    "node_modules",
    "__pycache__",
    ".venv",
}


def _matches_any(path: Path, patterns: set[str]) -> bool:
    """Check whether any component of *path* matches one of *patterns*."""
    return any(part in patterns for part in path.parts)


def read_directory(
    root: Path | str,
    ignore_patterns: list[str] | None = None,
) -> dict[str, FileData]:
    """Load every regular file under *root*, keyed by POSIX relative path.

    Paths with a component in *ignore_patterns* (or the built-in defaults)
    are skipped. Each record's metadata carries ``size`` and ``mtime``.
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Source directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Source is not a directory: {root}")

    ignore = set(DEFAULT_IGNORE)
    if ignore_patterns:
        ignore.update(ignore_patterns)

    files: dict[str, FileData] = {}
    for p in sorted(root.rglob("*")):
        rel = p.relative_to(root)
        if _matches_any(rel, ignore) or not p.is_file():
            continue
        stat = p.stat()
        files[rel.as_posix()] = FileData(
            contents=p.read_bytes(),
            metadata={"size": stat.st_size, "mtime": stat.st_mtime},
        )

    logger.info("read %d file(s) from %s", len(files), root)
    return files
