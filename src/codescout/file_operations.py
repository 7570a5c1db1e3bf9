"""File system enumeration and per-file utilities."""

from __future__ import annotations

import logging
import os
import pathlib
from collections.abc import Callable, Iterator
from datetime import datetime

from codescout.filters import to_relative_path
from codescout.models import FileInfo

logger = logging.getLogger(__name__)


def count_lines(file_path: str | pathlib.Path) -> int:
    """Efficiently count lines in a file.

    Args:
        file_path: Path to the file

    Returns:
        Number of lines in the file, or 0 if error
    """
    try:
        with open(file_path, "rb") as f:
            return sum(1 for _ in f)
    except OSError:
        return 0


def build_file_info(file_path: str, root: str, stat: os.stat_result | None = None) -> FileInfo:
    """Snapshot a file's metadata.

    Args:
        file_path: Absolute path of the file
        root: Scan root used for the relative path
        stat: Pre-fetched stat result, if the caller already has one

    Raises:
        OSError: if the file cannot be stat'ed
    """
    stat = stat or os.stat(file_path)
    name = os.path.basename(file_path)
    return FileInfo(
        path=file_path,
        name=name,
        extension=os.path.splitext(name)[1].lstrip("."),
        size=stat.st_size,
        is_directory=False,
        modified=datetime.fromtimestamp(stat.st_mtime),
        relative_path=to_relative_path(file_path, root),
    )


def walk_files(
    root: str,
    max_depth: int,
    follow_symlinks: bool = False,
    checkpoint: Callable[[], None] | None = None,
) -> Iterator[FileInfo]:
    """Yield every regular file under *root*, depth-first in name order.

    Hidden entries directly in *root* (``.git/``, ``.github/``) are listed
    so the ignore rules can judge them. Below *root*, hidden files and
    directories are skipped. Directories deeper than *max_depth* are not
    listed, and entries that cannot be read are logged and omitted.

    Args:
        root: Directory to enumerate
        max_depth: Deepest directory level listed (root is level 0)
        follow_symlinks: Whether symlinked directories and files are followed
        checkpoint: Called before each directory entry is processed; it may
            raise to abort the walk
    """
    yield from _walk(root, root, 0, max_depth, follow_symlinks, checkpoint)


def _walk(
    root: str,
    current: str,
    depth: int,
    max_depth: int,
    follow_symlinks: bool,
    checkpoint: Callable[[], None] | None,
) -> Iterator[FileInfo]:
    if depth > max_depth:
        return
    try:
        with os.scandir(current) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.warning("Cannot access directory %s: %s", current, e)
        return

    for entry in entries:
        if checkpoint is not None:
            checkpoint()
        if entry.name.startswith(".") and current != root:
            continue
        try:
            if entry.is_dir(follow_symlinks=follow_symlinks):
                yield from _walk(root, entry.path, depth + 1, max_depth, follow_symlinks, checkpoint)
            elif entry.is_file(follow_symlinks=follow_symlinks):
                yield build_file_info(entry.path, root, entry.stat(follow_symlinks=follow_symlinks))
        except OSError as e:
            logger.warning("Skipping unreadable entry %s: %s", entry.path, e)


def is_within(path: str, directory: str) -> bool:
    """Whether *path* is *directory* itself or lies below it."""
    return path == directory or path.startswith(directory.rstrip(os.sep) + os.sep)


def holds_any(directory: str, file_dirs: set[str]) -> bool:
    """Whether any of the parent directories in *file_dirs* lies within *directory*."""
    return any(is_within(d, directory) for d in file_dirs)
