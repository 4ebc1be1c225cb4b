"""
File operation utilities
"""

import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from core.errors import TraversalFailedError


def _raise_traversal_error(error: OSError):
    raise TraversalFailedError(error.filename or '?', error.strerror or str(error)) from error


def walk_files(directory: str, exclude: Optional[Iterable[str]] = None) -> Iterator[str]:
    """
    Yield every regular file under `directory`, recursively.

    Directories and files are visited in sorted order. Any directory in
    `exclude` (and everything below it) is skipped. An unreadable
    directory aborts the walk with TraversalFailedError.
    """
    root = Path(directory)
    if not root.is_dir():
        raise TraversalFailedError(root, "not a directory")

    excluded = {Path(p).resolve() for p in (exclude or [])}

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_traversal_error):
        dirnames[:] = sorted(
            d for d in dirnames
            if (Path(dirpath) / d).resolve() not in excluded
        )
        for name in sorted(filenames):
            yield os.path.join(dirpath, name)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human readable format"""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} PB"
