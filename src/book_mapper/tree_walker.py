"""Depth-bounded directory traversal for imports.

``walk`` lazily yields the importable files below a directory. Each call
performs a fresh traversal, so the count pass and the execute pass can walk
the same tree independently.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Tuple

from src.content_converter.format_converter import is_supported_file

from .errors import FilesystemError

logger = logging.getLogger(__name__)


@dataclass
class DirectoryListing:
    """Immediate children of one directory, sorted by name."""
    files: List[str] = field(default_factory=list)
    subdirectories: List[str] = field(default_factory=list)


def list_directory(directory: str) -> DirectoryListing:
    """List files and subdirectories of ``directory`` (full paths, name order).

    Raises:
        FilesystemError: If the directory cannot be read
    """
    listing = DirectoryListing()
    try:
        with os.scandir(directory) as entries:
            for entry in sorted(entries, key=lambda e: e.name):
                if entry.is_dir():
                    listing.subdirectories.append(entry.path)
                elif entry.is_file():
                    listing.files.append(entry.path)
    except PermissionError:
        raise FilesystemError(directory, 'list', 'Permission denied')
    except OSError as e:
        raise FilesystemError(directory, 'list', str(e))
    return listing


def walk(
    root: str,
    max_depth: int,
    file_filter: Callable[[str], bool] = is_supported_file,
) -> Iterator[Tuple[str, str]]:
    """Yield ``(file_path, relative_path)`` for importable files below ``root``.

    Files directly inside ``root`` are always yielded. Subdirectories are
    descended while budget remains, one unit per level, so ``max_depth=0``
    yields only the files of ``root`` itself.

    Args:
        root: Directory to traverse
        max_depth: Number of subdirectory levels to descend
        file_filter: Predicate on the file name; defaults to supported extensions
    """
    yield from _walk(root, root, max_depth, file_filter)


def _walk(
    base: str,
    directory: str,
    remaining: int,
    file_filter: Callable[[str], bool],
) -> Iterator[Tuple[str, str]]:
    listing = list_directory(directory)

    for file_path in listing.files:
        if file_filter(os.path.basename(file_path)):
            yield file_path, os.path.relpath(file_path, base)

    if remaining <= 0:
        if listing.subdirectories:
            logger.debug(
                f"Depth budget exhausted in {directory}; "
                f"not descending into {len(listing.subdirectories)} subdirectory(ies)"
            )
        return

    for subdirectory in listing.subdirectories:
        yield from _walk(base, subdirectory, remaining - 1, file_filter)
