"""Sidecar metadata and README-based naming for books and chapters.

A directory may carry a small JSON sidecar naming and describing the book
or chapter it becomes:

    {"name": "Introduction", "description": "Start here"}

When no sidecar name is present the chapter name falls back to the first
heading (or first line) of a README-like file, when the ``readme`` policy
is selected, and finally to the directory name itself.
"""

import json
import logging
import os
import re
from typing import Optional

from .models import EntityMetadata

logger = logging.getLogger(__name__)

CHAPTER_METADATA_FILE = '.chapter-metadata.json'
BOOK_METADATA_FILE = '.book-metadata.json'

# Checked in order; the first non-empty one is used
README_CANDIDATES = (
    'README.md',
    'readme.md',
    'Readme.md',
    'README.markdown',
    'readme.markdown',
    'README.txt',
    'readme.txt',
    'README',
    'index.md',
)

_HEADING_PATTERNS = tuple(
    re.compile(rf'^{"#" * level}\s+(.+?)(?:[ \t]+#+)?[ \t]*$', re.MULTILINE) for level in (1, 2, 3)
)


class MetadataResolver:
    """Reads sidecar metadata and derives display names for directories.

    Example:
        >>> meta = MetadataResolver.read_chapter_metadata("docs/Intro")
        >>> name = MetadataResolver.resolve_chapter_name("docs/Intro", "readme", meta)
    """

    @classmethod
    def read_chapter_metadata(cls, directory: str) -> EntityMetadata:
        """Read ``.chapter-metadata.json`` from a chapter directory."""
        return cls._read_sidecar(os.path.join(directory, CHAPTER_METADATA_FILE))

    @classmethod
    def read_book_metadata(cls, directory: str) -> EntityMetadata:
        """Read ``.book-metadata.json`` from the import root."""
        return cls._read_sidecar(os.path.join(directory, BOOK_METADATA_FILE))

    @classmethod
    def _read_sidecar(cls, path: str) -> EntityMetadata:
        """Parse a sidecar file.

        A missing file is normal. Unreadable or malformed files produce a
        warning and an empty result so naming falls back to the default chain.
        """
        if not os.path.isfile(path):
            return EntityMetadata()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring metadata file {path}: {e}")
            return EntityMetadata()

        if not isinstance(data, dict):
            logger.warning(
                f"Ignoring metadata file {path}: expected a JSON object, got {type(data).__name__}"
            )
            return EntityMetadata()

        return EntityMetadata(
            name=cls._clean(data.get('name')),
            description=cls._clean(data.get('description')),
        )

    @staticmethod
    def _clean(value: object) -> Optional[str]:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @classmethod
    def derive_name_from_readme(cls, directory: str) -> Optional[str]:
        """Derive a name from the first non-empty README-like file.

        The first ``#`` heading wins, then ``##``, then ``###``; without any
        heading the first non-blank line is used.

        Returns:
            The derived name, or None if no candidate exists or all are empty
        """
        for candidate in README_CANDIDATES:
            path = os.path.join(directory, candidate)
            if not os.path.isfile(path):
                continue

            try:
                with open(path, 'r', encoding='utf-8', errors='replace') as f:
                    content = f.read()
            except OSError as e:
                logger.warning(f"Could not read {path}: {e}")
                continue

            if not content.strip():
                continue

            for pattern in _HEADING_PATTERNS:
                match = pattern.search(content)
                if match:
                    return match.group(1).strip()

            for line in content.splitlines():
                if line.strip():
                    return line.strip()

        return None

    @classmethod
    def resolve_chapter_name(
        cls,
        directory: str,
        chapter_from: str = 'dir',
        metadata: Optional[EntityMetadata] = None,
    ) -> str:
        """Resolve a chapter name: sidecar name > README (readme policy) > directory name.

        Later sources are only computed when earlier ones come up empty.
        """
        if metadata is None:
            metadata = cls.read_chapter_metadata(directory)
        if metadata.name:
            return metadata.name

        if chapter_from == 'readme':
            readme_name = cls.derive_name_from_readme(directory)
            if readme_name:
                logger.debug(f"Chapter name from README: {readme_name}")
                return readme_name

        return os.path.basename(os.path.normpath(directory))
