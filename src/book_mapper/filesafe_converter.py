"""Filesafe filename conversion for exported books.

This module converts BookStack slugs and names to lowercase filenames that
are safe on every common filesystem, and builds the ``<name>-<id>.<ext>``
names used by the export mirror.
"""

import re
from typing import Optional

MAX_FILENAME_LENGTH = 100


class FilesafeConverter:
    """Converts BookStack entity names to filesafe filenames.

    Conversion rules:
    - Lowercased
    - Characters outside ``a-z 0-9 . _ -`` and whitespace are dropped
    - Runs of whitespace become a single hyphen
    - Truncated to 100 characters
    - An empty result becomes ``untitled``

    Examples:
        - "Getting Started" → "getting-started"
        - "Q&A: Billing" → "qa-billing"
    """

    @staticmethod
    def sanitize(name: str) -> str:
        """Reduce a slug or name to a conservative filename stem.

        Examples:
            >>> FilesafeConverter.sanitize("Getting Started")
            'getting-started'
            >>> FilesafeConverter.sanitize("Q&A: Billing")
            'qa-billing'
        """
        stem = (name or '').lower()
        stem = re.sub(r'[^a-z0-9\s._-]', '', stem)
        stem = re.sub(r'\s+', '-', stem.strip())
        stem = stem[:MAX_FILENAME_LENGTH]
        return stem or 'untitled'

    @staticmethod
    def entity_stem(slug: Optional[str], name: str, entity_id: int) -> str:
        """Build ``<sanitized slug-or-name>-<id>``."""
        return f"{FilesafeConverter.sanitize(slug or name)}-{entity_id}"

    @staticmethod
    def entity_filename(slug: Optional[str], name: str, entity_id: int, extension: str) -> str:
        """Build ``<sanitized slug-or-name>-<id>.<ext>``.

        Examples:
            >>> FilesafeConverter.entity_filename("intro", "Intro", 101, "md")
            'intro-101.md'
        """
        return f"{FilesafeConverter.entity_stem(slug, name, entity_id)}.{extension}"
