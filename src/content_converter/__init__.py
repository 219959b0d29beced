"""Content conversion module for local files -> BookStack pages.

This module provides the FormatConverter, which classifies source files by
extension and converts markdown, HTML and plain text into page bodies.
"""

from .format_converter import (
    ContentFormat,
    ConvertedContent,
    FormatConverter,
    SUPPORTED_EXTENSIONS,
    escape_html,
    is_supported_file,
)

__all__ = [
    'ContentFormat',
    'ConvertedContent',
    'FormatConverter',
    'SUPPORTED_EXTENSIONS',
    'escape_html',
    'is_supported_file',
]
