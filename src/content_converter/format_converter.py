"""Format detection and conversion to BookStack storage representation.

BookStack stores every page as an HTML body, optionally alongside the
markdown it was written in. This module classifies a source file by its
extension and turns its text into that representation. The markdown
transformation is deliberately small (headings, emphasis, links, code,
paragraphs) and never raises: anything it does not recognise stays as
literal text.
"""

import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ContentFormat(str, Enum):
    """Source formats understood by the converter."""
    MARKDOWN = 'markdown'
    HTML = 'html'
    PLAINTEXT = 'plaintext'


# Extensions picked up by an import; everything else is skipped silently
SUPPORTED_EXTENSIONS = ('.md', '.markdown', '.html', '.htm', '.txt')

_EXTENSION_FORMATS = {
    '.md': ContentFormat.MARKDOWN,
    '.markdown': ContentFormat.MARKDOWN,
    '.html': ContentFormat.HTML,
    '.htm': ContentFormat.HTML,
}

_FENCED_CODE_RE = re.compile(r'```[^\n`]*\n?([\s\S]*?)```')
_INLINE_CODE_RE = re.compile(r'`([^`\n]+)`')
_HEADING_RE = re.compile(r'^(#{1,3})\s+(.*?)(?:\s+#+)?\s*$')
_BOLD_ITALIC_RE = re.compile(r'\*\*\*(.+?)\*\*\*')
_BOLD_RE = re.compile(r'\*\*(.+?)\*\*')
_ITALIC_RE = re.compile(r'\*(.+?)\*')
_LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)\s]+)\)')
_PLACEHOLDER_RE = re.compile(r'\x00(\d+)\x00')
_BLANK_LINE_RE = re.compile(r'\n[ \t]*\n')


@dataclass
class ConvertedContent:
    """Storage representation of one page.

    Attributes:
        html: HTML body sent to BookStack
        markdown: Original markdown text, set only for markdown sources
    """
    html: str
    markdown: Optional[str] = None


def is_supported_file(file_name: str) -> bool:
    """Return True if the file has an importable extension (case-insensitive)."""
    return os.path.splitext(file_name)[1].lower() in SUPPORTED_EXTENSIONS


def escape_html(text: str) -> str:
    """Escape the five HTML-significant characters."""
    return (
        text.replace('&', '&amp;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
        .replace('"', '&quot;')
        .replace("'", '&#39;')
    )


class FormatConverter:
    """Converts local source files into BookStack page bodies.

    Example:
        >>> converter = FormatConverter()
        >>> fmt = converter.classify("intro.md")
        >>> converter.convert("# Hello", fmt).html
        '<h1>Hello</h1>'
    """

    def classify(self, file_name: str) -> ContentFormat:
        """Map a file name to its content format.

        ``.md``/``.markdown`` are markdown, ``.html``/``.htm`` are html and
        anything else (``.txt`` included) defaults to markdown.
        """
        extension = os.path.splitext(file_name)[1].lower()
        return _EXTENSION_FORMATS.get(extension, ContentFormat.MARKDOWN)

    def convert(self, content: str, fmt: Union[ContentFormat, str]) -> ConvertedContent:
        """Convert source text to an HTML body.

        Args:
            content: Raw file content
            fmt: Format of ``content``; unknown formats are treated as plain text

        Returns:
            ConvertedContent with the HTML body and, for markdown, the source text
        """
        fmt_value = fmt.value if isinstance(fmt, ContentFormat) else str(fmt).lower()

        if fmt_value == ContentFormat.HTML.value:
            return ConvertedContent(html=content)
        if fmt_value == ContentFormat.MARKDOWN.value:
            return ConvertedContent(html=self.markdown_to_html(content), markdown=content)
        return ConvertedContent(html=f"<pre>{escape_html(content)}</pre>")

    def markdown_to_html(self, markdown: str) -> str:
        """Best-effort markdown to HTML conversion.

        Handles ``#``/``##``/``###`` headings, bold, italic, bold-italic,
        inline links, fenced and inline code, and paragraphs split on blank
        lines with single newlines kept as ``<br>``. This is not CommonMark.
        """
        if not markdown:
            return ""

        text = markdown.replace('\r\n', '\n')
        stash = []

        def _stash(html: str) -> str:
            stash.append(html)
            return f"\x00{len(stash) - 1}\x00"

        # Code is pulled out first so emphasis rules never touch it
        text = _FENCED_CODE_RE.sub(
            lambda m: "\n\n" + _stash(f"<pre><code>{escape_html(m.group(1))}</code></pre>") + "\n\n",
            text,
        )
        text = _INLINE_CODE_RE.sub(
            lambda m: _stash(f"<code>{escape_html(m.group(1))}</code>"),
            text,
        )

        parts = []
        for block in _BLANK_LINE_RE.split(text.strip()):
            paragraph = []
            for line in block.split('\n'):
                stripped = line.strip()
                heading = _HEADING_RE.match(stripped)
                is_code_block = (
                    _PLACEHOLDER_RE.fullmatch(stripped) is not None
                    and stash[int(stripped[1:-1])].startswith('<pre>')
                )
                if heading or is_code_block:
                    self._flush_paragraph(paragraph, parts)
                    if heading:
                        level = len(heading.group(1))
                        parts.append(f"<h{level}>{self._inline(heading.group(2))}</h{level}>")
                    else:
                        parts.append(stripped)
                else:
                    paragraph.append(line)
            self._flush_paragraph(paragraph, parts)

        html = ''.join(parts)
        return _PLACEHOLDER_RE.sub(lambda m: stash[int(m.group(1))], html)

    def _flush_paragraph(self, lines: list, parts: list) -> None:
        content = [line.strip() for line in lines if line.strip()]
        lines.clear()
        if content:
            parts.append(f"<p>{'<br>'.join(self._inline(line) for line in content)}</p>")

    def _inline(self, text: str) -> str:
        text = _BOLD_ITALIC_RE.sub(r'<strong><em>\1</em></strong>', text)
        text = _BOLD_RE.sub(r'<strong>\1</strong>', text)
        text = _ITALIC_RE.sub(r'<em>\1</em>', text)
        return _LINK_RE.sub(r'<a href="\2">\1</a>', text)
