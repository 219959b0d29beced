"""Data models for the book mapper.

This module defines all data models used by the book mapper library.
All models use dataclasses for clean, type-safe data structures. Remote
entities are built from BookStack API dictionaries via ``from_api``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.content_converter.format_converter import ContentFormat

from .errors import ConfigError


CHAPTER_FROM_CHOICES = ('dir', 'readme')
IMPORT_FORMATS = tuple(fmt.value for fmt in ContentFormat)
EXPORT_FORMATS = ('markdown', 'html', 'plaintext', 'pdf')

# File extension written for each export format
EXPORT_EXTENSIONS = {
    'markdown': 'md',
    'html': 'html',
    'plaintext': 'txt',
    'pdf': 'pdf',
}

DEFAULT_MAX_DEPTH = 10


@dataclass
class Page:
    """A BookStack page.

    Attributes:
        id: Page ID
        book_id: Owning book ID
        name: Page title
        slug: URL slug assigned by BookStack
        chapter_id: Owning chapter ID (None for book-level pages)
    """
    id: int
    book_id: int
    name: str
    slug: str = ""
    chapter_id: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any], book_id: Optional[int] = None) -> 'Page':
        chapter_id = data.get('chapter_id') or None
        return cls(
            id=int(data['id']),
            book_id=int(data.get('book_id') or book_id or 0),
            name=data.get('name', ''),
            slug=data.get('slug', '') or '',
            chapter_id=int(chapter_id) if chapter_id else None,
        )


@dataclass
class Chapter:
    """A BookStack chapter, optionally with its pages (export only)."""
    id: int
    book_id: int
    name: str
    slug: str = ""
    description: Optional[str] = None
    pages: List[Page] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any], book_id: Optional[int] = None) -> 'Chapter':
        chapter_book_id = int(data.get('book_id') or book_id or 0)
        chapter_id = int(data['id'])
        return cls(
            id=chapter_id,
            book_id=chapter_book_id,
            name=data.get('name', ''),
            slug=data.get('slug', '') or '',
            description=data.get('description') or None,
            pages=[
                Page.from_api({**page, 'chapter_id': page.get('chapter_id') or chapter_id}, chapter_book_id)
                for page in (data.get('pages') or [])
            ],
        )


@dataclass
class Book:
    """A BookStack book.

    ``chapters`` and ``pages`` are only populated when the book was read
    with its content tree (``get_book``); ``pages`` holds top-level pages.
    """
    id: int
    name: str
    slug: str = ""
    description: Optional[str] = None
    chapters: List[Chapter] = field(default_factory=list)
    pages: List[Page] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Book':
        book_id = int(data['id'])
        contents = data.get('contents') or data.get('content') or []
        return cls(
            id=book_id,
            name=data.get('name', ''),
            slug=data.get('slug', '') or '',
            description=data.get('description') or None,
            chapters=[
                Chapter.from_api(item, book_id) for item in contents if item.get('type') == 'chapter'
            ],
            pages=[
                Page.from_api(item, book_id) for item in contents if item.get('type') == 'page'
            ],
        )


@dataclass
class EntityMetadata:
    """Optional name/description read from a sidecar JSON file."""
    name: Optional[str] = None
    description: Optional[str] = None


@dataclass
class ImportUnit:
    """One importable file found by the tree walker.

    Attributes:
        file_path: Absolute path of the file
        relative_path: Path relative to the import root
        display_name: Page name (file name without extension)
        format: Content format the file will be converted from
        depth: Nesting level below the import root (0 = root files)
    """
    file_path: str
    relative_path: str
    display_name: str
    format: ContentFormat
    depth: int = 0


@dataclass
class ImportOptions:
    """Options for one import run, validated once by the orchestrator.

    Attributes:
        book: Target book name or numeric ID (defaults to the source name)
        format: Force a source format instead of per-file detection
        max_depth: Subdirectory levels descended inside each chapter directory
        chapter_from: Chapter naming policy, ``dir`` or ``readme``
        flatten: Import every file as a book-level page, creating no chapters
        dry_run: Report what would happen without any remote calls
    """
    book: Optional[str] = None
    format: Optional[str] = None
    max_depth: int = DEFAULT_MAX_DEPTH
    chapter_from: str = 'dir'
    flatten: bool = False
    dry_run: bool = False

    def validate(self) -> None:
        """Check option values.

        Raises:
            ConfigError: If any field holds an unsupported value
        """
        if self.format is not None and self.format not in IMPORT_FORMATS:
            raise ConfigError(
                f"Unsupported format '{self.format}'. Expected one of: {', '.join(IMPORT_FORMATS)}",
                'format'
            )
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 0:
            raise ConfigError(
                f"max_depth must be a non-negative integer, got {self.max_depth!r}",
                'max_depth'
            )
        if self.chapter_from not in CHAPTER_FROM_CHOICES:
            raise ConfigError(
                f"Unsupported chapter naming '{self.chapter_from}'. "
                f"Expected one of: {', '.join(CHAPTER_FROM_CHOICES)}",
                'chapter_from'
            )
        if self.book is not None and not self.book.strip():
            raise ConfigError("Book name cannot be empty", 'book')


@dataclass
class ExportOptions:
    """Options for mirroring a book to the local filesystem."""
    out_dir: Optional[str] = None
    format: str = 'markdown'
    dry_run: bool = False
    single_file: bool = False

    def validate(self) -> None:
        if self.format not in EXPORT_FORMATS:
            raise ConfigError(
                f"Unsupported export format '{self.format}'. Expected one of: {', '.join(EXPORT_FORMATS)}",
                'format'
            )

    @property
    def extension(self) -> str:
        return EXPORT_EXTENSIONS[self.format]


@dataclass
class ImportResult:
    """Outcome of an import run, used for the summary line.

    Attributes:
        book: The book pages were imported into (placeholder in dry run)
        total_files: Files counted by the count pass
        pages_created: Page create calls issued (or simulated in dry run)
        chapters: Chapters resolved during the run, by directory name
        bytes_read: Total UTF-8 bytes of imported file content
        duration_seconds: Wall-clock duration of the run
        dry_run: Whether the run was simulated
    """
    book: Optional[Book] = None
    total_files: int = 0
    pages_created: int = 0
    chapters: Dict[str, Chapter] = field(default_factory=dict)
    bytes_read: int = 0
    duration_seconds: float = 0.0
    dry_run: bool = False


@dataclass
class ExportResult:
    """Outcome of an export run."""
    book: Optional[Book] = None
    files_written: int = 0
    bytes_written: int = 0
    paths: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    dry_run: bool = False
