"""Import orchestration: local files and directories into BookStack.

An import runs as ``connectivity check -> resolve book -> count pass ->
execute pass``. The count pass and the execute pass each do their own
traversal of the source tree through ``tree_walker.walk`` so the progress
total is known before the first write, and both passes apply the same
filter and depth budget.

Directory layout maps onto BookStack like this:

- files directly in the source directory become book-level pages
- each first-level subdirectory becomes a chapter (unless ``flatten``) and
  the files below it, up to ``max_depth`` levels deep, become its pages
"""

import logging
import os
import time
from typing import Iterator, Optional

from src.bookstack_client.api_wrapper import APIWrapper
from src.bookstack_client.errors import APIUnreachableError, BookStackError
from src.content_converter.format_converter import FormatConverter

from .errors import FilesystemError, SourcePathError
from .metadata_resolver import MetadataResolver
from .models import Book, Chapter, ImportOptions, ImportResult, ImportUnit, Page
from .progress import ProgressTracker
from .reconciler import RemoteReconciler
from .tree_walker import list_directory, walk

logger = logging.getLogger(__name__)


def make_unit(file_path: str, import_root: str, converter: FormatConverter) -> ImportUnit:
    """Describe one file relative to the directory the import started from."""
    relative_path = os.path.relpath(file_path, import_root)
    return ImportUnit(
        file_path=file_path,
        relative_path=relative_path,
        display_name=os.path.splitext(os.path.basename(file_path))[0],
        format=converter.classify(file_path),
        depth=relative_path.count(os.sep),
    )


def iter_units(
    directory: str,
    max_depth: int,
    converter: FormatConverter,
    import_root: Optional[str] = None,
) -> Iterator[ImportUnit]:
    """Yield an ImportUnit for each supported file below ``directory``.

    ``max_depth=0`` yields only the files directly inside ``directory``.
    Depths and relative paths are measured from ``import_root`` (defaults
    to ``directory``).
    """
    import_root = import_root or directory
    for file_path, _ in walk(directory, max_depth):
        yield make_unit(file_path, import_root, converter)


def count_files(source: str, options: ImportOptions) -> int:
    """Count the pages an import of ``source`` will create.

    Touches only the local filesystem. For a directory the result equals
    the number of page creations the execute pass performs with the same
    options.
    """
    if os.path.isfile(source):
        return 1

    converter = FormatConverter()
    total = sum(1 for _ in iter_units(source, 0, converter))
    for subdirectory in list_directory(source).subdirectories:
        total += sum(1 for _ in iter_units(subdirectory, options.max_depth, converter))
    return total


class ImportOrchestrator:
    """Imports a file or directory tree into a BookStack book.

    Pages are always created anew: re-running an import duplicates them.
    Books and chapters are reused when they already exist. Any remote error
    aborts the run; entities created before the failure are left in place.

    Example:
        >>> orchestrator = ImportOrchestrator(api)
        >>> result = orchestrator.execute("./docs", ImportOptions(book="Handbook"))
        >>> print(f"{result.pages_created} pages")
    """

    def __init__(
        self,
        api: Optional[APIWrapper] = None,
        converter: Optional[FormatConverter] = None,
    ):
        """Initialize the orchestrator.

        Args:
            api: API wrapper; may be None for dry runs
            converter: Format converter (a default one is created if omitted)
        """
        self._api = api
        self._converter = converter or FormatConverter()

    def _report(self, message: str) -> None:
        """Print a user-facing progress line."""
        print(message)

    def execute(
        self,
        source: str,
        options: ImportOptions,
        progress: Optional[ProgressTracker] = None,
    ) -> ImportResult:
        """Run an import.

        Args:
            source: File or directory to import
            options: Import options (validated here)
            progress: Progress tracker sized by the count pass

        Returns:
            ImportResult with page/byte counts and duration

        Raises:
            ConfigError: If options are invalid
            APIUnreachableError: If the connectivity check fails
            SourcePathError: If source is missing or not a file/directory
            FilesystemError: If a file or directory cannot be read
            BookStackError: If any remote lookup or create fails
        """
        options.validate()
        progress = progress or ProgressTracker()
        started = time.monotonic()

        self._report(f"Importing from: {source}")
        self._report(f"Format: {options.format or 'auto-detect'}")
        self._report(f"Target book: {options.book or 'auto-detect'}")

        if options.dry_run:
            self._report("DRY RUN MODE - No changes will be made")
        else:
            if self._api is None:
                raise ValueError("An API wrapper is required unless dry_run is set")
            self._report("Testing BookStack connection...")
            if not self._api.test_connection():
                raise APIUnreachableError(endpoint=self._api.endpoint)
            self._report("Connection successful!")

        source_path = os.path.abspath(source)
        if not os.path.exists(source_path):
            raise SourcePathError(source_path)

        reconciler = RemoteReconciler(self._api, dry_run=options.dry_run)
        result = ImportResult(dry_run=options.dry_run)

        try:
            if os.path.isfile(source_path):
                self._import_file(source_path, options, reconciler, result, progress)
            elif os.path.isdir(source_path):
                self._import_directory(source_path, options, reconciler, result, progress)
            else:
                raise SourcePathError(source_path, "Source must be a file or directory")
        finally:
            progress.stop()

        result.duration_seconds = time.monotonic() - started
        self._report("Import completed!")
        logger.info(
            f"Import finished: {result.pages_created} page(s), "
            f"{len(result.chapters)} chapter(s), {result.bytes_read} bytes"
        )
        return result

    def _import_file(
        self,
        file_path: str,
        options: ImportOptions,
        reconciler: RemoteReconciler,
        result: ImportResult,
        progress: ProgressTracker,
    ) -> None:
        """Import a single file as one book-level page."""
        unit = make_unit(file_path, os.path.dirname(file_path), self._converter)
        book = reconciler.get_or_create_book(options.book or unit.display_name)
        result.book = book

        result.total_files = count_files(file_path, options)
        progress.start(result.total_files)
        self._create_page(unit, book, None, options, result, progress)

    def _import_directory(
        self,
        root: str,
        options: ImportOptions,
        reconciler: RemoteReconciler,
        result: ImportResult,
        progress: ProgressTracker,
    ) -> None:
        """Import a directory tree as a book with chapters."""
        book_metadata = MetadataResolver.read_book_metadata(root)
        book_name = options.book or book_metadata.name or os.path.basename(root)
        book = reconciler.get_or_create_book(book_name)
        result.book = book

        if book_metadata.description:
            try:
                reconciler.update_book_description(book, book_metadata.description)
            except BookStackError as e:
                logger.debug(f"Could not update description of book {book.id}: {e}")

        self._report(f"Processing directory as book: {book.name}")

        result.total_files = count_files(root, options)
        progress.start(result.total_files)

        for unit in iter_units(root, 0, self._converter):
            self._create_page(unit, book, None, options, result, progress)

        for subdirectory in list_directory(root).subdirectories:
            chapter = None
            if not options.flatten:
                metadata = MetadataResolver.read_chapter_metadata(subdirectory)
                name = MetadataResolver.resolve_chapter_name(
                    subdirectory, options.chapter_from, metadata
                )
                chapter = reconciler.get_or_create_chapter(book.id, name, metadata.description)
                result.chapters[os.path.basename(subdirectory)] = chapter

            for unit in iter_units(subdirectory, options.max_depth, self._converter, import_root=root):
                self._create_page(unit, book, chapter, options, result, progress)

    def _read_file(self, file_path: str) -> str:
        """Read a file as UTF-8; undecodable bytes become U+FFFD."""
        try:
            with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
                return f.read()
        except PermissionError:
            raise FilesystemError(file_path, 'read', 'Permission denied')
        except OSError as e:
            raise FilesystemError(file_path, 'read', str(e))

    def _create_page(
        self,
        unit: ImportUnit,
        book: Book,
        chapter: Optional[Chapter],
        options: ImportOptions,
        result: ImportResult,
        progress: ProgressTracker,
    ) -> None:
        """Convert one file and create it as a page (or report it in a dry run)."""
        name = unit.display_name
        content = self._read_file(unit.file_path)
        self._report(f"  Processing file: {name}")
        logger.debug(f"Page source {unit.relative_path} (depth {unit.depth})")

        fmt = options.format or unit.format
        converted = self._converter.convert(content, fmt)

        if options.dry_run:
            scope = f"chapter: {chapter.name}" if chapter else f"book: {book.name}"
            self._report(f"    Would create page: {name} in {scope}")
            self._report(f"    Content length: {len(content)} characters")
        else:
            created = self._api.create_page({
                'book_id': book.id,
                'chapter_id': chapter.id if chapter else None,
                'name': name,
                'html': converted.html,
                'markdown': converted.markdown,
            })
            page = Page.from_api(created, book.id)
            self._report(f"    Created page: {page.name} (ID: {page.id})")

        result.pages_created += 1
        result.bytes_read += len(content.encode('utf-8'))
        progress.tick()
