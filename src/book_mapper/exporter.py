"""Export mirror: a BookStack book recreated as a local folder tree.

Layout written for a book exported to ``out_dir``::

    out_dir/
        <page-slug>-<id>.<ext>          # top-level pages
        <chapter-slug>-<id>/
            <page-slug>-<id>.<ext>      # pages inside the chapter
"""

import logging
import os
import time
from typing import Optional, Union

from src.bookstack_client.api_wrapper import APIWrapper
from src.bookstack_client.errors import ResourceNotFoundError

from .errors import FilesystemError
from .filesafe_converter import FilesafeConverter
from .models import Book, ExportOptions, ExportResult, Page
from .progress import ProgressTracker
from .reconciler import NUMERIC_ID_RE

logger = logging.getLogger(__name__)


def count_pages(book: Book) -> int:
    """Number of page files a mirror of ``book`` writes."""
    return len(book.pages) + sum(len(chapter.pages) for chapter in book.chapters)


class ExportMirror:
    """Writes a remote book's pages to the local filesystem.

    Dry runs still read the book's content tree so the would-write count
    is accurate, but fetch no page exports and touch no files.

    Example:
        >>> mirror = ExportMirror(api)
        >>> result = mirror.execute("Handbook", ExportOptions(out_dir="./handbook"))
    """

    def __init__(self, api: APIWrapper):
        self._api = api

    def _report(self, message: str) -> None:
        print(message)

    def resolve_book(self, identifier: str) -> Book:
        """Fetch a book with its content tree by numeric ID, name or slug.

        A numeric identifier is tried as an ID first; a missing ID falls
        back to the name search.

        Raises:
            ResourceNotFoundError: If no book matches
        """
        identifier = str(identifier).strip()
        if NUMERIC_ID_RE.fullmatch(identifier):
            try:
                return Book.from_api(self._api.get_book(int(identifier)))
            except ResourceNotFoundError:
                logger.debug(f"No book with ID {identifier}, searching by name")

        found = self._api.find_book_by_name(identifier)
        if found is None:
            raise ResourceNotFoundError(resource='book', identifier=identifier)
        return Book.from_api(self._api.get_book(found['id']))

    def default_out_dir(self, book: Book) -> str:
        return os.path.join('.', FilesafeConverter.sanitize(book.slug or book.name))

    def execute(
        self,
        book_identifier: Union[str, Book],
        options: ExportOptions,
        progress: Optional[ProgressTracker] = None,
    ) -> ExportResult:
        """Export a book.

        Args:
            book_identifier: Book ID, name or slug, or an already resolved Book
            options: Export options (validated here)
            progress: Progress tracker sized with the number of files

        Returns:
            ExportResult listing the written (or would-be) paths

        Raises:
            ConfigError: If options are invalid
            ResourceNotFoundError: If the book doesn't exist
            FilesystemError: If a directory or file cannot be written
            BookStackError: If an export request fails
        """
        options.validate()
        progress = progress or ProgressTracker()
        started = time.monotonic()

        if isinstance(book_identifier, Book):
            book = book_identifier
        else:
            book = self.resolve_book(book_identifier)
        out_dir = options.out_dir or self.default_out_dir(book)
        result = ExportResult(book=book, dry_run=options.dry_run)

        self._report(f"Exporting book: {book.name} (ID: {book.id})")
        if options.dry_run:
            self._report("DRY RUN MODE - No files will be written")

        try:
            if options.single_file:
                progress.start(1)
                self._export_single_file(book, out_dir, options, result)
                progress.tick()
            else:
                progress.start(count_pages(book))
                self._mirror(book, out_dir, options, result, progress)
        finally:
            progress.stop()

        result.duration_seconds = time.monotonic() - started
        logger.info(
            f"Export finished: {result.files_written} file(s), {result.bytes_written} bytes"
        )
        return result

    def _mirror(
        self,
        book: Book,
        out_dir: str,
        options: ExportOptions,
        result: ExportResult,
        progress: ProgressTracker,
    ) -> None:
        self._ensure_directory(out_dir, options.dry_run)

        for page in book.pages:
            self._export_page(page, out_dir, options, result)
            progress.tick()

        for chapter in book.chapters:
            chapter_dir = os.path.join(
                out_dir, FilesafeConverter.entity_stem(chapter.slug, chapter.name, chapter.id)
            )
            self._ensure_directory(chapter_dir, options.dry_run)
            for page in chapter.pages:
                self._export_page(page, chapter_dir, options, result)
                progress.tick()

    def _export_page(
        self,
        page: Page,
        directory: str,
        options: ExportOptions,
        result: ExportResult,
    ) -> None:
        path = os.path.join(
            directory,
            FilesafeConverter.entity_filename(page.slug, page.name, page.id, options.extension),
        )
        if options.dry_run:
            self._report(f"  Would write: {path}")
        else:
            content = self._api.export_page(page.id, options.format)
            result.bytes_written += self._write(path, content)
            self._report(f"  Wrote: {path}")
        result.files_written += 1
        result.paths.append(path)

    def _export_single_file(
        self,
        book: Book,
        out_dir: str,
        options: ExportOptions,
        result: ExportResult,
    ) -> None:
        """Write the whole-book export to one file.

        ``out_dir`` is used as the file path when it has an extension.
        """
        if os.path.splitext(out_dir)[1]:
            path = out_dir
        else:
            file_name = f"{FilesafeConverter.sanitize(book.slug or book.name)}.{options.extension}"
            path = os.path.join(out_dir, file_name)

        if options.dry_run:
            self._report(f"  Would write: {path}")
        else:
            self._ensure_directory(os.path.dirname(path) or '.', dry_run=False)
            content = self._api.export_book(book.id, options.format)
            result.bytes_written += self._write(path, content)
            self._report(f"  Wrote: {path}")
        result.files_written += 1
        result.paths.append(path)

    def _ensure_directory(self, directory: str, dry_run: bool) -> None:
        if dry_run:
            return
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise FilesystemError(directory, 'mkdir', str(e))

    def _write(self, path: str, content: Union[str, bytes]) -> int:
        """Write text (UTF-8) or bytes to ``path``; return the byte count."""
        data = content.encode('utf-8') if isinstance(content, str) else content
        try:
            with open(path, 'wb') as f:
                f.write(data)
        except PermissionError:
            raise FilesystemError(path, 'write', 'Permission denied')
        except OSError as e:
            raise FilesystemError(path, 'write', str(e))
        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return len(data)
