"""Idempotent find-or-create of books and chapters.

Books are matched by numeric ID (when the target is all digits) and then by
case-insensitive name or slug; chapters by case-insensitive name within
their book. An existing match is always reused rather than duplicated.
Pages are never reconciled: every import creates them anew.
"""

import logging
import re
from typing import Optional

from src.bookstack_client.api_wrapper import APIWrapper
from src.bookstack_client.errors import ResourceNotFoundError

from .models import Book, Chapter

logger = logging.getLogger(__name__)

# ID used for placeholder entities in dry-run mode
DRY_RUN_ID = 1

DEFAULT_BOOK_DESCRIPTION = "Book created by bookstack-cli import"

# Book IDs are ASCII digits only
NUMERIC_ID_RE = re.compile(r"[0-9]+")


def derive_slug(name: str) -> str:
    """Approximate BookStack's slug for placeholder entities."""
    return re.sub(r'\s+', '-', name.strip().lower())


class RemoteReconciler:
    """Resolves the book and chapters an import writes into.

    In dry-run mode no API call is made at all: placeholder entities with a
    fixed ID and derived slug stand in so the rest of the import runs
    unchanged.

    Example:
        >>> reconciler = RemoteReconciler(api)
        >>> book = reconciler.get_or_create_book("Handbook")
        >>> chapter = reconciler.get_or_create_chapter(book.id, "Introduction")
    """

    def __init__(self, api: Optional[APIWrapper], dry_run: bool = False):
        """Initialize the reconciler.

        Args:
            api: API wrapper; may be None only in dry-run mode
            dry_run: Return placeholders instead of calling the API
        """
        if api is None and not dry_run:
            raise ValueError("An API wrapper is required unless dry_run is set")
        self._api = api
        self._dry_run = dry_run

    def _report(self, message: str) -> None:
        print(message)

    def get_or_create_book(self, name: str) -> Book:
        """Find a book by ID or name, creating it when nothing matches.

        A purely numeric ``name`` is first tried as a book ID; a missing ID
        falls through to the name search. Authentication and network errors
        propagate unchanged.

        Args:
            name: Book name, slug or numeric ID

        Returns:
            The existing or newly created Book
        """
        self._report(f"Looking for book: {name}")

        if self._dry_run:
            return Book(id=DRY_RUN_ID, name=name, slug=derive_slug(name))

        data = None
        if NUMERIC_ID_RE.fullmatch(name):
            try:
                data = self._api.get_book(int(name))
            except ResourceNotFoundError:
                logger.debug(f"No book with ID {name}, searching by name")

        if data is None:
            data = self._api.find_book_by_name(name)

        if data is not None:
            book = Book.from_api(data)
            self._report(f"Using existing book: {book.name} (ID: {book.id})")
            return book

        self._report(f"Book not found, creating new book: {name}")
        created = self._api.create_book({
            'name': name,
            'description': DEFAULT_BOOK_DESCRIPTION,
        })
        book = Book.from_api(created)
        self._report(f"Created book: {book.name} (ID: {book.id})")
        return book

    def get_or_create_chapter(
        self,
        book_id: int,
        name: str,
        description: Optional[str] = None,
    ) -> Chapter:
        """Find a chapter by case-insensitive name in a book, creating it if absent.

        Args:
            book_id: Book the chapter belongs to
            name: Chapter name
            description: Description used only when the chapter is created

        Returns:
            The existing or newly created Chapter
        """
        if self._dry_run:
            self._report(f"  Would use chapter: {name}")
            return Chapter(id=DRY_RUN_ID, book_id=book_id, name=name, slug=derive_slug(name))

        needle = name.lower()
        for data in self._api.get_chapters(book_id):
            if (data.get('name') or '').lower() == needle:
                chapter = Chapter.from_api(data, book_id)
                self._report(f"  Using existing chapter: {chapter.name} (ID: {chapter.id})")
                return chapter

        fields = {'name': name}
        if description:
            fields['description'] = description
        chapter = Chapter.from_api(self._api.create_chapter(book_id, fields), book_id)
        self._report(f"  Created chapter: {chapter.name} (ID: {chapter.id})")
        return chapter

    def update_book_description(self, book: Book, description: str) -> None:
        """Set a book's description. No-op in dry-run mode."""
        if self._dry_run:
            return
        self._api.update_book(book.id, {'description': description})
        book.description = description
