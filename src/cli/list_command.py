"""ListCommand: print books, chapters or pages."""

import logging
from typing import Any, Dict, List, Optional

from .base_command import BaseCommand
from .errors import UsageError
from .models import ExitCode

logger = logging.getLogger(__name__)

RESOURCE_TYPES = ('books', 'chapters', 'pages')


class ListCommand(BaseCommand):
    """Lists BookStack resources as ``id: name (slug)`` lines.

    Example:
        >>> ListCommand(output_handler=output, config=config).run("chapters", book="12")
    """

    name = "list"

    def run(self, resource: str, book: Optional[str] = None) -> ExitCode:
        """List one resource type.

        Args:
            resource: One of ``books``, ``chapters`` or ``pages``
            book: Book ID; required for chapters, optional filter for pages

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            if resource not in RESOURCE_TYPES:
                raise UsageError(
                    f"Unknown resource type: {resource}. "
                    f"Available types: {', '.join(RESOURCE_TYPES)}"
                )

            api = self._get_api_wrapper()

            if resource == 'books':
                self._print_items("Books:", api.get_books())
            elif resource == 'chapters':
                if not book:
                    raise UsageError("--book option is required for listing chapters")
                self._print_items(f"Chapters in book {book}:", api.get_chapters(book))
            elif book:
                self._print_items(f"Pages in book {book}:", api.get_pages(book))
            else:
                self._print_items("All pages:", api.get_all_pages())

            return ExitCode.SUCCESS

        except ValueError as e:
            # Non-numeric --book
            return self._handle_error(UsageError(str(e)))
        except Exception as e:
            return self._handle_error(e)

    def _print_items(self, heading: str, items: List[Dict[str, Any]]) -> None:
        self.output_handler.print(heading)
        for item in items:
            self.output_handler.print(f"  {item.get('id')}: {item.get('name')} ({item.get('slug')})")
        logger.debug(f"Listed {len(items)} item(s)")
