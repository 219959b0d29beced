"""ExportCommand: mirror a BookStack book into a local folder tree."""

import logging

from src.book_mapper.exporter import ExportMirror
from src.book_mapper.models import ExportOptions

from .base_command import BaseCommand
from .models import ExitCode

logger = logging.getLogger(__name__)


class ExportCommand(BaseCommand):
    """Runs an export and reports its summary.

    Example:
        >>> cmd = ExportCommand(output_handler=output, config=config)
        >>> exit_code = cmd.run("Handbook", ExportOptions(out_dir="./handbook"))
    """

    name = "export"

    def run(self, book: str, options: ExportOptions) -> ExitCode:
        """Execute the export.

        Args:
            book: Book ID, name or slug
            options: Export options

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            options.validate()
            mirror = ExportMirror(self._get_api_wrapper())

            with self.output_handler.spinner(f"Looking up book {book}..."):
                remote_book = mirror.resolve_book(book)

            progress = self.output_handler.progress_tracker("Exporting")
            result = mirror.execute(remote_book, options, progress)

            self.output_handler.print_export_summary(result)
            return ExitCode.SUCCESS

        except Exception as e:
            return self._handle_error(e)
