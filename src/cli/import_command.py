"""ImportCommand: local file or directory tree into a BookStack book."""

import logging

from src.book_mapper.importer import ImportOrchestrator
from src.book_mapper.models import ImportOptions

from .base_command import BaseCommand
from .models import ExitCode

logger = logging.getLogger(__name__)


class ImportCommand(BaseCommand):
    """Runs an import and reports its summary.

    Dry runs never build an API client, so they work without credentials.

    Example:
        >>> cmd = ImportCommand(output_handler=output, config=config)
        >>> exit_code = cmd.run("./docs", ImportOptions(book="Handbook"))
    """

    name = "import"

    def run(self, source: str, options: ImportOptions) -> ExitCode:
        """Execute the import.

        Args:
            source: File or directory to import
            options: Import options

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            api = None if options.dry_run else self._get_api_wrapper()
            orchestrator = ImportOrchestrator(api)
            progress = self.output_handler.progress_tracker("Importing")

            result = orchestrator.execute(source, options, progress)

            self.output_handler.print_import_summary(result)
            return ExitCode.SUCCESS

        except Exception as e:
            return self._handle_error(e)
