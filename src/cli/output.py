"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Uses Rich library for progress bars, spinners, colored output, and formatted
text. Supports verbosity levels and --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    MofNCompleteColumn,
    TaskID,
    TaskProgressColumn,
    TimeRemainingColumn,
)
from rich.spinner import Spinner
from rich.live import Live

from src.book_mapper.models import ExportResult, ImportResult
from src.book_mapper.progress import ProgressTracker

from .models import ResolvedConfig

_BYTE_UNITS = ('B', 'KB', 'MB', 'GB', 'TB')


def format_bytes(size: int) -> str:
    """Human-readable byte count.

    Examples:
        >>> format_bytes(512)
        '512 B'
        >>> format_bytes(1536)
        '1.5 KB'
    """
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    if value < 10 and unit > 0:
        return f"{value:.1f} {_BYTE_UNITS[unit]}"
    return f"{value:.0f} {_BYTE_UNITS[unit]}"


def format_duration(seconds: float) -> str:
    """Human-readable duration.

    Examples:
        >>> format_duration(0.25)
        '250 ms'
        >>> format_duration(2.5)
        '2.5 s'
        >>> format_duration(125)
        '2m 5s'
    """
    if seconds < 1:
        return f"{int(round(seconds * 1000))} ms"
    if seconds < 10:
        return f"{seconds:.1f} s"
    if seconds < 60:
        return f"{seconds:.0f} s"
    minutes, remainder = divmod(int(round(seconds)), 60)
    return f"{minutes}m {remainder}s"


class OutputHandler:
    """Handles all terminal output using Rich library.

    Provides methods for displaying messages, progress bars, spinners,
    and summaries with color coding and verbosity level control.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
        >>> with handler.spinner("Processing..."):
        ...     # Do work
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.no_color = no_color
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        """Display message without markup processing."""
        self.console.print(message, markup=False)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Example:
            >>> with handler.spinner("Testing connection..."):
            ...     api.test_connection()
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def progress_tracker(self, description: str = "Processing") -> 'RichProgressTracker':
        """Create a progress bar that implements the ProgressTracker contract."""
        return RichProgressTracker(self.console, description)

    def print_import_summary(self, result: ImportResult) -> None:
        """Display the import summary line."""
        files = f"{result.pages_created} file(s)"
        details = f"{format_bytes(result.bytes_read)} in {format_duration(result.duration_seconds)}"
        book = f" into book '{result.book.name}'" if result.book else ""

        if result.dry_run:
            self.console.print(
                f"\n[yellow]Dry run complete:[/yellow] would import {files}{book} ({details})"
            )
        else:
            self.console.print(
                f"\n[green]Import complete:[/green] {files}{book}, "
                f"{len(result.chapters)} chapter(s) ({details})"
            )

    def print_export_summary(self, result: ExportResult) -> None:
        """Display the export summary line."""
        details = format_duration(result.duration_seconds)
        if result.dry_run:
            self.console.print(
                f"\n[yellow]Dry run complete:[/yellow] would write {result.files_written} file(s) ({details})"
            )
        else:
            self.console.print(
                f"\n[green]Export complete:[/green] {result.files_written} file(s), "
                f"{format_bytes(result.bytes_written)} ({details})"
            )

    def print_config(self, config: ResolvedConfig) -> None:
        """Display a resolved configuration. Callers pass a redacted copy."""
        self.print("Current configuration:")
        self.print(f"  URL: {config.url or 'Not set'}")
        self.print(f"  Token ID: {config.token_id or 'Not set'}")
        self.print(f"  Token Secret: {config.token_secret or 'Not set'}")
        self.print(f"  Source: {config.source or 'none'}")


class RichProgressTracker(ProgressTracker):
    """Rich progress bar driven by the import/export orchestrators.

    The bar is created on ``start`` with the count-pass total and removed
    on ``stop``. Lines printed while it is running appear above it.
    """

    def __init__(self, console: Console, description: str = "Processing"):
        super().__init__()
        self._console = console
        self._description = description
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    def start(self, total: int) -> None:
        super().start(total)
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self._console,
            transient=True,
        )
        self._task = self._progress.add_task(self._description, total=self.total)
        self._progress.start()

    def tick(self, n: int = 1) -> None:
        super().tick(n)
        if self._progress is not None and self._task is not None:
            self._progress.update(self._task, completed=self.current)

    def stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task = None
