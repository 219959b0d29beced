"""Main CLI entry point for the bookstack command.

This module provides the Typer application that serves as the entry point
for the bookstack command-line tool. Connection options are global and come
before the command name; each command resolves the layered configuration
and hands off to a command class that returns an exit code.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.book_mapper.models import DEFAULT_MAX_DEPTH, ExportOptions, ImportOptions
from src.cli.config import ConfigResolver
from src.cli.config_command import ConfigCommand
from src.cli.export_command import ExportCommand
from src.cli.import_command import ImportCommand
from src.cli.list_command import ListCommand
from src.cli.models import ExitCode, GlobalOptions, ResolvedConfig
from src.cli.output import OutputHandler

VERSION = "1.0.0"

app = typer.Typer(
    name="bookstack",
    help="""Import local content into BookStack and export books back to disk.

QUICK START:
  bookstack config init                          # Create bookstack-config.json
  bookstack import ./docs --book "Handbook"      # Directory -> book/chapters/pages
  bookstack import ./docs --dry-run              # Preview without changes
  bookstack export "Handbook" --out ./handbook   # Book -> folder tree
  bookstack list books                           # List books""",
    add_completion=False,
    rich_markup_mode=None,  # Disable Rich markup to avoid compatibility issues
    no_args_is_help=True,
)

config_app = typer.Typer(
    help="Manage configuration",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

# Module logger
logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    # Configure app-specific logger (not root) to avoid affecting libraries
    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Timestamped filename in local time
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"bookstack-cli_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"bookstack-cli version {VERSION}")
        raise typer.Exit()


def _global_options(ctx: typer.Context) -> GlobalOptions:
    return ctx.obj if isinstance(ctx.obj, GlobalOptions) else GlobalOptions()


def _resolve_config(options: GlobalOptions) -> ResolvedConfig:
    return ConfigResolver.resolve(
        explicit_path=options.config_path,
        url=options.url,
        token_id=options.token_id,
        token_secret=options.token_secret,
    )


def _output_handler(options: GlobalOptions) -> OutputHandler:
    return OutputHandler(verbosity=options.verbosity, no_color=options.no_color)


@app.callback()
def main_callback(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(
        None,
        "--url",
        "-u",
        help="BookStack base URL",
        metavar="URL",
    ),
    token_id: Optional[str] = typer.Option(
        None,
        "--token-id",
        "-i",
        help="BookStack API token ID",
    ),
    token_secret: Optional[str] = typer.Option(
        None,
        "--token-secret",
        "-s",
        help="BookStack API token secret",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file path (default: search the working directory)",
        metavar="PATH",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Import local content into BookStack and export books back to disk."""
    ctx.obj = GlobalOptions(
        url=url,
        token_id=token_id,
        token_secret=token_secret,
        config_path=config_path,
        verbosity=verbosity,
        logdir=logdir,
        no_color=no_color,
    )
    _configure_logging(verbosity, logdir)


@app.command("import")
def import_command(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Source file or directory to import"),
    book: Optional[str] = typer.Option(
        None,
        "--book",
        "-b",
        help="Target book name or ID (default: directory or file name)",
    ),
    source_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Force source format: markdown, html or plaintext (default: by extension)",
    ),
    max_depth: int = typer.Option(
        DEFAULT_MAX_DEPTH,
        "--max-depth",
        help="Subdirectory levels imported inside each chapter directory",
    ),
    chapter_from: str = typer.Option(
        "dir",
        "--chapter-from",
        help="Chapter naming: 'dir' (directory name) or 'readme' (README heading)",
    ),
    flatten: bool = typer.Option(
        False,
        "--flatten",
        help="Import every file as a book-level page, creating no chapters",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Show what would be imported without making changes",
    ),
) -> None:
    """Import a file or directory into BookStack.

    \b
    Directory layout:
      docs/intro.md            -> book-level page "intro"
      docs/Setup/install.md    -> page "install" in chapter "Setup"

    \b
    A .book-metadata.json in the source directory or a .chapter-metadata.json
    in a chapter directory may set {"name": ..., "description": ...}.
    """
    options = _global_options(ctx)
    output = _output_handler(options)

    import_options = ImportOptions(
        book=book,
        format=source_format,
        max_depth=max_depth,
        chapter_from=chapter_from,
        flatten=flatten,
        dry_run=dry_run,
    )

    cmd = ImportCommand(output_handler=output, config=_resolve_config(options))
    raise typer.Exit(cmd.run(source, import_options))


@app.command("export")
def export_command(
    ctx: typer.Context,
    book: str = typer.Argument(..., help="Book ID, name or slug"),
    out_dir: Optional[str] = typer.Option(
        None,
        "--out",
        "-o",
        help="Output directory (default: ./<book-slug>)",
        metavar="DIR",
    ),
    export_format: str = typer.Option(
        "markdown",
        "--format",
        "-f",
        help="Export format: markdown, html, plaintext or pdf",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Show the files that would be written without writing them",
    ),
    single_file: bool = typer.Option(
        False,
        "--single-file",
        help="Write the whole book to one file instead of a folder tree",
    ),
) -> None:
    """Export a BookStack book to local files."""
    options = _global_options(ctx)
    output = _output_handler(options)

    export_options = ExportOptions(
        out_dir=out_dir,
        format=export_format,
        dry_run=dry_run,
        single_file=single_file,
    )

    cmd = ExportCommand(output_handler=output, config=_resolve_config(options))
    raise typer.Exit(cmd.run(book, export_options))


@app.command("list")
def list_command(
    ctx: typer.Context,
    resource: str = typer.Argument(..., help="Resource type: books, chapters or pages"),
    book: Optional[str] = typer.Option(
        None,
        "--book",
        help="Book ID to filter by (required for chapters)",
    ),
) -> None:
    """List BookStack resources."""
    options = _global_options(ctx)
    output = _output_handler(options)

    cmd = ListCommand(output_handler=output, config=_resolve_config(options))
    raise typer.Exit(cmd.run(resource, book=book))


@config_app.command("init")
def config_init(ctx: typer.Context) -> None:
    """Create a config file template (bookstack-config.json or --config)."""
    options = _global_options(ctx)
    cmd = ConfigCommand(output_handler=_output_handler(options))
    raise typer.Exit(cmd.init(options.config_path))


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the resolved configuration with secrets hidden."""
    options = _global_options(ctx)
    cmd = ConfigCommand(output_handler=_output_handler(options))
    raise typer.Exit(cmd.show(_resolve_config(options)))


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
