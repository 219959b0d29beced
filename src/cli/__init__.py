"""Command-line interface for bookstack-cli.

This package provides the `bookstack` CLI tool that imports local Markdown,
HTML and text files into BookStack books, exports books back to folder
trees, and lists remote resources, with layered configuration, progress
indication and exit-code error handling.
"""

from .import_command import ImportCommand
from .export_command import ExportCommand
from .list_command import ListCommand
from .config_command import ConfigCommand
from .config import ConfigResolver
from .models import ExitCode, GlobalOptions, ResolvedConfig
from .errors import (
    CLIError,
    ConfigFileError,
    UsageError,
)

__all__ = [
    'ImportCommand',
    'ExportCommand',
    'ListCommand',
    'ConfigCommand',
    'ConfigResolver',
    'ExitCode',
    'GlobalOptions',
    'ResolvedConfig',
    'CLIError',
    'ConfigFileError',
    'UsageError',
]
