"""Book mapper library for bookstack-cli.

This package maps local directory trees onto BookStack's book, chapter and
page hierarchy (import) and mirrors a remote book back onto a folder tree
(export).
"""

from .importer import ImportOrchestrator, count_files
from .exporter import ExportMirror
from .reconciler import RemoteReconciler
from .metadata_resolver import MetadataResolver
from .filesafe_converter import FilesafeConverter
from .progress import ProgressTracker
from .models import (
    Book,
    Chapter,
    Page,
    EntityMetadata,
    ImportUnit,
    ImportOptions,
    ExportOptions,
    ImportResult,
    ExportResult,
)
from .errors import (
    MapperError,
    FilesystemError,
    SourcePathError,
    ConfigError,
)

__all__ = [
    'ImportOrchestrator',
    'count_files',
    'ExportMirror',
    'RemoteReconciler',
    'MetadataResolver',
    'FilesafeConverter',
    'ProgressTracker',
    'Book',
    'Chapter',
    'Page',
    'EntityMetadata',
    'ImportUnit',
    'ImportOptions',
    'ExportOptions',
    'ImportResult',
    'ExportResult',
    'MapperError',
    'FilesystemError',
    'SourcePathError',
    'ConfigError',
]
