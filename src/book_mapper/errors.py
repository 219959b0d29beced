"""Typed exception hierarchy for import/export mapping errors.

This module defines all custom exceptions used by the book mapper library.
All exceptions inherit from MapperError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional

from src.bookstack_client.errors import SyncError


class MapperError(SyncError):
    """Base exception for all book mapper errors."""
    pass


class FilesystemError(MapperError):
    """Raised when filesystem operations fail (read, write, permissions, etc)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class SourcePathError(MapperError):
    """Raised when the import source is missing or is neither file nor directory."""

    def __init__(self, source_path: str, reason: str = "Source path does not exist"):
        super().__init__(f"{reason}: {source_path}")
        self.source_path = source_path
        self.reason = reason


class ConfigError(MapperError):
    """Raised when import or export options fail validation."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message
