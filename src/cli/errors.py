"""Typed exception hierarchy for CLI-related errors.

This module defines all custom exceptions used by the CLI.
All exceptions inherit from CLIError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional

from src.bookstack_client.errors import SyncError


class CLIError(SyncError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigFileError(CLIError):
    """Raised when a configuration file cannot be written."""

    def __init__(self, config_path: str, reason: Optional[str] = None):
        message = f"Configuration file error for {config_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.config_path = config_path
        self.reason = reason


class UsageError(CLIError):
    """Raised when a command is invoked with an invalid combination of arguments."""

    def __init__(self, message: str):
        super().__init__(message)
