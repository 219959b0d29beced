"""Typed exception hierarchy for BookStack-related errors.

This module defines all custom exceptions used by the BookStack client library.
All exceptions inherit from BookStackError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional, Union


class SyncError(Exception):
    """Base exception for all bookstack-cli errors.

    Use this to catch any application-level error from the CLI.
    """
    pass


class BookStackError(SyncError):
    """Base exception for all BookStack-related errors."""
    pass


class InvalidCredentialsError(BookStackError):
    """Raised when API credentials are missing, invalid or rejected."""

    def __init__(self, token_id: str, endpoint: str, missing: Optional[list] = None):
        if missing:
            message = (
                f"BookStack configuration is incomplete (missing: {', '.join(missing)})"
            )
        else:
            message = f"API token is invalid (token id: {token_id}, endpoint: {endpoint})"
        super().__init__(message)
        self.token_id = token_id
        self.endpoint = endpoint
        self.missing = missing or []


class ResourceNotFoundError(BookStackError):
    """Raised when a requested book, chapter or page does not exist."""

    def __init__(self, resource: str, identifier: Union[int, str]):
        super().__init__(f"{resource.capitalize()} {identifier} not found")
        self.resource = resource
        self.identifier = identifier


class APIUnreachableError(BookStackError):
    """Raised when the BookStack API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(BookStackError):
    """Raised when API access fails after retries or due to access restrictions."""

    def __init__(self, message: str = "BookStack API failure (after 3 retries)"):
        super().__init__(message)
