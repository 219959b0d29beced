"""BookStack client library for bookstack-cli.

This package provides Python abstractions over the BookStack REST API,
covering the book, chapter and page endpoints used by import and export.
"""

from .errors import (
    SyncError,
    BookStackError,
    InvalidCredentialsError,
    ResourceNotFoundError,
    APIUnreachableError,
    APIAccessError,
)
from .auth import Authenticator, Credentials
from .api_wrapper import APIWrapper

__all__ = [
    "SyncError",
    "BookStackError",
    "InvalidCredentialsError",
    "ResourceNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "Authenticator",
    "Credentials",
    "APIWrapper",
]
