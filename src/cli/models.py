"""Data models for CLI operations.

This module defines all data models used by the CLI module.
All models use dataclasses for clean, type-safe data structures,
following the patterns established in src/book_mapper/models.py.
"""

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import List, Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (config issues, validation failures,
      missing source, filesystem errors)
    - AUTH_ERROR (3): Missing or rejected API credentials
    - NETWORK_ERROR (4): Network connectivity or API availability issues

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class ResolvedConfig:
    """BookStack connection settings after layering CLI, environment and file.

    Attributes:
        url: BookStack base URL
        token_id: API token ID
        token_secret: API token secret
        source: Which layer supplied the settings (``cli``, ``env`` or a file path)
    """
    url: Optional[str] = None
    token_id: Optional[str] = None
    token_secret: Optional[str] = None
    source: Optional[str] = None

    @property
    def missing(self) -> List[str]:
        """Names of required settings that are not set."""
        names = []
        if not self.url:
            names.append('url')
        if not self.token_id:
            names.append('tokenId')
        if not self.token_secret:
            names.append('tokenSecret')
        return names

    def redact(self) -> 'ResolvedConfig':
        """Copy with the token values replaced by ``[SET]`` (or None when unset)."""
        return replace(
            self,
            token_id='[SET]' if self.token_id else None,
            token_secret='[SET]' if self.token_secret else None,
        )


@dataclass
class GlobalOptions:
    """Options given before the command name, shared by every command."""
    url: Optional[str] = None
    token_id: Optional[str] = None
    token_secret: Optional[str] = None
    config_path: Optional[str] = None
    verbosity: int = 0
    logdir: Optional[str] = None
    no_color: bool = False
