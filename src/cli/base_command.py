"""Shared plumbing for CLI commands.

Every command builds its API client lazily from the resolved configuration
and translates the typed exception hierarchy to exit codes the same way.
"""

import logging
from typing import Optional

from src.bookstack_client.api_wrapper import APIWrapper
from src.bookstack_client.auth import Authenticator
from src.bookstack_client.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    ResourceNotFoundError,
)
from src.book_mapper.errors import MapperError

from .errors import CLIError
from .models import ExitCode, ResolvedConfig
from .output import OutputHandler

logger = logging.getLogger(__name__)

CREDENTIALS_HINT = (
    "Set BOOKSTACK_URL, BOOKSTACK_TOKEN_ID and BOOKSTACK_TOKEN_SECRET, "
    "pass --url/--token-id/--token-secret, or run 'bookstack config init'"
)


class BaseCommand:
    """Base class for commands that talk to BookStack.

    Args:
        output_handler: OutputHandler for terminal output
        config: Resolved connection settings
        api_wrapper: Optional APIWrapper instance for testing
    """

    # Used in log messages, e.g. "Unexpected error during import"
    name = "command"

    def __init__(
        self,
        output_handler: Optional[OutputHandler] = None,
        config: Optional[ResolvedConfig] = None,
        api_wrapper: Optional[APIWrapper] = None,
    ):
        self.output_handler = output_handler or OutputHandler()
        self.config = config or ResolvedConfig()
        self.api_wrapper = api_wrapper

    def _get_api_wrapper(self) -> APIWrapper:
        """Get or create the API wrapper. No request is made here."""
        if self.api_wrapper is None:
            self.output_handler.debug(
                f"Using BookStack at {self.config.url or 'unset URL'} "
                f"(settings from {self.config.source or 'nowhere'})"
            )
            auth = Authenticator(
                url=self.config.url,
                token_id=self.config.token_id,
                token_secret=self.config.token_secret,
            )
            self.api_wrapper = APIWrapper(auth)
        return self.api_wrapper

    def _handle_error(self, error: Exception) -> ExitCode:
        """Report an exception and map it to an exit code."""
        if isinstance(error, InvalidCredentialsError):
            logger.error(f"Authentication failed: {error}")
            self.output_handler.error(f"Authentication failed: {error}")
            self.output_handler.print(CREDENTIALS_HINT)
            return ExitCode.AUTH_ERROR

        if isinstance(error, (APIUnreachableError, APIAccessError)):
            logger.error(f"API error: {error}")
            self.output_handler.error(f"API error: {error}")
            self.output_handler.info("Check the BookStack URL and your network connection")
            return ExitCode.NETWORK_ERROR

        if isinstance(error, ResourceNotFoundError):
            logger.error(f"Not found: {error}")
            self.output_handler.error(str(error))
            return ExitCode.GENERAL_ERROR

        if isinstance(error, (MapperError, CLIError)):
            logger.error(f"{self.name.capitalize()} failed: {error}")
            self.output_handler.error(f"Error: {error}")
            return ExitCode.GENERAL_ERROR

        logger.exception(f"Unexpected error during {self.name}")
        self.output_handler.error(f"Unexpected error: {error}")
        return ExitCode.GENERAL_ERROR
