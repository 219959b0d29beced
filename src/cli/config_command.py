"""ConfigCommand: create and display the connection configuration."""

import logging
from typing import Optional

from .config import DEFAULT_CONFIG_PATH, ConfigResolver
from .errors import CLIError
from .models import ExitCode, ResolvedConfig
from .output import OutputHandler

logger = logging.getLogger(__name__)


class ConfigCommand:
    """Handles ``config init`` and ``config show``.

    Example:
        >>> cmd = ConfigCommand(output_handler=output)
        >>> cmd.init("bookstack-config.json")
    """

    def __init__(self, output_handler: Optional[OutputHandler] = None):
        self.output_handler = output_handler or OutputHandler()

    def init(self, config_path: Optional[str] = None) -> ExitCode:
        """Write a starter config file unless one already exists."""
        config_path = config_path or DEFAULT_CONFIG_PATH
        try:
            created = ConfigResolver.write_template(config_path)
        except CLIError as e:
            logger.error(f"Config init failed: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        if created:
            self.output_handler.success(f"Created config file at {config_path}")
            self.output_handler.print("Please edit the file with your BookStack credentials.")
        else:
            self.output_handler.print(f"Config file already exists at {config_path}")
        return ExitCode.SUCCESS

    def show(self, config: ResolvedConfig) -> ExitCode:
        """Print the resolved configuration with secrets redacted."""
        self.output_handler.print_config(ConfigResolver.redact(config))
        if config.missing:
            self.output_handler.warning(
                f"Missing settings: {', '.join(config.missing)}. "
                "Run 'bookstack config init' to create a config file."
            )
        return ExitCode.SUCCESS
