"""Layered connection configuration.

Each setting (url, token id, token secret) is taken from the first layer
that provides it:

1. command-line flags
2. environment variables, after loading ``.env`` and then ``.env.local``
   (which overrides) from the working directory
3. the first configuration file found in the working directory

Configuration files may be JSON, YAML or TOML. Keys are accepted in camel
or snake case (``tokenId`` / ``token_id``).
"""

import json
import logging
import os
import tomllib
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigFileError
from .models import ResolvedConfig

logger = logging.getLogger(__name__)

# Searched in order; the first existing, parseable file wins
SEARCH_FILENAMES = (
    'bookstack-config.json',
    'bookstack.config.json',
    'bookstack.config.yaml',
    'bookstack.config.yml',
    'bookstack.config.toml',
    '.bookstackrc',
    '.bookstackrc.json',
    '.bookstackrc.yaml',
    '.bookstackrc.yml',
    '.bookstackrc.toml',
    'package.json',
)

DEFAULT_CONFIG_PATH = 'bookstack-config.json'

ENV_URL = ('BOOKSTACK_URL', 'BOOKSTACK_BASE_URL', 'BOOKSTACK_HOST')
ENV_TOKEN_ID = ('BOOKSTACK_TOKEN_ID', 'BOOKSTACK_ID')
ENV_TOKEN_SECRET = ('BOOKSTACK_TOKEN_SECRET', 'BOOKSTACK_SECRET')

CONFIG_TEMPLATE = {
    'url': 'https://your-bookstack-instance.com',
    'tokenId': 'your-token-id',
    'tokenSecret': 'your-token-secret',
}


def _first(values: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = values.get(key)
        if value:
            return str(value)
    return None


class ConfigResolver:
    """Resolves BookStack connection settings from flags, environment and files.

    Example:
        >>> config = ConfigResolver.resolve(url="https://docs.example.com")
        >>> print(config.source)
        cli
    """

    @staticmethod
    def normalize(raw: Any) -> ResolvedConfig:
        """Map a raw mapping with any accepted key spelling onto ResolvedConfig.

        Anything that is not a mapping yields an empty config.
        """
        if not isinstance(raw, dict):
            return ResolvedConfig()
        return ResolvedConfig(
            url=_first(raw, 'url', 'baseUrl', 'base_url'),
            token_id=_first(raw, 'tokenId', 'token_id'),
            token_secret=_first(raw, 'tokenSecret', 'token_secret'),
        )

    @classmethod
    def read_config_file(cls, path: str) -> ResolvedConfig:
        """Parse one configuration file.

        ``package.json`` is read from its ``bookstack`` (or ``bookstack-cli``)
        key. Extension-less rc files are tried as JSON, then YAML.

        Raises:
            OSError: If the file cannot be read
            ValueError: If a JSON or TOML file is malformed
            yaml.YAMLError: If a YAML file is malformed
        """
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()

        base = os.path.basename(path).lower()
        ext = os.path.splitext(base)[1]

        if base == 'package.json':
            package = json.loads(content)
            if not isinstance(package, dict):
                return ResolvedConfig()
            return cls.normalize(package.get('bookstack') or package.get('bookstack-cli') or {})

        if not ext:
            try:
                return cls.normalize(json.loads(content))
            except ValueError:
                pass
            try:
                return cls.normalize(yaml.safe_load(content))
            except yaml.YAMLError:
                return ResolvedConfig()

        if ext == '.json':
            return cls.normalize(json.loads(content))
        if ext in ('.yaml', '.yml'):
            return cls.normalize(yaml.safe_load(content))
        if ext == '.toml':
            return cls.normalize(tomllib.loads(content))
        return ResolvedConfig()

    @classmethod
    def find_file_config(
        cls,
        explicit_path: Optional[str] = None,
        cwd: Optional[str] = None,
    ) -> ResolvedConfig:
        """Load the first existing config file.

        Args:
            explicit_path: Only consider this file instead of the search list
            cwd: Directory relative names are resolved against (default: cwd)

        Returns:
            The file's settings with ``source`` set to its path, or an empty config
        """
        cwd = cwd or os.getcwd()
        candidates = (explicit_path,) if explicit_path else SEARCH_FILENAMES

        for name in candidates:
            path = name if os.path.isabs(name) else os.path.join(cwd, name)
            if not os.path.isfile(path):
                continue
            try:
                config = cls.read_config_file(path)
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.debug(f"Skipping unreadable config file {path}: {e}")
                continue
            config.source = path
            logger.debug(f"Loaded config file {path}")
            return config

        return ResolvedConfig()

    @classmethod
    def from_env(cls, cwd: Optional[str] = None) -> ResolvedConfig:
        """Read settings from the environment after loading .env files."""
        cwd = cwd or os.getcwd()
        load_dotenv(os.path.join(cwd, '.env'))
        load_dotenv(os.path.join(cwd, '.env.local'), override=True)

        return ResolvedConfig(
            url=_first(os.environ, *ENV_URL),
            token_id=_first(os.environ, *ENV_TOKEN_ID),
            token_secret=_first(os.environ, *ENV_TOKEN_SECRET),
            source='env',
        )

    @classmethod
    def resolve(
        cls,
        explicit_path: Optional[str] = None,
        url: Optional[str] = None,
        token_id: Optional[str] = None,
        token_secret: Optional[str] = None,
        cwd: Optional[str] = None,
    ) -> ResolvedConfig:
        """Merge the three layers field by field.

        ``source`` names the highest layer that supplied any value.
        """
        file_config = cls.find_file_config(explicit_path, cwd)
        env_config = cls.from_env(cwd)
        cli_config = ResolvedConfig(url=url, token_id=token_id, token_secret=token_secret)

        if cli_config.url or cli_config.token_id or cli_config.token_secret:
            source = 'cli'
        elif env_config.url or env_config.token_id or env_config.token_secret:
            source = 'env'
        else:
            source = file_config.source

        return ResolvedConfig(
            url=cli_config.url or env_config.url or file_config.url,
            token_id=cli_config.token_id or env_config.token_id or file_config.token_id,
            token_secret=(
                cli_config.token_secret or env_config.token_secret or file_config.token_secret
            ),
            source=source,
        )

    @staticmethod
    def redact(config: ResolvedConfig) -> ResolvedConfig:
        return config.redact()

    @staticmethod
    def write_template(path: str) -> bool:
        """Write the starter JSON config to ``path``.

        Returns:
            False if the file already exists (left untouched), True if written

        Raises:
            ConfigFileError: If the file cannot be written
        """
        if os.path.exists(path):
            return False

        directory = os.path.dirname(path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(CONFIG_TEMPLATE, f, indent=2)
                f.write('\n')
        except PermissionError:
            raise ConfigFileError(path, 'Permission denied')
        except OSError as e:
            raise ConfigFileError(path, str(e))
        return True
