"""Root pytest configuration for all tests."""

import logging

import pytest

# Suppress connection-pool chatter from requests when tests exercise the
# real session object.
logging.getLogger("urllib3").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers that _configure_logging attached during a CLI test.

    CliRunner swaps sys.stderr per invocation; a handler left behind would
    write to a closed stream in later tests.
    """
    yield
    app_logger = logging.getLogger("src")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.NOTSET)


BOOKSTACK_ENV_VARS = (
    'BOOKSTACK_URL',
    'BOOKSTACK_BASE_URL',
    'BOOKSTACK_HOST',
    'BOOKSTACK_TOKEN_ID',
    'BOOKSTACK_ID',
    'BOOKSTACK_TOKEN_SECRET',
    'BOOKSTACK_SECRET',
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty working directory with no BookStack variables set.

    Each variable is set then deleted so monkeypatch also removes values
    that load_dotenv writes during the test.
    """
    for name in BOOKSTACK_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
