"""Unit tests for cli.config module (ConfigResolver)."""

import json
import os

import pytest

from src.cli.config import CONFIG_TEMPLATE, ConfigResolver
from src.cli.errors import ConfigFileError
from src.cli.models import ResolvedConfig


class TestNormalize:

    def test_camel_case_keys(self):
        config = ConfigResolver.normalize(
            {'url': 'https://a', 'tokenId': 'id', 'tokenSecret': 'secret'}
        )

        assert (config.url, config.token_id, config.token_secret) == ('https://a', 'id', 'secret')

    def test_snake_case_keys(self):
        config = ConfigResolver.normalize(
            {'base_url': 'https://a', 'token_id': 'id', 'token_secret': 'secret'}
        )

        assert (config.url, config.token_id, config.token_secret) == ('https://a', 'id', 'secret')

    @pytest.mark.parametrize("raw", [None, [], "url"])
    def test_non_mapping_is_empty(self, raw):
        assert ConfigResolver.normalize(raw) == ResolvedConfig()


class TestReadConfigFile:
    """Each supported file format yields the same settings."""

    def test_json(self, tmp_path):
        path = tmp_path / "bookstack-config.json"
        path.write_text(json.dumps({'url': 'https://a', 'tokenId': 'id'}))

        config = ConfigResolver.read_config_file(str(path))

        assert config.url == 'https://a'
        assert config.token_id == 'id'

    def test_yaml(self, tmp_path):
        path = tmp_path / "bookstack.config.yaml"
        path.write_text("url: https://a\ntoken_secret: s\n")

        config = ConfigResolver.read_config_file(str(path))

        assert config.url == 'https://a'
        assert config.token_secret == 's'

    def test_toml(self, tmp_path):
        path = tmp_path / "bookstack.config.toml"
        path.write_text('url = "https://a"\ntokenId = "id"\n')

        assert ConfigResolver.read_config_file(str(path)).token_id == 'id'

    def test_rc_file_as_json(self, tmp_path):
        path = tmp_path / ".bookstackrc"
        path.write_text('{"url": "https://a"}')

        assert ConfigResolver.read_config_file(str(path)).url == 'https://a'

    def test_rc_file_as_yaml(self, tmp_path):
        path = tmp_path / ".bookstackrc"
        path.write_text("url: https://b\n")

        assert ConfigResolver.read_config_file(str(path)).url == 'https://b'

    def test_package_json_key(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text(json.dumps({'name': 'site', 'bookstack': {'url': 'https://a'}}))

        assert ConfigResolver.read_config_file(str(path)).url == 'https://a'

    def test_package_json_without_key(self, tmp_path):
        path = tmp_path / "package.json"
        path.write_text(json.dumps({'name': 'site'}))

        assert ConfigResolver.read_config_file(str(path)) == ResolvedConfig()

    def test_malformed_json_raises(self, tmp_path):
        path = tmp_path / "bookstack-config.json"
        path.write_text("{not json")

        with pytest.raises(ValueError):
            ConfigResolver.read_config_file(str(path))


class TestFindFileConfig:
    """Test cases for the config file search."""

    def test_first_match_wins(self, clean_env):
        (clean_env / "bookstack-config.json").write_text('{"url": "https://first"}')
        (clean_env / "bookstack.config.yaml").write_text("url: https://second\n")

        config = ConfigResolver.find_file_config()

        assert config.url == 'https://first'
        assert config.source == os.path.join(str(clean_env), "bookstack-config.json")

    def test_malformed_file_is_skipped(self, clean_env):
        (clean_env / "bookstack-config.json").write_text("{broken")
        (clean_env / "bookstack.config.yaml").write_text("url: https://second\n")

        assert ConfigResolver.find_file_config().url == 'https://second'

    def test_explicit_path_only(self, clean_env):
        (clean_env / "bookstack-config.json").write_text('{"url": "https://default"}')
        (clean_env / "custom.json").write_text('{"url": "https://custom"}')

        assert ConfigResolver.find_file_config('custom.json').url == 'https://custom'

    def test_explicit_path_missing(self, clean_env):
        (clean_env / "bookstack-config.json").write_text('{"url": "https://default"}')

        assert ConfigResolver.find_file_config('missing.json') == ResolvedConfig()

    def test_nothing_found(self, clean_env):
        assert ConfigResolver.find_file_config() == ResolvedConfig()


class TestFromEnv:

    def test_primary_names(self, clean_env, monkeypatch):
        monkeypatch.setenv('BOOKSTACK_URL', 'https://env')
        monkeypatch.setenv('BOOKSTACK_TOKEN_ID', 'id')
        monkeypatch.setenv('BOOKSTACK_TOKEN_SECRET', 'secret')

        config = ConfigResolver.from_env()

        assert (config.url, config.token_id, config.token_secret) == ('https://env', 'id', 'secret')
        assert config.source == 'env'

    def test_alias_names(self, clean_env, monkeypatch):
        monkeypatch.setenv('BOOKSTACK_HOST', 'https://host')
        monkeypatch.setenv('BOOKSTACK_SECRET', 'secret')

        config = ConfigResolver.from_env()

        assert config.url == 'https://host'
        assert config.token_secret == 'secret'

    def test_dotenv_local_overrides_dotenv(self, clean_env):
        (clean_env / ".env").write_text("BOOKSTACK_URL=https://dotenv\nBOOKSTACK_TOKEN_ID=id\n")
        (clean_env / ".env.local").write_text("BOOKSTACK_URL=https://local\n")

        config = ConfigResolver.from_env()

        assert config.url == 'https://local'
        assert config.token_id == 'id'


class TestResolve:
    """Test cases for layering flags, environment and files."""

    def test_cli_beats_env_beats_file(self, clean_env, monkeypatch):
        (clean_env / "bookstack-config.json").write_text(json.dumps(
            {'url': 'https://file', 'tokenId': 'file-id', 'tokenSecret': 'file-secret'}
        ))
        monkeypatch.setenv('BOOKSTACK_TOKEN_ID', 'env-id')

        config = ConfigResolver.resolve(url='https://cli')

        assert config.url == 'https://cli'
        assert config.token_id == 'env-id'
        assert config.token_secret == 'file-secret'
        assert config.source == 'cli'

    def test_source_env(self, clean_env, monkeypatch):
        monkeypatch.setenv('BOOKSTACK_URL', 'https://env')

        assert ConfigResolver.resolve().source == 'env'

    def test_source_file(self, clean_env):
        (clean_env / "bookstack-config.json").write_text('{"url": "https://file"}')

        config = ConfigResolver.resolve()

        assert config.source.endswith("bookstack-config.json")
        assert config.missing == ['tokenId', 'tokenSecret']

    def test_nothing_configured(self, clean_env):
        config = ConfigResolver.resolve()

        assert config.source is None
        assert config.missing == ['url', 'tokenId', 'tokenSecret']


class TestRedact:

    def test_tokens_hidden(self):
        config = ResolvedConfig(url='https://a', token_id='id', token_secret='secret', source='cli')

        redacted = ConfigResolver.redact(config)

        assert redacted == ResolvedConfig(url='https://a', token_id='[SET]', token_secret='[SET]', source='cli')
        assert config.token_secret == 'secret'

    def test_unset_tokens_stay_unset(self):
        redacted = ConfigResolver.redact(ResolvedConfig(url='https://a'))

        assert redacted.token_id is None
        assert redacted.token_secret is None


class TestWriteTemplate:

    def test_writes_template(self, tmp_path):
        path = tmp_path / "bookstack-config.json"

        assert ConfigResolver.write_template(str(path)) is True
        assert json.loads(path.read_text()) == CONFIG_TEMPLATE

    def test_existing_file_untouched(self, tmp_path):
        path = tmp_path / "bookstack-config.json"
        path.write_text("keep")

        assert ConfigResolver.write_template(str(path)) is False
        assert path.read_text() == "keep"

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(ConfigFileError):
            ConfigResolver.write_template(str(blocker / "config.json"))
