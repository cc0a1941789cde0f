"""Tests for notion_edit.config -- env-var and YAML config loading and validation."""

import pytest

from notion_edit.config import (
    DEFAULT_API_URL,
    Config,
    load_config,
    load_yaml_config,
    validate_config,
)

ENV_VARS = [
    "NOTION_API_KEY",
    "NOTION_API_URL",
    "NOTION_VERSION",
    "NOTION_MAX_PARALLEL_REQUESTS",
    "NOTION_REQUEST_TIMEOUT",
    "NOTION_DEBUG",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from NOTION_* variables set by the shell or a .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# -------------------------------------------------------------------------
# validate_config()
# -------------------------------------------------------------------------


class TestValidateConfig:
    """Tests for validate_config() -- URL format and credential checks."""

    def test_valid_config(self):
        validate_config(Config(api_key="secret"))  # should not raise

    def test_invalid_url_no_scheme(self):
        config = Config(api_key="secret", api_url="api.notion.com/v1")
        with pytest.raises(
            ValueError, match="must start with http:// or https://"
        ):
            validate_config(config)

    def test_empty_host_url(self):
        config = Config(api_key="secret", api_url="https://")
        with pytest.raises(ValueError, match="must include a hostname"):
            validate_config(config)

    def test_trailing_slash_stripped(self):
        config = Config(api_key="secret", api_url="https://api.notion.com/v1/")
        validate_config(config)
        assert config.api_url == "https://api.notion.com/v1"

    def test_empty_api_key(self):
        with pytest.raises(ValueError, match="API key cannot be empty"):
            validate_config(Config(api_key="   "))

    def test_empty_version(self):
        with pytest.raises(ValueError, match="version cannot be empty"):
            validate_config(Config(api_key="secret", notion_version=""))

    def test_non_positive_timeout(self):
        with pytest.raises(ValueError, match="must be positive"):
            validate_config(Config(api_key="secret", request_timeout=0))


# -------------------------------------------------------------------------
# load_config()
# -------------------------------------------------------------------------


class TestLoadConfig:
    """Tests for load_config() -- precedence, boolean and numeric parsing."""

    def test_load_from_env_vars(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "env-key")

        config = load_config()

        assert config.api_key == "env-key"
        assert config.api_url == DEFAULT_API_URL
        assert config.notion_version == "2022-06-28"
        assert config.max_parallel_requests == 5
        assert config.request_timeout == 60.0
        assert config.debug is False

    def test_cli_arg_overrides_env(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "env-key")

        config = load_config(api_key="cli-key")
        assert config.api_key == "cli-key"

    def test_env_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "env-key")
        monkeypatch.setenv("NOTION_VERSION", "2025-01-01")

        config = load_config(
            yaml_fallbacks={"api_key": "yaml-key", "notion_version": "2020-01-01"}
        )

        assert config.api_key == "env-key"
        assert config.notion_version == "2025-01-01"

    def test_yaml_fallbacks_used(self):
        config = load_config(
            yaml_fallbacks={
                "api_key": "yaml-key",
                "api_url": "https://proxy.example.com/v1/",
                "max_parallel_requests": 8,
                "request_timeout": 15,
                "debug": True,
            }
        )

        assert config.api_key == "yaml-key"
        assert config.api_url == "https://proxy.example.com/v1"
        assert config.max_parallel_requests == 8
        assert config.request_timeout == 15.0
        assert config.debug is True

    def test_missing_api_key_raises(self):
        with pytest.raises(ValueError, match="Notion API key not found"):
            load_config()

    def test_debug_flag_wins(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "key")
        monkeypatch.setenv("NOTION_DEBUG", "false")

        assert load_config(debug=True).debug is True

    @pytest.mark.parametrize("value", ["true", "1", "yes", "on", "TRUE"])
    def test_debug_truthy_values(self, monkeypatch, value):
        monkeypatch.setenv("NOTION_API_KEY", "key")
        monkeypatch.setenv("NOTION_DEBUG", value)

        assert load_config().debug is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "off", "random"])
    def test_debug_falsy_values(self, monkeypatch, value):
        monkeypatch.setenv("NOTION_API_KEY", "key")
        monkeypatch.setenv("NOTION_DEBUG", value)

        assert load_config().debug is False

    def test_max_parallel_from_env(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "key")
        monkeypatch.setenv("NOTION_MAX_PARALLEL_REQUESTS", "10")

        assert load_config().max_parallel_requests == 10

    def test_max_parallel_non_numeric(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "key")
        monkeypatch.setenv("NOTION_MAX_PARALLEL_REQUESTS", "abc")

        with pytest.raises(
            ValueError, match="Invalid NOTION_MAX_PARALLEL_REQUESTS 'abc'"
        ):
            load_config()

    @pytest.mark.parametrize("value", ["0", "-5", "500"])
    def test_max_parallel_out_of_range(self, monkeypatch, value):
        monkeypatch.setenv("NOTION_API_KEY", "key")
        monkeypatch.setenv("NOTION_MAX_PARALLEL_REQUESTS", value)

        with pytest.raises(
            ValueError, match="must be a number between 1 and 100"
        ):
            load_config()

    def test_timeout_non_numeric(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "key")
        monkeypatch.setenv("NOTION_REQUEST_TIMEOUT", "soon")

        with pytest.raises(ValueError, match="Invalid NOTION_REQUEST_TIMEOUT"):
            load_config()


# -------------------------------------------------------------------------
# load_yaml_config()
# -------------------------------------------------------------------------


class TestLoadYamlConfig:
    def test_reads_notion_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "notion:\n  api_key: yaml-key\n  max_parallel_requests: 3\n"
            "other:\n  ignored: true\n"
        )

        assert load_yaml_config(path) == {
            "api_key": "yaml-key",
            "max_parallel_requests": 3,
        }

    def test_missing_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("other: 1\n")

        assert load_yaml_config(path) == {}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_yaml_config(path) == {}

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must contain a YAML mapping"):
            load_yaml_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "absent.yaml")
