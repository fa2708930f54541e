"""Tests for startup configuration loading."""

import pytest

from adapter_core.config import DEFAULT_USER_AGENT, load_config
from adapter_core.errors import ConfigError
from adapter_core.upstream import DEFAULT_TIMEOUT


class TestLoadConfig:
    def test_weather_needs_no_credential(self):
        config = load_config("weather", {})
        assert config.credential is None
        assert config.user_agent == DEFAULT_USER_AGENT
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.debug is False

    @pytest.mark.parametrize(
        "server,var",
        [
            ("maps", "GOOGLE_MAPS_API_KEY"),
            ("github", "GITHUB_PERSONAL_ACCESS_TOKEN"),
            ("notion", "NOTION_API_KEY"),
        ],
    )
    def test_missing_credential_is_fatal(self, server, var):
        with pytest.raises(ConfigError, match=var):
            load_config(server, {})

    def test_blank_credential_counts_as_missing(self):
        with pytest.raises(ConfigError):
            load_config("github", {"GITHUB_PERSONAL_ACCESS_TOKEN": "   "})

    def test_credential_is_read(self):
        config = load_config("notion", {"NOTION_API_KEY": "secret_abc"})
        assert config.server == "notion"
        assert config.credential == "secret_abc"

    def test_unknown_server(self):
        with pytest.raises(ConfigError, match="Unknown server 'slack'"):
            load_config("slack", {})

    def test_optional_settings(self):
        config = load_config(
            "weather",
            {"ADAPTER_DEBUG": "true", "ADAPTER_HTTP_TIMEOUT": "5.5", "NWS_USER_AGENT": "me (me@example.com)"},
        )
        assert config.debug is True
        assert config.timeout == 5.5
        assert config.user_agent == "me (me@example.com)"

    @pytest.mark.parametrize(
        "env",
        [
            {"ADAPTER_DEBUG": "maybe"},
            {"ADAPTER_HTTP_TIMEOUT": "soon"},
            {"ADAPTER_HTTP_TIMEOUT": "0"},
        ],
    )
    def test_malformed_optional_settings(self, env):
        with pytest.raises(ConfigError):
            load_config("weather", env)

    def test_reads_process_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "from-env")
        assert load_config("maps").credential == "from-env"
