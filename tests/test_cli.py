"""Tests for the main.py command line entry point."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from main import main


@pytest.fixture()
def clean_env(monkeypatch, tmp_path):
    """No credentials in the environment and no .env to pick them up from."""
    monkeypatch.chdir(tmp_path)
    for var in ("GOOGLE_MAPS_API_KEY", "GITHUB_PERSONAL_ACCESS_TOKEN", "NOTION_API_KEY", "ADAPTER_DEBUG"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture()
def mock_create_server():
    with patch("main.create_server") as mock_fn:
        yield mock_fn


class TestMain:
    def test_missing_credential_exits_non_zero(self, clean_env, mock_create_server):
        result = CliRunner().invoke(main, ["github"])

        assert result.exit_code == 1
        assert "GITHUB_PERSONAL_ACCESS_TOKEN must be set" in result.output
        mock_create_server.assert_not_called()

    def test_unknown_server_rejected(self, clean_env, mock_create_server):
        result = CliRunner().invoke(main, ["slack"])
        assert result.exit_code != 0
        mock_create_server.assert_not_called()

    def test_weather_runs_on_stdio(self, clean_env, mock_create_server):
        result = CliRunner().invoke(main, ["weather"])

        assert result.exit_code == 0
        config = mock_create_server.call_args.args[0]
        assert config.server == "weather"
        mock_create_server.return_value.run.assert_called_once_with(transport="stdio")

    def test_http_transport_and_debug(self, clean_env, monkeypatch, mock_create_server):
        monkeypatch.setenv("NOTION_API_KEY", "secret")

        result = CliRunner().invoke(main, ["notion", "--transport", "http", "--port", "9000", "--debug"])

        assert result.exit_code == 0
        config = mock_create_server.call_args.args[0]
        assert config.credential == "secret"
        assert config.debug is True
        mock_create_server.return_value.run.assert_called_once_with(transport="http", port=9000)
