# tests/unit/cli/test_main.py
"""Tests for the improvado-gateway command line."""

import os
from unittest.mock import patch

import orjson
import pytest
from typer.testing import CliRunner

from improvado_gateway import __version__
from improvado_gateway.cli.main import app
from improvado_gateway.config.settings import CONFIG_OVERRIDES_ENV


runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    # serve writes both variables into os.environ; setenv first so they are
    # removed again on teardown
    for name in ("CONFIG_FILE", CONFIG_OVERRIDES_ENV):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "improvado_gateway.config.settings.find_toml_config_file", lambda: None
    )


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestToolsCommand:
    def test_lists_tools(self):
        result = runner.invoke(app, ["tools"])

        assert result.exit_code == 0
        assert "executeQuery" in result.output
        assert "notion_search" in result.output

    def test_shows_single_tool_schema(self):
        result = runner.invoke(app, ["tools", "executeQuery"])

        assert result.exit_code == 0
        assert '"query"' in result.output

    def test_unknown_tool_exits_nonzero(self):
        result = runner.invoke(app, ["tools", "nope"])

        assert result.exit_code == 1
        assert "Unknown tool: nope" in result.output


class TestServeCommand:
    def test_runs_uvicorn_with_overrides(self, monkeypatch: pytest.MonkeyPatch):
        with (
            patch("improvado_gateway.cli.main.uvicorn.run") as mock_run,
            patch("improvado_gateway.cli.main.setup_logging"),
        ):
            result = runner.invoke(app, ["serve", "--port", "9001", "--host", "0.0.0.0"])

        assert result.exit_code == 0, result.output
        mock_run.assert_called_once()
        kwargs = mock_run.call_args.kwargs
        assert mock_run.call_args.args == ("improvado_gateway.api.app:get_app",)
        assert kwargs["factory"] is True
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9001
        overrides = orjson.loads(os.environ[CONFIG_OVERRIDES_ENV])
        assert overrides["server"]["port"] == 9001

    def test_bad_config_file_exits(self, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("[server\n")

        with patch("improvado_gateway.cli.main.uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve", "--config", str(config)])

        assert result.exit_code == 1
        mock_run.assert_not_called()
