# tests/unit/config/test_settings.py
"""Tests for gateway configuration loading."""

import pytest

from improvado_gateway.config.cors import CORSSettings
from improvado_gateway.config.downstream import ImprovadoSettings
from improvado_gateway.config.server import ServerSettings
from improvado_gateway.config.settings import CONFIG_OVERRIDES_ENV, Settings, get_settings
from improvado_gateway.exceptions import ConfigValidationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep discovery and overrides away from the developer's machine."""
    monkeypatch.delenv("CONFIG_FILE", raising=False)
    monkeypatch.delenv(CONFIG_OVERRIDES_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "improvado_gateway.config.settings.find_toml_config_file", lambda: None
    )


class TestDefaults:
    def test_downstream_defaults(self) -> None:
        settings = Settings()

        assert settings.improvado.verify_url == "https://improvado.fyi/api/gpt/verify"
        assert settings.improvado.query_url == "https://improvado.fyi/api/gpt/query"
        assert settings.notion.base_url == "https://api.notion.com/v1"
        assert settings.notion.api_version == "2022-06-28"

    def test_server_url(self) -> None:
        settings = Settings()

        assert settings.server_url == "http://127.0.0.1:8787"

    def test_base_url_trailing_slash_is_stripped(self) -> None:
        config = ImprovadoSettings(base_url="https://staging.improvado.fyi/")

        assert config.verify_url == "https://staging.improvado.fyi/api/gpt/verify"


class TestEnvironment:
    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVER__PORT", "9000")
        monkeypatch.setenv("IMPROVADO__BASE_URL", "http://localhost:3000")

        settings = Settings()

        assert settings.server.port == 9000
        assert settings.improvado.verify_url == "http://localhost:3000/api/gpt/verify"

    def test_json_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_OVERRIDES_ENV, '{"server": {"port": 9100}}')

        assert get_settings().server.port == 9100


    def test_malformed_json_overrides_are_config_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(CONFIG_OVERRIDES_ENV, "{not json")

        with pytest.raises(ConfigValidationError, match="not valid JSON"):
            get_settings()

    def test_non_object_overrides_are_config_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(CONFIG_OVERRIDES_ENV, "[1, 2]")

        with pytest.raises(ConfigValidationError, match="must be a JSON object"):
            get_settings()


class TestTomlConfig:
    def test_loads_toml_file(self, tmp_path) -> None:
        config = tmp_path / "gateway.toml"
        config.write_text(
            '[server]\nport = 8800\nlog_level = "debug"\n\n'
            '[notion]\napi_version = "2025-01-01"\n'
        )

        settings = Settings.from_config(config)

        assert settings.server.port == 8800
        assert settings.server.log_level == "DEBUG"
        assert settings.notion.api_version == "2025-01-01"

    def test_config_file_env_var(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "from-env.toml"
        config.write_text('[http]\ntimeout = 5.0\n')
        monkeypatch.setenv("CONFIG_FILE", str(config))

        assert get_settings().http.timeout == 5.0

    def test_invalid_toml_is_config_error(self, tmp_path) -> None:
        config = tmp_path / "broken.toml"
        config.write_text("[server\nport = ")

        with pytest.raises(ConfigValidationError, match="Invalid TOML"):
            get_settings(config)

    def test_non_toml_file_refused(self, tmp_path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text("server: {}")

        with pytest.raises(ConfigValidationError, match="Only TOML"):
            get_settings(config)


class TestSections:
    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            ServerSettings(log_level="LOUD")

    def test_cors_csv_parsing(self) -> None:
        cors = CORSSettings(
            origins="https://a.example, https://b.example",
            methods="get,post",
            credentials=True,
        )

        assert cors.origins == ["https://a.example", "https://b.example"]
        assert cors.methods == ["GET", "POST"]
        assert cors.credentials is True

    def test_wildcard_origin_disables_credentials(self) -> None:
        cors = CORSSettings(origins=["*"], credentials=True)

        assert cors.credentials is False
