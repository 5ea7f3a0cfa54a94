"""Settings configuration for the Improvado gateway."""

import os
import tomllib
from pathlib import Path
from typing import Any

import orjson
import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from improvado_gateway.config.discovery import find_toml_config_file
from improvado_gateway.exceptions import ConfigValidationError

from .cors import CORSSettings
from .downstream import HTTPSettings, ImprovadoSettings, NotionSettings
from .server import ServerSettings


__all__ = [
    "Settings",
    "get_settings",
]

CONFIG_OVERRIDES_ENV = "IMPROVADO_GATEWAY_CONFIG_OVERRIDES"

logger = structlog.get_logger(__name__)


def _coerce_settings(value: Any, settings_class: type) -> Any:
    """Coerce value to settings class instance.

    Handles: None → default, dict → instance, passthrough existing instances.
    """
    if value is None:
        return settings_class()
    if isinstance(value, settings_class):
        return value
    if isinstance(value, dict):
        return settings_class(**value)
    if hasattr(value, "model_dump"):
        return settings_class(**value.model_dump())
    return value


class Settings(BaseSettings):
    """
    Configuration settings for the Improvado gateway.

    Settings are loaded from environment variables, .env files, and TOML configuration files.
    Environment variables take precedence over .env file values.
    TOML configuration files are loaded in the following order:
    1. .improvado_gateway.toml in current directory
    2. improvado_gateway.toml in current directory
    3. config.toml in user config directory/improvado-gateway/ (platform-specific)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="Server configuration settings",
    )

    cors: CORSSettings = Field(
        default_factory=CORSSettings,
        description="CORS configuration settings",
    )

    improvado: ImprovadoSettings = Field(
        default_factory=ImprovadoSettings,
        description="Improvado verification and query endpoints",
    )

    notion: NotionSettings = Field(
        default_factory=NotionSettings,
        description="Notion API location and version",
    )

    http: HTTPSettings = Field(
        default_factory=HTTPSettings,
        description="Outbound HTTP client settings",
    )

    @field_validator("server", mode="before")
    @classmethod
    def validate_server(cls, v: Any) -> Any:
        return _coerce_settings(v, ServerSettings)

    @field_validator("cors", mode="before")
    @classmethod
    def validate_cors(cls, v: Any) -> Any:
        return _coerce_settings(v, CORSSettings)

    @field_validator("improvado", mode="before")
    @classmethod
    def validate_improvado(cls, v: Any) -> Any:
        return _coerce_settings(v, ImprovadoSettings)

    @field_validator("notion", mode="before")
    @classmethod
    def validate_notion(cls, v: Any) -> Any:
        return _coerce_settings(v, NotionSettings)

    @field_validator("http", mode="before")
    @classmethod
    def validate_http(cls, v: Any) -> Any:
        return _coerce_settings(v, HTTPSettings)

    @property
    def server_url(self) -> str:
        """Get the complete server URL."""
        return f"http://{self.server.host}:{self.server.port}"

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file.

        Raises:
            ValueError: If the TOML file is invalid or cannot be read
        """
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ValueError(f"Cannot read TOML config file {toml_path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_config(
        cls, config_path: Path | str | None = None, **kwargs: Any
    ) -> "Settings":
        """Create Settings instance from configuration file.

        Args:
            config_path: Path to configuration file. Can be:
                - None: Auto-discover config file or use CONFIG_FILE env var
                - Path or str: Use this specific config file
            **kwargs: Additional keyword arguments to override config values

        Returns:
            Settings: Configured Settings instance
        """
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            if config_path.suffix.lower() != ".toml":
                raise ValueError(
                    f"Unsupported config file format: {config_path.suffix}. "
                    "Only TOML (.toml) files are supported."
                )
            config_data = cls.load_toml_config(config_path)
            logger.debug("config_file_loaded", path=str(config_path))

        # kwargs take precedence over file values
        merged_config = {**config_data, **kwargs}
        return cls(**merged_config)


def get_settings(config_path: Path | str | None = None) -> Settings:
    """Get a settings instance with configuration file support.

    Overrides can be passed as a JSON object in IMPROVADO_GATEWAY_CONFIG_OVERRIDES
    (the CLI uses this to hand options to reloaded workers).

    Raises:
        ConfigValidationError: If the configuration cannot be loaded
    """
    try:
        overrides: dict[str, Any] = {}
        overrides_json = os.environ.get(CONFIG_OVERRIDES_ENV)
        if overrides_json:
            try:
                overrides = orjson.loads(overrides_json)
            except orjson.JSONDecodeError as e:
                raise ValueError(f"{CONFIG_OVERRIDES_ENV} is not valid JSON: {e}") from e
            if not isinstance(overrides, dict):
                raise ValueError(f"{CONFIG_OVERRIDES_ENV} must be a JSON object")

        return Settings.from_config(config_path=config_path, **overrides)
    except (OSError, ValueError) as e:
        raise ConfigValidationError(f"Configuration error: {e}") from e
