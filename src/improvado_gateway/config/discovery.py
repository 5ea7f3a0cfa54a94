"""Configuration file discovery."""

from pathlib import Path

import platformdirs


APP_DIR_NAME = "improvado-gateway"


def get_config_dir() -> Path:
    """Get the per-user configuration directory for the gateway."""
    return Path(platformdirs.user_config_dir()) / APP_DIR_NAME


def find_toml_config_file() -> Path | None:
    """Find the TOML configuration file for the gateway.

    Searches in the following order:
    1. .improvado_gateway.toml in current directory
    2. improvado_gateway.toml in current directory
    3. config.toml in user config directory/improvado-gateway/
    """
    candidates = [
        Path(".improvado_gateway.toml").resolve(),
        Path("improvado_gateway.toml").resolve(),
        get_config_dir() / "config.toml",
    ]

    for candidate in candidates:
        if candidate.exists() and candidate.is_file():
            return candidate

    return None
