"""Configuration module for the Improvado gateway."""

from improvado_gateway.exceptions import ConfigValidationError

from .cors import CORSSettings
from .downstream import HTTPSettings, ImprovadoSettings, NotionSettings
from .server import ServerSettings
from .settings import Settings, get_settings


__all__ = [
    "Settings",
    "get_settings",
    "ServerSettings",
    "CORSSettings",
    "ImprovadoSettings",
    "NotionSettings",
    "HTTPSettings",
    "ConfigValidationError",
]
