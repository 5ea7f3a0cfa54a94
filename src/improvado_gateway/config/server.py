"""Server configuration settings."""

from pydantic import BaseModel, Field, field_validator


class ServerSettings(BaseModel):
    """Server-specific configuration settings."""

    host: str = Field(
        default="127.0.0.1",
        description="Server host address",
    )

    port: int = Field(
        default=8787,
        description="Server port number",
        ge=1,
        le=65535,
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    log_file: str | None = Field(
        default=None,
        description="Optional file to mirror log output into",
    )

    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON lines instead of console output",
    )

    reload: bool = Field(
        default=False,
        description="Enable auto-reload for development",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v
