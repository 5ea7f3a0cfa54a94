"""CORS configuration settings."""

from pydantic import BaseModel, Field, field_validator, model_validator


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class CORSSettings(BaseModel):
    """CORS-specific configuration settings.

    When origins contains "*" credentials are forced off.
    """

    origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="CORS allowed origins",
    )

    credentials: bool = Field(
        default=False,
        description="CORS allow credentials (disabled for wildcard origins)",
    )

    methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST"],
        description="CORS allowed methods",
    )

    headers: list[str] = Field(
        default_factory=lambda: ["*"],
        description="CORS allowed headers",
    )

    @field_validator("origins", "headers", mode="before")
    @classmethod
    def validate_csv_lists(cls, v: str | list[str]) -> list[str]:
        """Parse comma-separated strings into lists."""
        if isinstance(v, str):
            return _split_csv(v)
        return v

    @field_validator("methods", mode="before")
    @classmethod
    def validate_cors_methods(cls, v: str | list[str]) -> list[str]:
        """Parse CORS methods from string or list."""
        if isinstance(v, str):
            v = _split_csv(v)
        return [method.upper() for method in v]

    @model_validator(mode="after")
    def validate_wildcard_credentials(self) -> "CORSSettings":
        """Ensure credentials are disabled when using wildcard origins."""
        if "*" in self.origins and self.credentials:
            object.__setattr__(self, "credentials", False)
        return self
