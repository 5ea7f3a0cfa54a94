"""Downstream API configuration settings."""

from pydantic import BaseModel, Field, field_validator


def _strip_trailing_slash(value: str) -> str:
    return value.rstrip("/")


class ImprovadoSettings(BaseModel):
    """Improvado GPT API endpoints used for key verification and queries."""

    base_url: str = Field(
        default="https://improvado.fyi",
        description="Base URL of the Improvado verification host",
    )

    verify_path: str = Field(
        default="/api/gpt/verify",
        description="Path of the key verification and exchange endpoint",
    )

    query_path: str = Field(
        default="/api/gpt/query",
        description="Path of the SQL query endpoint",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        return _strip_trailing_slash(v)

    @property
    def verify_url(self) -> str:
        return f"{self.base_url}{self.verify_path}"

    @property
    def query_url(self) -> str:
        return f"{self.base_url}{self.query_path}"


class NotionSettings(BaseModel):
    """Notion REST API location and protocol version."""

    base_url: str = Field(
        default="https://api.notion.com/v1",
        description="Versioned base path of the Notion API",
    )

    api_version: str = Field(
        default="2022-06-28",
        description="Value sent in the Notion-Version header",
    )

    provider: str = Field(
        default="notion",
        description="Provider identifier sent to the verification endpoint",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        return _strip_trailing_slash(v)


class HTTPSettings(BaseModel):
    """Outbound HTTP client settings shared by all downstream calls."""

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds",
    )

    user_agent: str = Field(
        default="improvado-gateway",
        description="User-Agent header for outbound requests",
    )
