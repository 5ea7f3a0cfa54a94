"""Tool descriptors and the uniform invocation result envelope."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

import httpx
import orjson
from pydantic import BaseModel, ConfigDict, Field

from improvado_gateway.config.settings import Settings


OutputFormat = Literal["json", "markdown"]


class Downstream(StrEnum):
    """Which backend a tool talks to, and therefore which credential it needs."""

    IMPROVADO = "improvado"
    NOTION = "notion"


class ToolArguments(BaseModel):
    """Base class for tool argument models."""

    model_config = ConfigDict(extra="forbid")


class FormattedArguments(ToolArguments):
    """Arguments of tools whose JSON result can be rendered as Markdown."""

    format: OutputFormat = Field(
        default="json",
        description="Output format: 'json' for raw API output, 'markdown' for readable text",
    )


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolInvocationResult(BaseModel):
    """Envelope returned for every tool call, successful or not."""

    content: list[TextContent]

    @classmethod
    def from_text(cls, text: str) -> "ToolInvocationResult":
        return cls(content=[TextContent(text=text)])

    @property
    def text(self) -> str:
        return "".join(item.text for item in self.content)


@dataclass(frozen=True)
class ToolContext:
    """Per-invocation resources handed to a tool handler.

    ``credential`` is the Improvado key for Improvado tools and the freshly
    exchanged provider token for everything else.
    """

    http: httpx.AsyncClient
    settings: Settings
    credential: str


def dump_json(data: Any) -> str:
    return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode()


ToolHandler = Callable[[ToolContext, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolDescriptor:
    """A registered operation: its contract and its downstream binding."""

    name: str
    description: str
    arguments: type[ToolArguments]
    downstream: Downstream
    handler: ToolHandler
    render_json: Callable[[Any], str] = dump_json

    def input_schema(self) -> dict[str, Any]:
        return self.arguments.model_json_schema()

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "downstream": self.downstream.value,
            "inputSchema": self.input_schema(),
        }
