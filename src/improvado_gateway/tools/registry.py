"""Static registration table of every tool the gateway exposes."""

from improvado_gateway.exceptions import ToolNotFoundError
from improvado_gateway.tools.base import ToolDescriptor
from improvado_gateway.tools.notion import NOTION_TOOLS
from improvado_gateway.tools.query import QUERY_TOOLS


def _build_table(*groups: list[ToolDescriptor]) -> dict[str, ToolDescriptor]:
    table: dict[str, ToolDescriptor] = {}
    for group in groups:
        for tool in group:
            if tool.name in table:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            table[tool.name] = tool
    return table


TOOLS: dict[str, ToolDescriptor] = _build_table(QUERY_TOOLS, NOTION_TOOLS)


def get_tool(name: str) -> ToolDescriptor:
    """Look up a tool by name.

    Raises:
        ToolNotFoundError: If no tool with that name is registered
    """
    try:
        return TOOLS[name]
    except KeyError:
        raise ToolNotFoundError(name) from None


def list_tools() -> list[ToolDescriptor]:
    return list(TOOLS.values())
