"""Tool registry and dispatcher for the Improvado and Notion passthroughs."""

from .base import (
    Downstream,
    ToolArguments,
    ToolContext,
    ToolDescriptor,
    ToolInvocationResult,
)
from .dispatcher import ToolDispatcher
from .registry import TOOLS, get_tool, list_tools


__all__ = [
    "Downstream",
    "TOOLS",
    "ToolArguments",
    "ToolContext",
    "ToolDescriptor",
    "ToolDispatcher",
    "ToolInvocationResult",
    "get_tool",
    "list_tools",
]
