"""Tool listing and invocation endpoints.

Session props are read from ``request.state.props``; whatever authenticated
the caller (the session middleware for the local engine, or a hosted engine)
is responsible for setting them.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from structlog import get_logger

from improvado_gateway.core.constants import PROPS_API_KEY
from improvado_gateway.exceptions import ToolNotFoundError
from improvado_gateway.tools.base import ToolInvocationResult
from improvado_gateway.tools.dispatcher import ToolDispatcher


logger = get_logger(__name__)

router = APIRouter(prefix="/tools", tags=["tools"])


def get_dispatcher(request: Request) -> ToolDispatcher:
    """Get the tool dispatcher from app state."""
    dispatcher: ToolDispatcher = request.app.state.dispatcher
    return dispatcher


@router.get("")
async def list_tools(
    dispatcher: ToolDispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    """Describe every registered tool with its argument schema."""
    return {"tools": [tool.describe() for tool in dispatcher.tools.values()]}


@router.post("/{name}")
async def invoke_tool(
    name: str,
    request: Request,
    arguments: dict[str, Any] = Body(default_factory=dict),
    dispatcher: ToolDispatcher = Depends(get_dispatcher),
) -> ToolInvocationResult:
    """Invoke tool ``name``.

    Tool failures come back as a 200 with the error in the text content;
    only an unknown tool name is an HTTP error.
    """
    if name not in dispatcher.tools:
        raise ToolNotFoundError(name)

    props: dict[str, Any] = getattr(request.state, "props", None) or {}
    logger.info("tool_invoked", tool=name, has_api_key=bool(props.get(PROPS_API_KEY)))
    return await dispatcher.invoke(name, arguments, props)
