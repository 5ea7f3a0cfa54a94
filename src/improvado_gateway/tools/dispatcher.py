"""Tool invocation with per-call credential exchange.

Every failure inside a tool call is turned into text at one boundary,
:meth:`ToolDispatcher.invoke`, so callers always receive a well-formed
:class:`ToolInvocationResult`.
"""

from collections.abc import Mapping
from typing import Any

import httpx
import pydantic
from structlog import get_logger

from improvado_gateway.auth.verifier import CredentialVerifier
from improvado_gateway.config.settings import Settings
from improvado_gateway.core.constants import MISSING_API_KEY_MESSAGE, PROPS_API_KEY
from improvado_gateway.exceptions import GatewayError
from improvado_gateway.tools.base import (
    Downstream,
    ToolContext,
    ToolDescriptor,
    ToolInvocationResult,
)
from improvado_gateway.tools.markdown import to_markdown
from improvado_gateway.tools.registry import TOOLS


logger = get_logger(__name__)


def _format_validation_error(error: pydantic.ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(loc) for loc in err["loc"]) or "arguments"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


class ToolDispatcher:
    """Resolves the session credential and runs exactly one downstream call."""

    def __init__(
        self,
        settings: Settings,
        verifier: CredentialVerifier,
        http_client: httpx.AsyncClient,
        tools: Mapping[str, ToolDescriptor] | None = None,
    ) -> None:
        self.settings = settings
        self.verifier = verifier
        self.http = http_client
        self.tools = tools if tools is not None else TOOLS

    async def invoke(
        self,
        name: str,
        arguments: Mapping[str, Any] | None,
        props: Mapping[str, Any] | None,
    ) -> ToolInvocationResult:
        """Run tool ``name`` for the session described by ``props``."""
        log = logger.bind(tool=name)
        try:
            text = await self._run(name, dict(arguments or {}), props or {})
        except pydantic.ValidationError as e:
            log.info("tool_arguments_invalid", errors=e.error_count())
            text = f"❌ Invalid arguments for {name}: {_format_validation_error(e)}"
        except GatewayError as e:
            log.warning(
                "tool_call_failed",
                error_type=type(e).__name__,
                error=e.message,
                upstream_status=e.details.get("upstream_status"),
            )
            text = f"❌ Error executing {name}: {e.message}"
        except httpx.HTTPError as e:
            log.warning(
                "tool_call_transport_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            text = f"❌ Error executing {name}: request failed: {e}"
        except Exception as e:
            log.exception(
                "tool_call_unexpected_error",
                error_type=type(e).__name__,
                error=str(e),
            )
            text = f"❌ Error executing {name}: {e}"
        return ToolInvocationResult.from_text(text)

    def _provider_for(self, downstream: Downstream) -> str:
        """Provider name sent to the exchange endpoint for ``downstream``."""
        if downstream is Downstream.NOTION:
            return self.settings.notion.provider
        return downstream.value

    async def _run(
        self, name: str, arguments: dict[str, Any], props: Mapping[str, Any]
    ) -> str:
        api_key = props.get(PROPS_API_KEY)
        if not api_key:
            logger.info("tool_call_without_api_key", tool=name)
            return MISSING_API_KEY_MESSAGE

        tool = self.tools.get(name)
        if tool is None:
            return f"❌ Unknown tool: {name}"

        args = tool.arguments.model_validate(arguments)

        credential = api_key
        if tool.downstream is not Downstream.IMPROVADO:
            # Fresh exchange on every call; tokens are never cached
            credential = await self.verifier.exchange(
                api_key, self._provider_for(tool.downstream)
            )

        ctx = ToolContext(http=self.http, settings=self.settings, credential=credential)
        result = await tool.handler(ctx, args)
        logger.debug("tool_call_completed", tool=name)

        if getattr(args, "format", "json") == "markdown":
            return to_markdown(result)
        return tool.render_json(result)
