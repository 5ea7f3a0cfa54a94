"""Improvado GPT query tool."""

from typing import Any

from pydantic import Field

from improvado_gateway.tools.base import (
    Downstream,
    ToolArguments,
    ToolContext,
    ToolDescriptor,
    dump_json,
)
from improvado_gateway.tools.http import read_json


class ExecuteQueryArguments(ToolArguments):
    query: str = Field(description="SQL query to execute")
    params: list[Any] = Field(
        default_factory=list,
        description="Parameters to substitute in the query (optional)",
    )


async def execute_query(ctx: ToolContext, args: ExecuteQueryArguments) -> Any:
    response = await ctx.http.post(
        ctx.settings.improvado.query_url,
        headers={
            "Authorization": f"Bearer {ctx.credential}",
            "Content-Type": "application/json",
            "User-Agent": ctx.settings.http.user_agent,
        },
        json={"query": args.query, "params": args.params},
        timeout=ctx.settings.http.timeout,
    )
    return read_json(response)


def render_query_result(result: Any) -> str:
    data = result.get("data") if isinstance(result, dict) else result
    return f"Query result:\n{dump_json(data)}"


QUERY_TOOLS: list[ToolDescriptor] = [
    ToolDescriptor(
        name="executeQuery",
        description="Execute SQL query on Improvado data via GPT interface",
        arguments=ExecuteQueryArguments,
        downstream=Downstream.IMPROVADO,
        handler=execute_query,
        render_json=render_query_result,
    ),
]
