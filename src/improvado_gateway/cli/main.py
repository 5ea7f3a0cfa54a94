"""Typer entry point: ``improvado-gateway serve`` and ``improvado-gateway tools``."""

import os
from pathlib import Path
from typing import Any

import orjson
import typer
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from improvado_gateway import __version__
from improvado_gateway.config.settings import CONFIG_OVERRIDES_ENV, get_settings
from improvado_gateway.core.logging import setup_logging
from improvado_gateway.exceptions import ConfigValidationError, ToolNotFoundError
from improvado_gateway.tools.base import dump_json
from improvado_gateway.tools.registry import get_tool, list_tools


console = Console()

app = typer.Typer(
    name="improvado-gateway",
    help="Improvado MCP gateway: consent flow and tool passthrough.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"improvado-gateway {__version__}")
        raise typer.Exit()


@app.callback()
def app_main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Improvado MCP gateway."""


def _server_overrides(
    host: str | None,
    port: int | None,
    log_level: str | None,
    reload: bool | None,
    json_logs: bool | None,
) -> dict[str, Any]:
    server: dict[str, Any] = {}
    if host is not None:
        server["host"] = host
    if port is not None:
        server["port"] = port
    if log_level is not None:
        server["log_level"] = log_level
    if reload is not None:
        server["reload"] = reload
    if json_logs is not None:
        server["json_logs"] = json_logs
    return server


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on"),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
    reload: bool | None = typer.Option(
        None, "--reload/--no-reload", help="Enable auto-reload for development"
    ),
    json_logs: bool | None = typer.Option(
        None, "--json-logs/--console-logs", help="Render logs as JSON lines"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to a TOML configuration file"
    ),
) -> None:
    """Run the gateway HTTP server."""
    if config is not None:
        os.environ["CONFIG_FILE"] = str(config)

    server_overrides = _server_overrides(host, port, log_level, reload, json_logs)
    try:
        base = get_settings()
        if server_overrides:
            merged_server = {**base.server.model_dump(), **server_overrides}
            # Reloaded workers re-read settings from the environment
            os.environ[CONFIG_OVERRIDES_ENV] = orjson.dumps(
                {"server": merged_server}
            ).decode()
        settings = get_settings()
    except ConfigValidationError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1) from e

    setup_logging(
        json_logs=settings.server.json_logs,
        log_level_name=settings.server.log_level,
        log_file=settings.server.log_file,
    )

    uvicorn.run(
        "improvado_gateway.api.app:get_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_config=None,
    )


@app.command("tools")
def tools_command(
    name: str | None = typer.Argument(
        None, help="Show the argument schema of a single tool"
    ),
) -> None:
    """List the tools the gateway exposes."""
    if name is not None:
        try:
            tool = get_tool(name)
        except ToolNotFoundError as e:
            console.print(f"[red]{escape(e.message)}[/red]")
            raise typer.Exit(1) from e
        console.print(f"[bold]{tool.name}[/bold] ({tool.downstream})")
        console.print(tool.description)
        console.print(dump_json(tool.input_schema()), markup=False, highlight=False)
        return

    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Backend", style="green")
    table.add_column("Description")

    for tool in list_tools():
        table.add_row(tool.name, str(tool.downstream), tool.description)

    console.print(table)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
