"""Structured logging setup built on structlog."""

import logging
import sys
from pathlib import Path

import structlog
from structlog.contextvars import merge_contextvars
from structlog.typing import Processor


def mask_secret(value: str | None, visible: int = 4) -> str | None:
    """Return a log-safe preview of a secret such as an API key."""
    if not value:
        return None
    if len(value) <= visible * 2:
        return "***"
    return f"{value[:visible]}...{value[-visible:]}"


def setup_logging(
    json_logs: bool = False,
    log_level_name: str = "INFO",
    log_file: str | None = None,
) -> None:
    """Configure stdlib logging and structlog for the gateway.

    Args:
        json_logs: Render JSON lines instead of colored console output
        log_level_name: Minimum level name, e.g. "INFO"
        log_file: Optional path that receives a copy of every log line
    """
    level = getattr(logging, log_level_name.upper(), logging.INFO)

    shared: list[Processor] = [
        merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if json_logs:
        processors = [
            *shared,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared,
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=level,
        force=True,
    )
    # uvicorn's own access log duplicates AccessLogMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
