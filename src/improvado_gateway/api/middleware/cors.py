"""CORS middleware setup for the gateway."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from structlog import get_logger

from improvado_gateway.config.settings import Settings


logger = get_logger(__name__)


def setup_cors_middleware(app: FastAPI, settings: Settings) -> None:
    """Add CORS middleware configured from ``settings.cors``."""
    cors = settings.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.credentials,
        allow_methods=cors.methods,
        allow_headers=cors.headers,
    )
    logger.debug(
        "cors_middleware_configured",
        origins=cors.origins,
        credentials=cors.credentials,
    )
