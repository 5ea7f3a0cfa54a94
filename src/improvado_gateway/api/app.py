"""FastAPI application factory for the Improvado gateway."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from structlog import get_logger

from improvado_gateway import __version__
from improvado_gateway.api.middleware.cors import setup_cors_middleware
from improvado_gateway.api.middleware.errors import setup_error_handlers
from improvado_gateway.api.middleware.logging import AccessLogMiddleware
from improvado_gateway.api.middleware.request_id import RequestIDMiddleware
from improvado_gateway.api.middleware.session_props import SessionPropsMiddleware
from improvado_gateway.api.routes.health import router as health_router
from improvado_gateway.api.routes.root import router as root_router
from improvado_gateway.api.routes.tools import router as tools_router
from improvado_gateway.auth.engine import AuthorizationEngine
from improvado_gateway.auth.local_engine import LocalAuthorizationEngine
from improvado_gateway.auth.routes import router as oauth_router
from improvado_gateway.auth.verifier import CredentialVerifier
from improvado_gateway.config.settings import Settings, get_settings
from improvado_gateway.core.logging import setup_logging
from improvado_gateway.tools.dispatcher import ToolDispatcher


logger = get_logger(__name__)


def _build_http_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.http.timeout,
        headers={"User-Agent": settings.http.user_agent},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and close the shared HTTP client on shutdown."""
    settings: Settings = app.state.settings
    logger.info(
        "server_start",
        host=settings.server.host,
        port=settings.server.port,
        url=settings.server_url,
        improvado_url=settings.improvado.base_url,
        tools=len(app.state.dispatcher.tools),
    )

    yield

    logger.debug("server_stop")
    if app.state.owns_http_client:
        await app.state.http_client.aclose()


def create_app(
    settings: Settings | None = None,
    engine: AuthorizationEngine | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override. If None, uses get_settings().
        engine: Authorization engine. Defaults to the in-memory local engine.
        http_client: Shared client for every outbound call. When given, the
            caller owns it and it is not closed on shutdown.

    Returns:
        Configured FastAPI application instance.

    """
    if settings is None:
        settings = get_settings()

    # Needed for reload mode where the app is re-imported
    if not structlog.is_configured():
        setup_logging(
            json_logs=settings.server.json_logs,
            log_level_name=settings.server.log_level,
            log_file=settings.server.log_file,
        )

    app = FastAPI(
        title="Improvado MCP Gateway",
        description="Consent flow and tool passthrough for Improvado and Notion",
        version=__version__,
        lifespan=lifespan,
    )

    owns_http_client = http_client is None
    if http_client is None:
        http_client = _build_http_client(settings)
    if engine is None:
        engine = LocalAuthorizationEngine()

    verifier = CredentialVerifier(
        config=settings.improvado,
        http_config=settings.http,
        http_client=http_client,
    )

    app.state.settings = settings
    app.state.http_client = http_client
    app.state.owns_http_client = owns_http_client
    app.state.auth_engine = engine
    app.state.verifier = verifier
    app.state.dispatcher = ToolDispatcher(
        settings=settings, verifier=verifier, http_client=http_client
    )

    setup_cors_middleware(app, settings)
    setup_error_handlers(app)

    # Middleware runs in reverse order of registration
    if isinstance(engine, LocalAuthorizationEngine):
        app.add_middleware(SessionPropsMiddleware, resolver=engine)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(root_router, tags=["root"])
    app.include_router(health_router, tags=["health"])
    app.include_router(oauth_router)
    app.include_router(tools_router)

    return app


def get_app() -> FastAPI:
    """Get the FastAPI application instance.

    Returns:
        FastAPI application instance.

    """
    return create_app()
