"""Session props middleware for the tool surface.

A hosted authorization engine validates bearer tokens itself and places the
session props on ``request.state.props`` before the tool routes run. With the
local engine this middleware does that job: it resolves the bearer grant to
the props bound at approval time.
"""

from typing import Any, Protocol

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from improvado_gateway.exceptions import InvalidTokenError


logger = structlog.get_logger(__name__)

TOOLS_PATH_PREFIX = "/tools/"


class SessionPropsResolver(Protocol):
    def session_props(self, grant: str) -> dict[str, Any] | None: ...


class SessionPropsMiddleware(BaseHTTPMiddleware):
    """Attach session props to tool invocation requests."""

    def __init__(self, app: ASGIApp, resolver: SessionPropsResolver):
        super().__init__(app)
        self.resolver = resolver

    def _extract_bearer_token(self, request: Request) -> str | None:
        auth_header = request.headers.get("Authorization")
        if not auth_header:
            return None

        parts = auth_header.split(maxsplit=1)
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None
        return parts[1].strip() or None

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method != "POST" or not request.url.path.startswith(
            TOOLS_PATH_PREFIX
        ):
            return await call_next(request)

        token = self._extract_bearer_token(request)
        if token is None:
            # No session at all; the dispatcher reports the missing key
            request.state.props = {}
            return await call_next(request)

        props = self.resolver.session_props(token)
        if props is None:
            logger.warning("session_grant_unknown", path=str(request.url.path))
            # Exceptions raised here would bypass the app's exception handlers
            error = InvalidTokenError("Invalid or expired session token")
            return JSONResponse(
                status_code=error.status_code,
                content={
                    "error": {"type": str(error.error_type), "message": error.message}
                },
                headers={"WWW-Authenticate": "Bearer"},
            )

        request.state.props = props
        return await call_next(request)
