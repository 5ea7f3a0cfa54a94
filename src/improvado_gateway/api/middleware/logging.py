"""Access logging middleware for structured HTTP request/response logging."""

import asyncio
import time

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


logger = structlog.get_logger(__name__)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Middleware for structured access logging with request/response details."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = str(request.url.path)

        response: Response | None = None
        error_message: str | None = None

        try:
            response = await call_next(request)
        except (Exception, asyncio.CancelledError) as e:
            error_message = str(e)
            raise
        finally:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            if response is not None:
                logger.info(
                    "request_complete",
                    method=method,
                    path=path,
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                    client_ip=client_ip,
                )
            else:
                logger.error(
                    "request_error",
                    method=method,
                    path=path,
                    duration_ms=duration_ms,
                    client_ip=client_ip,
                    error_message=error_message or "No response generated",
                )

        return response
