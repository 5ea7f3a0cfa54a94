"""Error handling middleware for the gateway.

Maps every GatewayError subclass to a JSON envelope using its built-in
error_type and status_code attributes.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog import get_logger

from improvado_gateway.exceptions import ErrorType, GatewayError


logger = get_logger(__name__)


def _get_client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _build_error_response(
    status_code: int, error_type: str, message: str
) -> JSONResponse:
    """Build standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"type": error_type, "message": message}},
    )


def setup_error_handlers(app: FastAPI) -> None:
    """Setup error handlers for the FastAPI application."""

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(
        request: Request, exc: GatewayError
    ) -> JSONResponse:
        error_type = str(exc.error_type)
        log_kwargs = {
            "error_type": error_type,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "request_method": request.method,
            "request_url": str(request.url.path),
        }
        if exc.status_code in (401, 403):
            log_kwargs["client_ip"] = _get_client_ip(request)

        if exc.status_code >= 500:
            logger.error("gateway_error", **log_kwargs)
        else:
            logger.warning("gateway_error", **log_kwargs)

        return _build_error_response(exc.status_code, error_type, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info(
            "request_validation_failed",
            request_method=request.method,
            request_url=str(request.url.path),
            errors=len(exc.errors()),
        )
        return _build_error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            str(ErrorType.INVALID_REQUEST),
            "Request body is not valid",
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        log_kwargs = {
            "status_code": exc.status_code,
            "error_message": exc.detail,
            "request_method": request.method,
            "request_url": str(request.url.path),
        }
        if exc.status_code == 404:
            logger.debug("http_not_found", **log_kwargs)
        else:
            logger.warning("http_exception", **log_kwargs)

        return _build_error_response(exc.status_code, "http_error", str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            request_method=request.method,
            request_url=str(request.url.path),
            exc_info=True,
        )
        return _build_error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            str(ErrorType.INTERNAL_SERVER),
            "An internal server error occurred",
        )
