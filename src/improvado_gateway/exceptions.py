"""Exception hierarchy for the Improvado gateway.

All exceptions use proper exception chaining with the `from` keyword.
Error types use StrEnum for type safety and autocompletion.
"""

from enum import StrEnum
from typing import Any

from starlette import status


class ErrorType(StrEnum):
    """Error type codes for API responses."""

    INVALID_REQUEST = "invalid_request_error"
    AUTHENTICATION = "authentication_error"
    NOT_FOUND = "not_found_error"
    UPSTREAM = "upstream_error"
    INTERNAL_SERVER = "internal_server_error"


# ============================================================================
# Base Exceptions
# ============================================================================


class GatewayError(Exception):
    """Base exception for all gateway errors.

    Supports HTTP status codes and structured error details.
    """

    def __init__(
        self,
        message: str,
        *,
        error_type: ErrorType | str = ErrorType.INTERNAL_SERVER,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if isinstance(error_type, str) and not isinstance(error_type, ErrorType):
            try:
                self.error_type = ErrorType(error_type)
            except ValueError:
                self.error_type = error_type  # type: ignore[assignment]
        else:
            self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}


# ============================================================================
# API Errors (Client-facing)
# ============================================================================


class InvalidRequestError(GatewayError):
    """Malformed request (400)."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            error_type=ErrorType.INVALID_REQUEST,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class AuthenticationError(GatewayError):
    """Authentication error (401)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(
            message,
            error_type=ErrorType.AUTHENTICATION,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class InvalidTokenError(AuthenticationError):
    """Invalid, expired or unknown bearer token."""

    pass


class ToolNotFoundError(GatewayError):
    """Requested tool is not registered (404)."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Unknown tool: {name}",
            error_type=ErrorType.NOT_FOUND,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"tool": name},
        )
        self.name = name


# ============================================================================
# Credential Errors
# ============================================================================


class VerificationError(GatewayError):
    """Raised when an Improvado API key cannot be exchanged for a downstream token.

    Carries the verification endpoint's HTTP status when one was received.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(
            message,
            error_type=ErrorType.AUTHENTICATION,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"upstream_status": status_code} if status_code else None,
        )
        self.upstream_status = status_code


# ============================================================================
# Downstream Errors
# ============================================================================


class DownstreamError(GatewayError):
    """A downstream API answered with a failure or an unreadable body."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(
            message,
            error_type=ErrorType.UPSTREAM,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"upstream_status": status_code} if status_code else None,
        )
        self.upstream_status = status_code


class ResponseParseError(DownstreamError):
    """A successful downstream response did not contain valid JSON."""

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigValidationError(GatewayError):
    """Configuration validation failed."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            error_type=ErrorType.INTERNAL_SERVER,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


__all__ = [
    "ErrorType",
    "GatewayError",
    "InvalidRequestError",
    "AuthenticationError",
    "InvalidTokenError",
    "ToolNotFoundError",
    "VerificationError",
    "DownstreamError",
    "ResponseParseError",
    "ConfigValidationError",
]
