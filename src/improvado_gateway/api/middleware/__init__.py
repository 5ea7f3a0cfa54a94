"""Middleware for the gateway API."""

from .cors import setup_cors_middleware
from .errors import setup_error_handlers
from .logging import AccessLogMiddleware
from .request_id import RequestIDMiddleware
from .session_props import SessionPropsMiddleware


__all__ = [
    "AccessLogMiddleware",
    "RequestIDMiddleware",
    "SessionPropsMiddleware",
    "setup_cors_middleware",
    "setup_error_handlers",
]
