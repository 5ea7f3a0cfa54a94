"""In-process authorization engine for local development and tests.

Stands in for the hosted OAuth provider. It validates the bare minimum of an
authorization request, and on completion mints a random grant that is kept in
memory together with the session props. The grant doubles as the bearer
credential for the tool surface; nothing is signed and nothing survives a
restart.
"""

import secrets
from typing import Any
from urllib.parse import urlencode, urlsplit

from cachetools import TTLCache
from fastapi import Request
from structlog import get_logger

from improvado_gateway.auth.engine import AuthRequest, CompletionResult
from improvado_gateway.exceptions import InvalidRequestError


logger = get_logger(__name__)

GRANT_TTL_SECONDS = 3600
GRANT_CACHE_MAXSIZE = 1024
REDIRECT_SCHEMES = frozenset({"http", "https"})


def _check_redirect_uri(redirect_uri: str | None) -> str:
    """Return ``redirect_uri`` if it is an absolute http(s) URL.

    Raises:
        InvalidRequestError: For a missing, relative or non-http(s) URI
    """
    parts = urlsplit(redirect_uri or "")
    if parts.scheme.lower() not in REDIRECT_SCHEMES or not parts.netloc:
        raise InvalidRequestError("Missing or invalid redirect_uri parameter")
    return redirect_uri or ""


class LocalAuthorizationEngine:
    """Memory-backed implementation of :class:`AuthorizationEngine`."""

    def __init__(
        self,
        ttl_seconds: int = GRANT_TTL_SECONDS,
        maxsize: int = GRANT_CACHE_MAXSIZE,
    ) -> None:
        self._grants: TTLCache[str, dict[str, Any]] = TTLCache(  # type: ignore[no-any-unimported]
            maxsize=maxsize, ttl=ttl_seconds
        )

    async def parse_auth_request(self, request: Request) -> AuthRequest:
        params = request.query_params
        client_id = params.get("client_id")
        redirect_uri = params.get("redirect_uri")

        if not client_id:
            raise InvalidRequestError("Missing client_id parameter")
        redirect_uri = _check_redirect_uri(redirect_uri)

        return AuthRequest(
            response_type=params.get("response_type", "code"),
            client_id=client_id,
            redirect_uri=redirect_uri,
            scope=params.get("scope", "").split(),
            state=params.get("state"),
            code_challenge=params.get("code_challenge"),
            code_challenge_method=params.get("code_challenge_method"),
        )

    async def complete_authorization(
        self,
        *,
        request: AuthRequest,
        user_id: str,
        metadata: dict[str, Any],
        scope: list[str],
        props: dict[str, Any],
    ) -> CompletionResult:
        # The pending request comes back through the browser, so check it again
        _check_redirect_uri(request.redirect_uri)

        grant = secrets.token_urlsafe(32)
        self._grants[grant] = {
            "client_id": request.client_id,
            "user_id": user_id,
            "metadata": dict(metadata),
            "scope": list(scope),
            "props": dict(props),
        }

        query: dict[str, str] = {"code": grant}
        if request.state:
            query["state"] = request.state
        separator = "&" if urlsplit(request.redirect_uri).query else "?"
        redirect_to = f"{request.redirect_uri}{separator}{urlencode(query)}"

        logger.info(
            "authorization_completed",
            client_id=request.client_id,
            user_id=user_id,
            scope=scope,
        )
        return CompletionResult(redirect_to=redirect_to)

    def session_props(self, grant: str) -> dict[str, Any] | None:
        """Return the props bound to ``grant``, or None when unknown or expired."""
        entry = self._grants.get(grant)
        if entry is None:
            return None
        return dict(entry["props"])
