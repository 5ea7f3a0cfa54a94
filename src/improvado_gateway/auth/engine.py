"""Contract of the external authorization engine.

The engine owns the OAuth request lifecycle: it parses and persists pending
authorization requests and issues the final redirect-bearing grant. The
gateway only calls the two operations below and never signs or stores tokens
itself.
"""

from typing import Any, Protocol, runtime_checkable

from fastapi import Request
from pydantic import BaseModel, Field


class AuthRequest(BaseModel):
    """A pending authorization request as issued by the engine."""

    response_type: str = Field(default="code")
    client_id: str
    redirect_uri: str
    scope: list[str] = Field(default_factory=list)
    state: str | None = None
    code_challenge: str | None = None
    code_challenge_method: str | None = None


class CompletionResult(BaseModel):
    """Outcome of completing an authorization."""

    redirect_to: str


@runtime_checkable
class AuthorizationEngine(Protocol):
    """The two engine operations the consent flow depends on."""

    async def parse_auth_request(self, request: Request) -> AuthRequest:
        """Parse the inbound /authorize request into a pending request."""
        ...

    async def complete_authorization(
        self,
        *,
        request: AuthRequest,
        user_id: str,
        metadata: dict[str, Any],
        scope: list[str],
        props: dict[str, Any],
    ) -> CompletionResult:
        """Finalize an approved request and bind ``props`` to the session."""
        ...
