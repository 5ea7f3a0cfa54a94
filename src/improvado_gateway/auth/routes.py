"""Consent flow routes: /authorize and /approve."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from starlette import status
from structlog import get_logger

from improvado_gateway.auth import consent
from improvado_gateway.auth.approval import ApprovalProcessor, ApprovalState
from improvado_gateway.auth.engine import AuthorizationEngine
from improvado_gateway.auth.verifier import CredentialVerifier
from improvado_gateway.core.constants import (
    INVALID_REQUEST_BODY,
    OAUTH_SCOPES,
    PAGE_TITLE_AUTHORIZE,
    PAGE_TITLE_STATUS,
)
from improvado_gateway.ui.pages import (
    layout,
    render_authorization_approved,
    render_authorization_rejected,
    render_authorize_screen,
)


logger = get_logger(__name__)

router = APIRouter(tags=["oauth"])


def get_engine(request: Request) -> AuthorizationEngine:
    """Get the authorization engine from app state."""
    engine: AuthorizationEngine = request.app.state.auth_engine
    return engine


def get_verifier(request: Request) -> CredentialVerifier:
    """Get the credential verifier from app state."""
    verifier: CredentialVerifier = request.app.state.verifier
    return verifier


def get_approval_processor(
    engine: AuthorizationEngine = Depends(get_engine),
    verifier: CredentialVerifier = Depends(get_verifier),
) -> ApprovalProcessor:
    return ApprovalProcessor(engine=engine, verifier=verifier)


@router.get("/authorize", response_class=HTMLResponse)
async def authorize(
    request: Request,
    engine: AuthorizationEngine = Depends(get_engine),
) -> HTMLResponse:
    """Show the consent screen for a pending authorization request."""
    auth_request = await engine.parse_auth_request(request)
    logger.info(
        "authorization_requested",
        client_id=auth_request.client_id,
        scope=auth_request.scope,
    )
    content = render_authorize_screen(OAUTH_SCOPES, consent.encode_request(auth_request))
    return HTMLResponse(layout(content, PAGE_TITLE_AUTHORIZE))


@router.post("/approve", response_class=HTMLResponse)
async def approve(
    request: Request,
    processor: ApprovalProcessor = Depends(get_approval_processor),
) -> HTMLResponse:
    """Handle the consent form submission."""
    form = await request.form()
    decision = consent.parse(form)
    outcome = await processor.process(decision)

    if outcome.state is ApprovalState.INVALID_REQUEST:
        return HTMLResponse(
            INVALID_REQUEST_BODY, status_code=status.HTTP_401_UNAUTHORIZED
        )

    if outcome.state is ApprovalState.REJECTED:
        content = render_authorization_rejected(outcome.return_to)
        return HTMLResponse(layout(content, PAGE_TITLE_STATUS))

    if outcome.state is ApprovalState.REPROPOSED:
        # Echo the submitted token itself, not a re-encoding of it
        content = render_authorize_screen(
            OAUTH_SCOPES,
            outcome.pending_token or "",
            error_message=outcome.error_message,
            retryable=outcome.retryable,
        )
        return HTMLResponse(layout(content, PAGE_TITLE_AUTHORIZE))

    content = render_authorization_approved(outcome.redirect_to or "/")
    return HTMLResponse(layout(content, PAGE_TITLE_STATUS))
