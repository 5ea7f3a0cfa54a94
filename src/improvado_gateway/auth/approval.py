"""Approval state machine for the consent flow.

A submission moves from awaiting-decision to exactly one outcome:

* ``INVALID_REQUEST`` - no recoverable pending request, or one the engine
  refuses to complete; no grant is issued
* ``REJECTED`` - the user declined; no network call is made
* ``REPROPOSED`` - the key could not be accepted; the same pending request is
  offered again with an inline message
* ``APPROVED`` - the engine completed the authorization

There is no attempt counter, so resubmitting the same key against the same
pending request always lands in the same outcome.
"""

from dataclasses import dataclass
from enum import StrEnum

import shortuuid
from structlog import get_logger

from improvado_gateway.auth.consent import ConsentAction, ConsentDecision
from improvado_gateway.auth.engine import AuthRequest, AuthorizationEngine
from improvado_gateway.auth.verifier import CredentialVerifier, KeyCheck
from improvado_gateway.core.constants import (
    INVALID_API_KEY_MESSAGE,
    PROPS_API_KEY,
    USER_ID_PREFIX,
    USER_LABEL,
    VERIFICATION_UNAVAILABLE_MESSAGE,
)
from improvado_gateway.core.logging import mask_secret
from improvado_gateway.exceptions import InvalidRequestError


logger = get_logger(__name__)


class ApprovalState(StrEnum):
    INVALID_REQUEST = "invalid_request"
    REJECTED = "rejected"
    REPROPOSED = "reproposed"
    APPROVED = "approved"


@dataclass(frozen=True)
class ApprovalOutcome:
    """Terminal result of processing one consent decision."""

    state: ApprovalState
    request: AuthRequest | None = None
    pending_token: str | None = None
    error_message: str | None = None
    retryable: bool = False
    redirect_to: str | None = None
    return_to: str = "/"


def new_user_id() -> str:
    return f"{USER_ID_PREFIX}{shortuuid.uuid()}"


class ApprovalProcessor:
    """Consumes consent decisions and drives them to an outcome."""

    def __init__(
        self,
        engine: AuthorizationEngine,
        verifier: CredentialVerifier,
        return_to: str = "/",
    ) -> None:
        self.engine = engine
        self.verifier = verifier
        self.return_to = return_to

    async def process(self, decision: ConsentDecision) -> ApprovalOutcome:
        if decision.request is None:
            logger.warning("approval_invalid_request", action=decision.action)
            return ApprovalOutcome(state=ApprovalState.INVALID_REQUEST)

        request = decision.request

        if decision.action is ConsentAction.REJECT:
            logger.info("authorization_rejected", client_id=request.client_id)
            return ApprovalOutcome(
                state=ApprovalState.REJECTED,
                request=request,
                return_to=self.return_to,
            )

        if decision.api_key:
            check = await self.verifier.check(decision.api_key)
            if check is not KeyCheck.VALID:
                unavailable = check is KeyCheck.UNAVAILABLE
                logger.info(
                    "authorization_reproposed",
                    client_id=request.client_id,
                    reason=check.value,
                    api_key=mask_secret(decision.api_key),
                )
                return ApprovalOutcome(
                    state=ApprovalState.REPROPOSED,
                    request=request,
                    pending_token=decision.pending_token,
                    error_message=(
                        VERIFICATION_UNAVAILABLE_MESSAGE
                        if unavailable
                        else INVALID_API_KEY_MESSAGE
                    ),
                    retryable=unavailable,
                )
        else:
            # Accepted without a key; tool calls report the missing key later
            logger.info("authorization_without_api_key", client_id=request.client_id)

        try:
            result = await self.engine.complete_authorization(
                request=request,
                user_id=new_user_id(),
                metadata={"label": USER_LABEL},
                scope=request.scope,
                props={PROPS_API_KEY: decision.api_key},
            )
        except InvalidRequestError as e:
            logger.warning(
                "approval_invalid_request",
                client_id=request.client_id,
                error=e.message,
            )
            return ApprovalOutcome(state=ApprovalState.INVALID_REQUEST)
        logger.info("authorization_approved", client_id=request.client_id)
        return ApprovalOutcome(
            state=ApprovalState.APPROVED,
            request=request,
            redirect_to=result.redirect_to,
        )
