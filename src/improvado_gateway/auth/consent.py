"""Consent form codec.

The pending authorization request travels through the consent page as an
opaque hidden field. The token submitted back is kept verbatim so a
re-rendered form echoes exactly what the browser sent.
"""

import base64
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import orjson
from structlog import get_logger

from improvado_gateway.auth.engine import AuthRequest
from improvado_gateway.core.constants import (
    FORM_ACTION_FIELD,
    FORM_API_KEY_FIELD,
    FORM_REQUEST_FIELD,
)


logger = get_logger(__name__)


class ConsentAction(StrEnum):
    APPROVE = "approve"
    REJECT = "reject"


@dataclass(frozen=True)
class ConsentDecision:
    """A parsed /approve submission.

    ``request`` is None when the pending-request token is missing or cannot be
    decoded; such a decision is structurally invalid regardless of ``action``.
    """

    action: ConsentAction
    request: AuthRequest | None
    pending_token: str | None
    api_key: str | None

    @property
    def is_valid(self) -> bool:
        return self.request is not None


def encode_request(request: AuthRequest) -> str:
    """Serialize a pending request into a form-safe token."""
    raw = orjson.dumps(request.model_dump(mode="json"))
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_request(token: str | None) -> AuthRequest | None:
    """Recover a pending request from its token, or None if unparseable."""
    if not token:
        return None
    try:
        raw = base64.urlsafe_b64decode(token.encode("ascii"))
        return AuthRequest.model_validate(orjson.loads(raw))
    except ValueError as e:
        # binascii.Error, orjson.JSONDecodeError and pydantic.ValidationError
        # are all ValueError subclasses
        logger.info("pending_request_undecodable", error_type=type(e).__name__)
        return None


def _text_field(
    form: Mapping[str, Any], name: str, *, strip: bool = True
) -> str | None:
    value = form.get(name)
    if not isinstance(value, str):
        return None
    if strip:
        value = value.strip()
    return value or None


def parse(form: Mapping[str, Any]) -> ConsentDecision:
    """Parse a posted consent form into a decision.

    Only the literal ``approve`` selects approval; any other action rejects.
    A blank API key field counts as no key.
    """
    action = (
        ConsentAction.APPROVE
        if _text_field(form, FORM_ACTION_FIELD) == ConsentAction.APPROVE
        else ConsentAction.REJECT
    )
    pending_token = _text_field(form, FORM_REQUEST_FIELD, strip=False)
    return ConsentDecision(
        action=action,
        request=decode_request(pending_token),
        pending_token=pending_token,
        api_key=_text_field(form, FORM_API_KEY_FIELD),
    )
