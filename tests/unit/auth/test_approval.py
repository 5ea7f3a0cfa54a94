# tests/unit/auth/test_approval.py
"""Tests for the approval state machine."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from improvado_gateway.auth import consent
from improvado_gateway.auth.approval import (
    ApprovalProcessor,
    ApprovalState,
    new_user_id,
)
from improvado_gateway.auth.engine import CompletionResult
from improvado_gateway.auth.verifier import CredentialVerifier, KeyCheck
from improvado_gateway.core.constants import (
    INVALID_API_KEY_MESSAGE,
    VERIFICATION_UNAVAILABLE_MESSAGE,
)
from improvado_gateway.exceptions import InvalidRequestError


@pytest.fixture
def engine():
    """Authorization engine double."""
    engine = MagicMock()
    engine.complete_authorization = AsyncMock(
        return_value=CompletionResult(
            redirect_to="https://client.example/callback?code=abc&state=xyz"
        )
    )
    return engine


@pytest.fixture
def verifier():
    verifier = MagicMock(spec=CredentialVerifier)
    verifier.check = AsyncMock(return_value=KeyCheck.VALID)
    return verifier


@pytest.fixture
def processor(engine, verifier):
    return ApprovalProcessor(engine=engine, verifier=verifier)


def _form(auth_request, action="approve", api_key=None, token=None):
    form = {
        "action": action,
        "oauthReqInfo": token if token is not None else consent.encode_request(auth_request),
    }
    if api_key is not None:
        form["improvadoApiKey"] = api_key
    return form


class TestApprovalProcessor:
    """Tests for ApprovalProcessor.process."""

    async def test_invalid_request_touches_nothing(self, processor, engine, verifier):
        decision = consent.parse({"action": "approve", "improvadoApiKey": "k"})

        outcome = await processor.process(decision)

        assert outcome.state is ApprovalState.INVALID_REQUEST
        verifier.check.assert_not_called()
        engine.complete_authorization.assert_not_called()

    async def test_reject_makes_no_verification_call(
        self, processor, engine, verifier, auth_request
    ):
        decision = consent.parse(_form(auth_request, action="reject", api_key="k"))

        outcome = await processor.process(decision)

        assert outcome.state is ApprovalState.REJECTED
        assert outcome.return_to == "/"
        verifier.check.assert_not_called()
        engine.complete_authorization.assert_not_called()

    async def test_valid_key_completes_once_with_scope_and_key(
        self, processor, engine, verifier, auth_request
    ):
        decision = consent.parse(_form(auth_request, api_key="good-key"))

        outcome = await processor.process(decision)

        assert outcome.state is ApprovalState.APPROVED
        assert outcome.redirect_to == (
            "https://client.example/callback?code=abc&state=xyz"
        )
        verifier.check.assert_awaited_once_with("good-key")
        engine.complete_authorization.assert_awaited_once()
        kwargs = engine.complete_authorization.await_args.kwargs
        assert kwargs["request"] == auth_request
        assert kwargs["scope"] == ["improvado_api"]
        assert kwargs["props"] == {"improvadoApiKey": "good-key"}
        assert kwargs["metadata"] == {"label": "Improvado User"}
        assert kwargs["user_id"].startswith("improvado_user_")

    async def test_invalid_key_reproposes_same_token(
        self, processor, engine, verifier, auth_request
    ):
        verifier.check.return_value = KeyCheck.INVALID
        token = consent.encode_request(auth_request)
        decision = consent.parse(_form(auth_request, api_key="bad", token=token))

        outcome = await processor.process(decision)

        assert outcome.state is ApprovalState.REPROPOSED
        assert outcome.pending_token == token
        assert outcome.error_message == INVALID_API_KEY_MESSAGE
        assert outcome.retryable is False
        engine.complete_authorization.assert_not_called()

    async def test_outage_reproposes_with_retry_message(
        self, processor, engine, verifier, auth_request
    ):
        verifier.check.return_value = KeyCheck.UNAVAILABLE
        decision = consent.parse(_form(auth_request, api_key="maybe-good"))

        outcome = await processor.process(decision)

        assert outcome.state is ApprovalState.REPROPOSED
        assert outcome.error_message == VERIFICATION_UNAVAILABLE_MESSAGE
        assert outcome.retryable is True
        engine.complete_authorization.assert_not_called()

    async def test_resubmitting_invalid_key_is_idempotent(
        self, processor, engine, verifier, auth_request
    ):
        verifier.check.return_value = KeyCheck.INVALID
        decision = consent.parse(_form(auth_request, api_key="bad"))

        first = await processor.process(decision)
        second = await processor.process(decision)

        assert first == second
        engine.complete_authorization.assert_not_called()

    async def test_approve_without_key_skips_verification(
        self, processor, engine, verifier, auth_request
    ):
        decision = consent.parse(_form(auth_request))

        outcome = await processor.process(decision)

        assert outcome.state is ApprovalState.APPROVED
        verifier.check.assert_not_called()
        props = engine.complete_authorization.await_args.kwargs["props"]
        assert not props["improvadoApiKey"]

    async def test_engine_refusal_is_invalid_request(
        self, processor, engine, auth_request
    ):
        engine.complete_authorization.side_effect = InvalidRequestError(
            "Missing or invalid redirect_uri parameter"
        )
        decision = consent.parse(_form(auth_request))

        outcome = await processor.process(decision)

        assert outcome.state is ApprovalState.INVALID_REQUEST
        assert outcome.redirect_to is None


def test_user_ids_are_unique():
    ids = {new_user_id() for _ in range(100)}

    assert len(ids) == 100
    assert all(i.startswith("improvado_user_") for i in ids)
