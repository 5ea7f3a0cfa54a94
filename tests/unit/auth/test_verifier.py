# tests/unit/auth/test_verifier.py
"""Tests for Improvado API key checks and provider token exchange."""

import httpx
import orjson
import pytest

from improvado_gateway.auth.verifier import KeyCheck
from improvado_gateway.exceptions import VerificationError


VERIFY_URL = "https://improvado.fyi/api/gpt/verify"


def _json(status_code: int, body: object) -> httpx.Response:
    return httpx.Response(status_code, json=body)


class TestCheck:
    """Tests for CredentialVerifier.check / validate."""

    async def test_success_is_valid(self, make_transport, make_verifier):
        transport = make_transport(lambda r: _json(200, {"ok": True}))
        verifier = make_verifier(transport)

        assert await verifier.check("key-1234567890") is KeyCheck.VALID
        assert await verifier.validate("key-1234567890") is True

    async def test_sends_bearer_key_and_empty_json_body(
        self, make_transport, make_verifier
    ):
        transport = make_transport(lambda r: _json(200, {}))
        verifier = make_verifier(transport)

        await verifier.check("secret-key")

        [request] = transport.requests
        assert request.method == "POST"
        assert str(request.url) == VERIFY_URL
        assert request.headers["Authorization"] == "Bearer secret-key"
        assert request.headers["Content-Type"] == "application/json"
        assert orjson.loads(request.content) == {}

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404])
    async def test_client_error_is_invalid(
        self, make_transport, make_verifier, status_code
    ):
        transport = make_transport(lambda r: _json(status_code, {"error": "nope"}))
        verifier = make_verifier(transport)

        assert await verifier.check("bad") is KeyCheck.INVALID
        assert await verifier.validate("bad") is False

    @pytest.mark.parametrize("status_code", [408, 429])
    async def test_busy_service_is_unavailable(
        self, make_transport, make_verifier, status_code
    ):
        transport = make_transport(lambda r: _json(status_code, {"error": "slow down"}))
        verifier = make_verifier(transport)

        assert await verifier.check("key") is KeyCheck.UNAVAILABLE

    async def test_server_error_is_unavailable(self, make_transport, make_verifier):
        transport = make_transport(lambda r: httpx.Response(503, text="down"))
        verifier = make_verifier(transport)

        assert await verifier.check("key") is KeyCheck.UNAVAILABLE
        assert await verifier.validate("key") is False

    async def test_transport_failure_is_unavailable(
        self, make_transport, make_verifier
    ):
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        verifier = make_verifier(make_transport(fail))

        assert await verifier.check("key") is KeyCheck.UNAVAILABLE
        # validate never raises
        assert await verifier.validate("key") is False


class TestExchange:
    """Tests for CredentialVerifier.exchange."""

    async def test_returns_provider_token(self, make_transport, make_verifier):
        transport = make_transport(lambda r: _json(200, {"apiKey": "ntn_token"}))
        verifier = make_verifier(transport)

        token = await verifier.exchange("improvado-key", "notion")

        assert token == "ntn_token"
        [request] = transport.requests
        assert request.headers["Authorization"] == "Bearer improvado-key"
        assert orjson.loads(request.content) == {"provider": "notion"}

    async def test_empty_key_fails_without_network(
        self, make_transport, make_verifier
    ):
        transport = make_transport()
        verifier = make_verifier(transport)

        with pytest.raises(VerificationError, match="Improvado API key is required"):
            await verifier.exchange("", "notion")

        assert transport.requests == []

    async def test_non_success_status_is_reported(
        self, make_transport, make_verifier
    ):
        transport = make_transport(lambda r: _json(403, {"error": "forbidden"}))
        verifier = make_verifier(transport)

        with pytest.raises(VerificationError) as exc_info:
            await verifier.exchange("key", "notion")

        assert "Failed to verify notion API key" in exc_info.value.message
        assert "status: 403" in exc_info.value.message
        assert exc_info.value.upstream_status == 403

    async def test_missing_api_key_field(self, make_transport, make_verifier):
        transport = make_transport(lambda r: _json(200, {"token": "wrong-field"}))
        verifier = make_verifier(transport)

        with pytest.raises(VerificationError, match="not returned"):
            await verifier.exchange("key", "notion")

    async def test_invalid_json(self, make_transport, make_verifier):
        transport = make_transport(lambda r: httpx.Response(200, text="<html>"))
        verifier = make_verifier(transport)

        with pytest.raises(VerificationError, match="invalid JSON"):
            await verifier.exchange("key", "notion")

    async def test_transport_failure(self, make_transport, make_verifier):
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        verifier = make_verifier(make_transport(fail))

        with pytest.raises(VerificationError, match="Failed to verify notion"):
            await verifier.exchange("key", "notion")
