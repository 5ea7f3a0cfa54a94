# tests/conftest.py
"""Shared fixtures for gateway tests."""

from collections.abc import Callable

import httpx
import pytest

from improvado_gateway.auth.engine import AuthRequest
from improvado_gateway.auth.verifier import CredentialVerifier
from improvado_gateway.config.settings import Settings


VERIFY_URL = "https://improvado.fyi/api/gpt/verify"
QUERY_URL = "https://improvado.fyi/api/gpt/query"
NOTION_URL = "https://api.notion.com/v1"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def calls_to(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url).startswith(url)]


def _refuse(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"Unexpected outbound request: {request.method} {request.url}")


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Default settings, isolated from the developer's environment."""
    monkeypatch.delenv("CONFIG_FILE", raising=False)
    monkeypatch.delenv("IMPROVADO_GATEWAY_CONFIG_OVERRIDES", raising=False)
    return Settings()


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory for recording transports; the default refuses every request."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response] = _refuse,
    ) -> RecordingTransport:
        return RecordingTransport(handler)

    return factory


@pytest.fixture
def make_verifier(settings: Settings) -> Callable[[RecordingTransport], CredentialVerifier]:
    def factory(transport: RecordingTransport) -> CredentialVerifier:
        return CredentialVerifier(
            config=settings.improvado,
            http_config=settings.http,
            http_client=httpx.AsyncClient(transport=transport),
        )

    return factory


@pytest.fixture
def auth_request() -> AuthRequest:
    return AuthRequest(
        client_id="client-123",
        redirect_uri="https://client.example/callback",
        scope=["improvado_api"],
        state="xyz",
    )
