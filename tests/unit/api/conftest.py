# tests/unit/api/conftest.py
"""Fixtures for API route tests."""

import httpx
import pytest
from fastapi.testclient import TestClient

from improvado_gateway.api.app import create_app
from improvado_gateway.auth.local_engine import LocalAuthorizationEngine


@pytest.fixture
def engine():
    return LocalAuthorizationEngine()


@pytest.fixture
def build_client(settings, engine):
    """Build a TestClient whose outbound calls go through ``transport``."""

    def factory(transport: httpx.MockTransport) -> TestClient:
        app = create_app(
            settings=settings,
            engine=engine,
            http_client=httpx.AsyncClient(transport=transport),
        )
        return TestClient(app)

    return factory
