# tests/unit/api/middleware/test_session_props.py
"""Tests for the session props middleware."""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI, Request, status
from fastapi.testclient import TestClient

from improvado_gateway.api.middleware.session_props import SessionPropsMiddleware


@pytest.fixture
def resolver():
    """Resolver that knows a single grant."""
    resolver = MagicMock()
    resolver.session_props.side_effect = lambda grant: (
        {"improvadoApiKey": "k"} if grant == "good-grant" else None
    )
    return resolver


@pytest.fixture
def client(resolver):
    """App echoing whatever props the middleware attached."""
    app = FastAPI()
    app.add_middleware(SessionPropsMiddleware, resolver=resolver)

    @app.post("/tools/{name}")
    async def invoke(name: str, request: Request):
        return {"props": getattr(request.state, "props", "unset")}

    @app.get("/tools")
    async def listing(request: Request):
        return {"props": getattr(request.state, "props", "unset")}

    return TestClient(app)


class TestSessionProps:
    def test_known_grant_attaches_props(self, client):
        response = client.post(
            "/tools/x", headers={"Authorization": "Bearer good-grant"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"props": {"improvadoApiKey": "k"}}

    def test_no_bearer_means_empty_props(self, client, resolver):
        response = client.post("/tools/x")

        assert response.json() == {"props": {}}
        resolver.session_props.assert_not_called()

    def test_non_bearer_scheme_is_ignored(self, client):
        response = client.post("/tools/x", headers={"Authorization": "Basic abc"})

        assert response.json() == {"props": {}}

    def test_unknown_grant_is_unauthorized(self, client):
        response = client.post("/tools/x", headers={"Authorization": "Bearer stale"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["type"] == "authentication_error"

    def test_listing_is_not_intercepted(self, client, resolver):
        response = client.get("/tools", headers={"Authorization": "Bearer stale"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"props": "unset"}
        resolver.session_props.assert_not_called()
