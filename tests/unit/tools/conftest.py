# tests/unit/tools/conftest.py
"""Fixtures for tool dispatch tests."""

import httpx
import pytest

from improvado_gateway.tools.base import ToolContext
from improvado_gateway.tools.dispatcher import ToolDispatcher


@pytest.fixture
def make_dispatcher(settings, make_verifier):
    def factory(transport):
        verifier = make_verifier(transport)
        return ToolDispatcher(
            settings=settings,
            verifier=verifier,
            http_client=httpx.AsyncClient(transport=transport),
        )

    return factory


@pytest.fixture
def make_context(settings):
    def factory(transport, credential="ntn_token"):
        return ToolContext(
            http=httpx.AsyncClient(transport=transport),
            settings=settings,
            credential=credential,
        )

    return factory
