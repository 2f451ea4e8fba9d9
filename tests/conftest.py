"""
Test configuration and fixtures for the Site Tools API.

Outbound HTTP is never real: services get an httpx client backed by
MockTransport, and the language model client is an AsyncMock.
"""

from types import SimpleNamespace
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from app.platform.config import Settings, get_settings


def build_settings(**overrides) -> Settings:
    values = {
        "GEMINI_API_KEY": "test-gemini-key",
        "PAGESPEED_API_KEY": "test-pagespeed-key",
        "LOG_DIR": "logs",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return build_settings()


@pytest.fixture
def make_settings():
    """Factory for Settings with individual values overridden."""
    return build_settings


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app, settings) -> Generator[TestClient, None, None]:
    """
    Test client with configured credentials.
    Tests that need a different configuration override get_settings themselves.
    """
    test_app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.clear()


@pytest.fixture
def mock_http():
    """Factory: httpx.AsyncClient whose requests are answered by `handler`."""

    def _build(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            headers={"User-Agent": "test-browser"},
            follow_redirects=True,
        )

    return _build


@pytest.fixture
def llm_stub():
    """Factory: stand-in for AsyncOpenAI returning one chat completion (or raising `error`)."""

    def _build(content=None, finish_reason="stop", error=None, choices=None):
        if choices is None:
            choices = [
                SimpleNamespace(
                    message=SimpleNamespace(content=content),
                    finish_reason=finish_reason,
                )
            ]
        llm = MagicMock()
        llm.chat.completions.create = AsyncMock(
            return_value=SimpleNamespace(choices=choices),
            side_effect=error,
        )
        llm.close = AsyncMock()
        return llm

    return _build
