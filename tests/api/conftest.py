"""Shared fixtures for API tests."""

from __future__ import annotations

import httpx
import pytest

from airlift.api.app import app
from airlift.api.deps import get_app_settings
from airlift.settings import Settings


@pytest.fixture
def test_settings():
    return Settings(max_aircraft_per_phase=10)


@pytest.fixture
def test_app(test_settings):
    """FastAPI app with settings pinned for testing."""
    app.dependency_overrides[get_app_settings] = lambda: test_settings
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
