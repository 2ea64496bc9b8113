# tests/main/conftest.py
"""Pytest fixtures for application-level tests."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app


@pytest.fixture
async def app_client() -> AsyncGenerator[AsyncClient]:
    """Client against the application without running its lifespan."""
    async with AsyncClient(base_url="http://test", transport=ASGITransport(app=app)) as ac:
        yield ac
