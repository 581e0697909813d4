"""
Shared pytest fixtures for the Sheet Profiler test suite.
"""

import pytest
from typing import AsyncGenerator, Any, Dict, List

from httpx import AsyncClient, ASGITransport
from sheet_profiler.core.config import Settings, get_settings
from sheet_profiler.main import app


@pytest.fixture
def sales_rows() -> List[Dict[str, Any]]:
    """Rows as the dashboard client sends them: every cell a string or None."""
    return [
        {"region": "north", "month": "Jan", "sales": "120.5", "units": "10", "note": None},
        {"region": "south", "month": "Jan", "sales": "98", "units": "n/a", "note": "late"},
        {"region": "east", "month": "Feb", "sales": "", "units": "7", "note": None},
        {"region": "west", "month": "Feb", "sales": "201.5", "units": "12", "note": "promo"},
    ]


@pytest.fixture
def override_settings():
    """Swap the settings the API endpoints see for a single test."""
    def _override(**values):
        overridden = Settings(**{**get_settings().model_dump(), **values})
        app.dependency_overrides[get_settings] = lambda: overridden
        return overridden

    yield _override
    app.dependency_overrides.pop(get_settings, None)


@pytest.fixture
async def test_client() -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
