"""Pytest configuration and fixtures."""
from datetime import datetime, time, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from studytime.main import app
from studytime.store import InMemoryRecordStore
from studytime.utils.clock import get_clock, utcnow


class FakeClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        """Move forward by ``timedelta(**kwargs)``."""
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def store():
    """Fresh, empty record store."""
    return InMemoryRecordStore()


@pytest.fixture
def clock():
    """Clock pinned to 2025-01-15 08:00 UTC."""
    return FakeClock(datetime(2025, 1, 15, 8, 0))


@pytest.fixture
def api_clock():
    """Clock pinned to 06:00 UTC today, so request date checks accept it."""
    return FakeClock(datetime.combine(utcnow().date(), time(6, 0)))


@pytest_asyncio.fixture
async def app_client(api_clock):
    """
    Create a test client with a clean record store.

    This fixture:
    - Swaps in an empty in-memory store
    - Replaces the service clock with ``api_clock``
    - Yields an async HTTP client for testing
    - Restores the original store afterwards
    """
    from studytime.database import database

    original_store = database.store
    database.store = InMemoryRecordStore()
    app.dependency_overrides[get_clock] = lambda: api_clock

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
    database.store = original_store
