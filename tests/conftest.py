"""
Users API: Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── store_url:    SQLite file URL in a fresh temp directory
    ├── store:        Connected UserStore on that URL (aiosqlite driver)
    ├── event_logger: MagicMock standing in for the EventLogger
    └── test_client:  HTTPX AsyncClient wired to create_app(store, event_logger)
"""

import os

# Set before any users_api import so the Settings singleton never points at
# a real MySQL server or a real log collector.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOGTAIL_TOKEN"] = ""
os.environ["LOG_LEVEL"] = "WARN"

import logging
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from users_api.services.event_logger import EventLogger
from users_api.services.user_store import UserStore


class ListHandler(logging.Handler):
    """Collects emitted records for assertions."""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def list_handler():
    return ListHandler()


@pytest.fixture
def store_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'users.db'}"


@pytest_asyncio.fixture
async def store(store_url):
    """
    A real UserStore backed by SQLite.

    Why SQLite: same SQLAlchemy statements and pool as production, no server.
    """
    user_store = UserStore(store_url)
    await user_store.connect()
    yield user_store
    await user_store.close()


@pytest.fixture
def event_logger():
    return MagicMock(spec=EventLogger)


@pytest_asyncio.fixture
async def test_client(store, event_logger):
    """
    Async HTTP client talking to an app built around the test store.

    ASGITransport does not run the lifespan, so the store fixture connects
    the store itself.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/users")
            assert response.status_code == 200
    """
    from users_api.main import create_app

    app = create_app(store=store, event_logger=event_logger)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
