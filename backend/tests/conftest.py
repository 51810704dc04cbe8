"""
ProductBridge Backend — Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the whole suite.
How:   The environment is pointed at a throwaway SQLite file BEFORE any
       productbridge import, so the module-level engine is built against it.

Fixture Hierarchy (all function-scoped):
    ├── mock_datastore: AsyncMock standing in for the Datastore adapter
    ├── sample_payload: a valid ProductPayload
    ├── database: creates the products table, drops it afterwards
    └── test_client: HTTPX AsyncClient bound to the app (needs `database`)
"""

import os
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

_db_dir = Path(tempfile.mkdtemp(prefix="productbridge_test_"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_db_dir / 'test.db'}"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BASE_PATH"] = "/api"
os.environ["HONOR_FAIL_FLAG"] = "true"

from productbridge.schemas.product import ProductPayload  # noqa: E402


@pytest.fixture
def mock_datastore():
    """
    A stand-in for services.datastore.Datastore.

    Usage:
        mock_datastore.execute.return_value = ExecutionResult(1, 7, True)
    """
    datastore = AsyncMock()
    datastore.execute = AsyncMock()
    datastore.fetch_all = AsyncMock(return_value=[])
    datastore.fetch_one = AsyncMock(return_value=None)
    datastore.ping = AsyncMock()
    return datastore


@pytest.fixture
def sample_payload():
    return ProductPayload(name="Widget", category="Tools")


@pytest_asyncio.fixture
async def database():
    """
    Creates the products table on the test engine and tears it down.

    The engine is disposed afterwards so pooled SQLite connections never
    outlive the event loop of the test that opened them.
    """
    from productbridge.database import Base, engine
    from productbridge.models.product import Product  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/products")
    """
    from productbridge.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
