import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from main import create_app
from quickcart.config.settings import Settings
from quickcart.database.connection import init_models


@pytest.fixture
def app_settings():
    """Settings pointing at a private in-memory database."""
    overrides = Settings()
    overrides.DATABASE_URL = "sqlite+aiosqlite:///:memory:"
    overrides.DB_QUERY_TIMEOUT = 5.0
    return overrides


@pytest_asyncio.fixture
async def app(app_settings):
    """Fresh application with its own store and cache for every test."""
    application = create_app(app_settings)
    await init_models(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    """httpx.AsyncClient talking to the app in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test", timeout=20
    ) as async_client:
        yield async_client


@pytest_asyncio.fixture
async def snacks(client):
    """The Snacks category."""
    response = await client.post("/categories", json={"name": "Snacks"})
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def potato_chips(client, snacks):
    """Potato Chips in Snacks, priced 50 against an MRP of 60."""
    response = await client.post(
        "/products",
        json={
            "name": "Potato Chips",
            "price": 50,
            "original_price": 60,
            "category_id": snacks["id"],
            "tags": ["chips", "crispy"],
        },
    )
    assert response.status_code == 201
    return response.json()
