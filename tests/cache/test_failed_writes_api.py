import asyncio

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

MISSING_ID = "0123456789abcdef01234567"


class UnavailableSession:
    """Session stand-in whose every lookup fails like an unreachable store."""

    def __init__(self, error: Exception):
        self.error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def get(self, *args, **kwargs):
        raise self.error


async def warm_listings(client: AsyncClient) -> None:
    for path in ("/categories", "/products"):
        response = await client.get(path)
        assert response.headers["X-Cache"] == "miss"


async def assert_listings_still_cached(client: AsyncClient) -> None:
    for path in ("/categories", "/products"):
        response = await client.get(path)
        assert response.headers["X-Cache"] == "hit"


@pytest.mark.asyncio
class TestFailedWritesKeepCache:
    """A write that does not happen leaves every cached listing in place."""

    async def test_not_found_writes(self, client: AsyncClient, potato_chips):
        await warm_listings(client)

        response = await client.put(f"/categories/{MISSING_ID}", json={"name": "Ghost"})
        assert response.status_code == 404
        response = await client.delete(f"/products/{MISSING_ID}")
        assert response.status_code == 404
        response = await client.patch(f"/products/{MISSING_ID}", json={"price": 1})
        assert response.status_code == 404

        await assert_listings_still_cached(client)

    async def test_malformed_id_writes(self, client: AsyncClient, potato_chips):
        await warm_listings(client)

        response = await client.put("/categories/not-an-id", json={"name": "Ghost"})
        assert response.status_code == 400
        response = await client.delete("/products/not-an-id")
        assert response.status_code == 400

        await assert_listings_still_cached(client)

    async def test_unreachable_store_on_category_update(self, app, client: AsyncClient, snacks, potato_chips):
        # 1. ARRANGE: warm the cache, then cut the category service off from the store
        await warm_listings(client)
        error = OperationalError("SELECT", {}, Exception("connection refused"))
        app.state.category_service._session_factory = lambda: UnavailableSession(error)

        # 2. ACT
        response = await client.put(f"/categories/{snacks['id']}", json={"name": "Namkeen"})

        # 3. ASSERT
        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "Store unavailable while updating category: connection refused",
        }
        assert "categories:all" in app.state.cache
        assert "products:all" in app.state.cache
        await assert_listings_still_cached(client)

    async def test_timed_out_store_on_product_delete(self, app, client: AsyncClient, potato_chips):
        await warm_listings(client)
        app.state.product_service._session_factory = lambda: UnavailableSession(
            asyncio.TimeoutError()
        )

        response = await client.delete(f"/products/{potato_chips['id']}")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "Store query timed out while deleting product",
        }
        await assert_listings_still_cached(client)
