import asyncio

import pytest
from httpx import AsyncClient

MISSING_ID = "0123456789abcdef01234567"


@pytest.mark.asyncio
class TestCategoriesAPI:
    """Category listing through the cache and the admin write path."""

    async def test_create_category_derives_slug_and_priority(self, client: AsyncClient):
        first = await client.post("/categories", json={"name": "Fruits & Vegetables"})
        second = await client.post("/categories", json={"name": "  Dairy  "})

        assert first.status_code == 201
        assert first.json()["slug"] == "fruits-vegetables"
        assert first.json()["priority"] == 1
        assert second.json()["name"] == "Dairy"
        assert second.json()["priority"] == 2

    async def test_listing_is_served_from_cache_on_second_read(self, client: AsyncClient, snacks):
        first = await client.get("/categories")
        second = await client.get("/categories")

        assert first.status_code == 200
        assert first.headers["X-Cache"] == "miss"
        assert second.headers["X-Cache"] == "hit"
        assert second.json() == first.json()

    async def test_write_then_read_is_fresh(self, client: AsyncClient, snacks):
        # 1. ARRANGE: warm the cache
        response = await client.get("/categories")
        assert [c["name"] for c in response.json()] == ["Snacks"]

        # 2. ACT: mutate through the write path
        response = await client.put(f"/categories/{snacks['id']}", json={"name": "Namkeen"})
        assert response.status_code == 200
        assert response.json()["slug"] == "namkeen"

        # 3. ASSERT: the next read reflects the write
        response = await client.get("/categories")
        assert response.headers["X-Cache"] == "miss"
        assert [c["name"] for c in response.json()] == ["Namkeen"]

    async def test_listing_carries_product_counts(self, client: AsyncClient, snacks, potato_chips):
        await client.post("/categories", json={"name": "Beverages"})

        response = await client.get("/categories")

        counts = {c["name"]: c["product_count"] for c in response.json()}
        assert counts == {"Snacks": 1, "Beverages": 0}

    async def test_product_write_refreshes_category_counts(self, client: AsyncClient, snacks, potato_chips):
        response = await client.get("/categories")
        assert response.json()[0]["product_count"] == 1

        response = await client.delete(f"/products/{potato_chips['id']}")
        assert response.status_code == 200

        response = await client.get("/categories")
        assert response.json()[0]["product_count"] == 0

    async def test_priority_orders_listing(self, client: AsyncClient, snacks):
        dairy = (await client.post("/categories", json={"name": "Dairy"})).json()

        response = await client.patch(f"/categories/{dairy['id']}/priority", json={"priority": 0})
        assert response.status_code == 200
        assert response.json()["priority"] == 0

        response = await client.get("/categories")
        assert [c["name"] for c in response.json()] == ["Dairy", "Snacks"]

    async def test_get_update_delete_lifecycle(self, client: AsyncClient, snacks):
        response = await client.get(f"/categories/{snacks['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Snacks"

        response = await client.patch(
            f"/categories/{snacks['id']}", json={"description": "Crunchy things", "is_active": False}
        )
        assert response.json()["description"] == "Crunchy things"
        assert response.json()["is_active"] is False
        assert response.json()["slug"] == "snacks"

        response = await client.delete(f"/categories/{snacks['id']}")
        assert response.status_code == 200

        response = await client.get(f"/categories/{snacks['id']}")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found", "message": "Category not found"}

    async def test_malformed_id_is_rejected(self, client: AsyncClient):
        response = await client.get("/categories/not-an-id")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid category ID"

    async def test_missing_category_cannot_be_updated(self, client: AsyncClient):
        response = await client.put(f"/categories/{MISSING_ID}", json={"name": "Ghost"})
        assert response.status_code == 404

    async def test_create_requires_name(self, client: AsyncClient):
        response = await client.post("/categories", json={"description": "No name"})
        assert response.status_code == 400
        assert response.json()["error"] == "Bad request"

    async def test_name_without_alphanumerics_is_rejected(self, client: AsyncClient):
        response = await client.post("/categories", json={"name": "!!!"})
        assert response.status_code == 400

    async def test_store_failure_degrades_to_empty_listing(self, app, client: AsyncClient, snacks):
        async def unavailable():
            raise asyncio.TimeoutError()

        app.state.category_service._load_categories = unavailable

        response = await client.get("/categories")

        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["Cache-Control"] == "public, max-age=10"
        assert "categories:all" not in app.state.cache
