import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
class TestAdminCacheAPI:
    async def test_stats_describe_families_and_ttls(self, client: AsyncClient, snacks):
        await client.get("/categories")

        response = await client.get("/admin/cache")

        assert response.status_code == 200
        body = response.json()
        assert body["family_keys"]["products"] == ["products:all", "products:featured"]
        assert body["store"]["total_keys"] == 1
        assert body["ttl"]["ttl_settings"]["categories"] == 300

    async def test_invalidate_family(self, client: AsyncClient, snacks):
        await client.get("/categories")

        response = await client.delete("/admin/cache/categories")
        assert response.json() == {"family": "categories", "invalidated": 1}

        response = await client.get("/categories")
        assert response.headers["X-Cache"] == "miss"

    async def test_unknown_family_is_rejected(self, client: AsyncClient):
        response = await client.delete("/admin/cache/orders")
        assert response.status_code == 400

    async def test_clear(self, app, client: AsyncClient, snacks):
        await client.get("/categories")
        await client.get("/banners")

        response = await client.delete("/admin/cache")

        assert response.status_code == 200
        assert app.state.cache.keys() == []
