import pytest
from httpx import AsyncClient
from sqlalchemy import delete

from quickcart.database.models import Category, Product

MISSING_ID = "0123456789abcdef01234567"


async def delete_directly(app, model, record_id: str) -> None:
    """Remove a record behind the API's back, leaving caches untouched."""
    async with app.state.session_factory() as session:
        await session.execute(delete(model).where(model.id == record_id))
        await session.commit()


async def take_snapshot(client: AsyncClient, name: str = "Before test") -> dict:
    response = await client.post("/admin/inventory/snapshots", json={"name": name})
    assert response.status_code == 200, response.text
    return response.json()["snapshot"]


async def rollback(client: AsyncClient, snapshot_id: str) -> dict:
    response = await client.post("/admin/inventory/rollback", json={"snapshot_id": snapshot_id})
    assert response.status_code == 200, response.text
    return response.json()


@pytest.mark.asyncio
class TestSnapshots:
    async def test_manual_snapshot_records_catalog(self, client: AsyncClient, potato_chips):
        response = await client.post("/admin/inventory/snapshots", json={})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["snapshot"]["name"].startswith("Manual Backup - ")
        assert body["snapshot"]["product_count"] == 1

    async def test_listing_is_newest_first(self, client: AsyncClient, potato_chips):
        await take_snapshot(client, "first")
        await take_snapshot(client, "second")

        response = await client.get("/admin/inventory/snapshots")

        assert [s["name"] for s in response.json()] == ["second", "first"]


@pytest.mark.asyncio
class TestRollback:
    """Best-effort restore of a snapshot."""

    async def test_missing_snapshot_id_is_rejected(self, client: AsyncClient):
        response = await client.post("/admin/inventory/rollback", json={})
        assert response.status_code == 400
        assert response.json()["message"] == "Snapshot ID is required"

    async def test_unknown_snapshot_is_not_found(self, client: AsyncClient):
        response = await client.post("/admin/inventory/rollback", json={"snapshot_id": MISSING_ID})
        assert response.status_code == 404
        assert response.json()["message"] == "Snapshot not found"

    async def test_malformed_snapshot_id_is_rejected(self, client: AsyncClient):
        response = await client.post("/admin/inventory/rollback", json={"snapshot_id": "nightly"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid snapshot ID"

    async def test_existing_products_are_overwritten_in_place(self, client: AsyncClient, potato_chips):
        snapshot = await take_snapshot(client)
        await client.patch(
            f"/products/{potato_chips['id']}", json={"price": 30, "stock": 3, "tags": []}
        )

        result = await rollback(client, snapshot["id"])

        assert result["stats"] == {"restored": 1, "created": 0, "errors": 0}
        assert "errors" not in result
        product = (await client.get(f"/products/{potato_chips['id']}")).json()
        assert product["price"] == 50
        assert product["discount"] == 17
        assert product["stock"] == 0
        assert product["tags"] == ["chips", "crispy"]

    async def test_rollback_twice_is_idempotent(self, client: AsyncClient, snacks, potato_chips):
        await client.post(
            "/products", json={"name": "Nachos", "price": 30, "category_id": snacks["id"]}
        )
        snapshot = await take_snapshot(client)
        await client.patch(f"/products/{potato_chips['id']}", json={"price": 99})

        first = await rollback(client, snapshot["id"])
        after_first = (await client.get("/products")).json()
        second = await rollback(client, snapshot["id"])
        after_second = (await client.get("/products")).json()

        assert first["stats"] == {"restored": 2, "created": 0, "errors": 0}
        assert second["stats"] == {"restored": 2, "created": 0, "errors": 0}
        assert after_first == after_second

    async def test_deleted_product_is_recreated_with_fresh_id(self, app, client: AsyncClient, potato_chips):
        snapshot = await take_snapshot(client)
        await delete_directly(app, Product, potato_chips["id"])

        result = await rollback(client, snapshot["id"])

        assert result["stats"] == {"restored": 0, "created": 1, "errors": 0}
        products = (await client.get("/products")).json()
        assert [p["name"] for p in products] == ["Potato Chips"]
        assert products[0]["id"] != potato_chips["id"]
        assert products[0]["slug"] == "potato-chips"
        assert products[0]["discount"] == 17

    async def test_recreated_product_finds_category_by_name(self, app, client: AsyncClient, snacks, potato_chips):
        snapshot = await take_snapshot(client)
        await delete_directly(app, Product, potato_chips["id"])
        await client.delete(f"/categories/{snacks['id']}")
        new_snacks = (await client.post("/categories", json={"name": "Snacks"})).json()

        result = await rollback(client, snapshot["id"])

        assert result["stats"]["created"] == 1
        products = (await client.get("/products")).json()
        assert products[0]["category_id"] == new_snacks["id"]

    async def test_slug_collision_gets_restored_suffix(self, app, client: AsyncClient, snacks, potato_chips):
        snapshot = await take_snapshot(client)
        await delete_directly(app, Product, potato_chips["id"])
        replacement = (
            await client.post(
                "/products",
                json={"name": "Potato Chips", "price": 20, "category_id": snacks["id"]},
            )
        ).json()
        assert replacement["slug"] == "potato-chips"

        result = await rollback(client, snapshot["id"])

        assert result["stats"]["created"] == 1
        slugs = sorted(p["slug"] for p in (await client.get("/products")).json())
        assert slugs[0] == "potato-chips"
        assert slugs[1].startswith("potato-chips-restored-")

    async def test_partial_failure_restores_everything_else(self, app, client: AsyncClient, snacks, potato_chips):
        beverages = (await client.post("/categories", json={"name": "Beverages"})).json()
        coffee = (
            await client.post(
                "/products",
                json={"name": "Cold Coffee", "price": 40, "category_id": beverages["id"]},
            )
        ).json()
        snapshot = await take_snapshot(client)

        await client.patch(f"/products/{potato_chips['id']}", json={"stock": 7})
        await delete_directly(app, Product, coffee["id"])
        await delete_directly(app, Category, beverages["id"])

        result = await rollback(client, snapshot["id"])

        assert result["success"] is True
        assert result["stats"] == {"restored": 1, "created": 0, "errors": 1}
        assert result["errors"] == ["Category not found for product: Cold Coffee"]
        product = (await client.get(f"/products/{potato_chips['id']}")).json()
        assert product["stock"] == 0

    async def test_rollback_is_audited_and_reversible(self, client: AsyncClient, potato_chips):
        snapshot = await take_snapshot(client, "Nightly")

        await rollback(client, snapshot["id"])

        names = [s["name"] for s in (await client.get("/admin/inventory/snapshots")).json()]
        assert any(name.startswith("Pre-Rollback Backup - ") for name in names)
        logs = (await client.get("/admin/inventory/upload")).json()
        assert logs[0]["file_name"] == "Rollback to: Nightly"
        assert logs[0]["snapshot_id"] == snapshot["id"]
        assert logs[0]["products_updated"] == 1
        assert logs[0]["products_deleted"] == 0

    async def test_rollback_refreshes_cached_listing(self, client: AsyncClient, potato_chips):
        snapshot = await take_snapshot(client)
        await client.patch(f"/products/{potato_chips['id']}", json={"price": 10})
        await client.get("/products")

        await rollback(client, snapshot["id"])

        response = await client.get("/products")
        assert response.headers["X-Cache"] == "miss"
        assert response.json()[0]["price"] == 50

    async def test_product_of_deleted_category_cannot_be_restored(self, app, client: AsyncClient, snacks, potato_chips):
        # 1. ARRANGE: category is gone before the snapshot is taken
        response = await client.delete(f"/categories/{snacks['id']}")
        assert response.status_code == 200
        snapshot = await take_snapshot(client)
        await delete_directly(app, Product, potato_chips["id"])

        # 2. ACT
        result = await rollback(client, snapshot["id"])

        # 3. ASSERT
        assert result["stats"] == {"restored": 0, "created": 0, "errors": 1}
        assert len(result["errors"]) == 1
        assert result["errors"][0] == "Cannot restore product without category: Potato Chips"
        assert (await client.get("/products")).json() == []


@pytest.mark.asyncio
class TestCsvUpload:
    CSV = (
        "Product Name,Stock Quantity,Regular Price,Sale Price,Categories\n"
        "potato chips,100,60,45,\n"
        "Masala Peanuts,20,40,35,Groceries > Snacks\n"
        "Mystery Box,1,1,1,Bakery\n"
        ",5,,,\n"
    )

    async def upload(self, client: AsyncClient, content: str, file_name: str = "stock.csv"):
        return await client.post(
            "/admin/inventory/upload",
            files={"file": (file_name, content.encode("utf-8"), "text/csv")},
        )

    async def test_upload_updates_creates_and_reports_errors(self, client: AsyncClient, snacks, potato_chips):
        response = await self.upload(client, self.CSV)

        assert response.status_code == 200, response.text
        body = response.json()
        assert body["stats"] == {"total": 4, "updated": 1, "created": 1, "errors": 2}
        assert body["errors"] == [
            'Row 4: Category "Bakery" not found',
            "Row 5: Empty product name",
        ]

        chips = (await client.get(f"/products/{potato_chips['id']}")).json()
        assert chips["stock"] == 100
        assert chips["price"] == 45
        assert chips["discount"] == 25

        peanuts = (await client.get("/products/masala-peanuts")).json()
        assert peanuts["category_id"] == snacks["id"]
        assert peanuts["discount"] == 13

    async def test_upload_is_logged_with_summary_snapshot(self, client: AsyncClient, snacks, potato_chips):
        await self.upload(client, self.CSV)

        logs = (await client.get("/admin/inventory/upload")).json()
        snapshots = (await client.get("/admin/inventory/snapshots")).json()

        assert logs[0]["file_name"] == "stock.csv"
        assert logs[0]["products_created"] == 1
        assert len(logs[0]["errors"]) == 2
        assert snapshots[0]["name"].startswith("Upload: stock.csv - ")
        assert snapshots[0]["product_count"] == 2
        assert logs[0]["snapshot_id"] == snapshots[0]["id"]

    async def test_upload_refreshes_cached_listing(self, client: AsyncClient, snacks, potato_chips):
        await client.get("/products")

        await self.upload(client, self.CSV)

        response = await client.get("/products")
        assert response.headers["X-Cache"] == "miss"
        assert len(response.json()) == 2

    async def test_missing_name_column_is_rejected(self, client: AsyncClient):
        response = await self.upload(client, "sku,stock\nA1,4\n")
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required column: Product Name"

    async def test_empty_file_is_rejected(self, client: AsyncClient):
        response = await self.upload(client, "Product Name,Stock\n")
        assert response.status_code == 400

    async def test_price_only_row_recomputes_discount(self, client: AsyncClient, potato_chips):
        assert potato_chips["discount"] == 17

        response = await self.upload(client, "Product Name,Sale Price\nPotato Chips,55\n")

        assert response.status_code == 200, response.text
        chips = (await client.get(f"/products/{potato_chips['id']}")).json()
        assert chips["price"] == 55
        assert chips["original_price"] == 60
        assert chips["discount"] == 8

    async def test_equal_prices_reset_discount(self, client: AsyncClient, potato_chips):
        await self.upload(client, "Product Name,MRP,Sale Price\nPotato Chips,60,60\n")

        chips = (await client.get(f"/products/{potato_chips['id']}")).json()
        assert chips["discount"] == 0

    async def test_stock_only_row_keeps_discount(self, client: AsyncClient, potato_chips):
        await self.upload(client, "Product Name,Qty\nPotato Chips,9\n")

        chips = (await client.get(f"/products/{potato_chips['id']}")).json()
        assert chips["stock"] == 9
        assert chips["discount"] == 17

    async def test_new_product_without_mrp_has_no_discount(self, client: AsyncClient, snacks):
        await self.upload(client, "Product Name,Sale Price,Category\nTrail Mix,30,Snacks\n")

        product = (await client.get("/products/trail-mix")).json()
        assert product["price"] == 30
        assert product["discount"] is None
