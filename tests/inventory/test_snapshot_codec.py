from datetime import datetime, timezone

from quickcart.api.inventory.services.csv_import import normalize_header, parse_csv, plan_import
from quickcart.api.inventory.services.snapshot_codec import deserialize_product, serialize_product
from quickcart.database.models import Category, Product


def make_product(**overrides) -> Product:
    values = dict(
        id="65f1c2a9e4b0a1b2c3d4e5f6",
        name="Potato Chips",
        slug="potato-chips",
        category_id="65f1c2a9e4b0a1b2c3d4e5f7",
        price=50.0,
        original_price=60.0,
        discount=17,
        unit="200 g",
        stock=12,
        is_active=True,
        is_featured=False,
        images=["https://cdn.example.com/chips.png"],
        tags=["chips"],
        time_slots=["EVENING"],
        delivery_time=24,
        created_at=datetime(2026, 10, 1, 9, 30, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return Product(**values)


class TestSnapshotCodec:
    def test_timestamps_become_iso_strings(self):
        record = serialize_product(make_product(), None)

        assert record["created_at"] == "2026-10-01T09:30:00+00:00"
        assert record["updated_at"] is None
        assert record["category"] is None

    def test_category_name_and_slug_are_embedded(self):
        category = Category(id="65f1c2a9e4b0a1b2c3d4e5f7", name="Snacks", slug="snacks")

        record = serialize_product(make_product(), category)

        assert record["category"] == {"name": "Snacks", "slug": "snacks"}
        assert record["category_id"] == "65f1c2a9e4b0a1b2c3d4e5f7"

    def test_record_reads_back_into_schema(self):
        record = serialize_product(make_product(), None)

        product = deserialize_product(record)

        assert product.name == "Potato Chips"
        assert product.time_slots == ["EVENING"]
        assert product.price == 50.0


class TestCsvPlanning:
    def test_header_aliases(self):
        assert normalize_header("Product Name") == "name"
        assert normalize_header("MRP") == "original_price"
        assert normalize_header("Selling Price") == "price"
        assert normalize_header("qty") == "stock"
        assert normalize_header("Barcode") == "barcode"

    def test_blank_lines_are_skipped(self):
        headers, rows = parse_csv("Name,Stock\n\nTea,3\n , \n")

        assert headers == ["name", "stock"]
        assert rows == [["Tea", "3"]]

    def test_new_products_get_unique_slugs(self):
        taken = {"green-tea"}
        plan = plan_import(
            ["name", "category", "price"],
            [["Green Tea", "Beverages", "10"], ["Green  Tea!", "Beverages", "12"]],
            products_by_name={},
            categories_by_name={"beverages": "c1"},
            taken_slugs=taken,
        )

        assert [c["slug"] for c in plan.creates] == ["green-tea-1", "green-tea-2"]
        assert plan.errors == []

    def test_missing_category_for_new_product(self):
        plan = plan_import(
            ["name", "stock"],
            [["Green Tea", "4"]],
            products_by_name={},
            categories_by_name={},
            taken_slugs=set(),
        )

        assert plan.errors == ['Row 2: Cannot create "Green Tea" without category']

    def test_stock_only_update(self):
        plan = plan_import(
            ["name", "stock"],
            [["Green Tea", "4"]],
            products_by_name={"green tea": "p1"},
            categories_by_name={},
            taken_slugs=set(),
        )

        assert plan.updates == [{"id": "p1", "stock": 4}]
