"""
Explicit conversion between catalog rows and snapshot records.

Snapshots must survive schema-agnostic storage, so every non-portable value
is converted deliberately: identifiers become strings and datetimes become
ISO 8601 text.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from quickcart.api.inventory.models import SnapshotCategorySchema, SnapshotProduct
from quickcart.database.models import Category, Product


def _iso(moment: Optional[datetime]) -> Optional[str]:
    return moment.isoformat() if moment else None


def serialize_product(product: Product, category: Optional[Category]) -> Dict[str, Any]:
    record = SnapshotProduct(
        id=str(product.id),
        name=product.name,
        slug=product.slug,
        description=product.description,
        category_id=str(product.category_id) if product.category_id else None,
        category=SnapshotCategorySchema(name=category.name, slug=category.slug)
        if category
        else None,
        price=product.price,
        original_price=product.original_price,
        discount=product.discount,
        unit=product.unit,
        stock=product.stock,
        is_active=product.is_active,
        is_featured=product.is_featured,
        images=list(product.images or []),
        tags=list(product.tags or []),
        time_slots=list(product.time_slots or []),
        delivery_time=product.delivery_time,
        created_at=_iso(product.created_at),
        updated_at=_iso(product.updated_at),
    )
    return record.model_dump(mode="json")


def serialize_catalog(
    products: List[Product], categories: Dict[str, Category]
) -> List[Dict[str, Any]]:
    return [serialize_product(p, categories.get(p.category_id)) for p in products]


def deserialize_product(raw: Dict[str, Any]) -> SnapshotProduct:
    return SnapshotProduct.model_validate(raw)
