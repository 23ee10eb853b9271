"""
Planning of inventory CSV imports: header normalization and row classification.
"""

import csv
import io
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from quickcart.config.constants import DEFAULT_PRODUCT_UNIT, TimeSlot
from quickcart.shared.utils import compute_discount, slugify

HEADER_ALIASES = {
    "productname": "name",
    "name": "name",
    "stockquantity": "stock",
    "stock": "stock",
    "quantity": "stock",
    "qty": "stock",
    "regularprice": "original_price",
    "mrp": "original_price",
    "originalprice": "original_price",
    "saleprice": "price",
    "sellingprice": "price",
    "price": "price",
    "categories": "category",
    "category": "category",
    "categoryname": "category",
    "unit": "unit",
    "description": "description",
}


def normalize_header(header: str) -> str:
    compact = re.sub(r"[^a-z0-9]", "", header.lower())
    return HEADER_ALIASES.get(compact, header.strip().lower())


def parse_csv(content: str) -> Tuple[List[str], List[List[str]]]:
    """Split CSV text into normalized headers and non-blank data rows"""
    lines = [row for row in csv.reader(io.StringIO(content)) if any(cell.strip() for cell in row)]
    if not lines:
        return [], []
    headers = [normalize_header(h) for h in lines[0]]
    return headers, [[cell.strip() for cell in row] for row in lines[1:]]


def _parse_int(value: Optional[str]) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def _parse_price(value: Optional[str]) -> Optional[float]:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed or None


@dataclass
class ImportPlan:
    updates: List[Dict[str, Any]] = field(default_factory=list)
    creates: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def plan_import(
    headers: List[str],
    rows: List[List[str]],
    products_by_name: Dict[str, str],
    categories_by_name: Dict[str, str],
    taken_slugs: Set[str],
) -> ImportPlan:
    """Classify every row as an update of a known product or a new product.

    products_by_name and categories_by_name map lowercased names to ids.
    taken_slugs holds slugs already in the store and is extended with the
    slugs handed to planned creates.
    """
    plan = ImportPlan()
    index = {name: position for position, name in reversed(list(enumerate(headers)))}

    def cell(row: List[str], column: str) -> Optional[str]:
        position = index.get(column)
        if position is None or position >= len(row):
            return None
        return row[position].strip()

    for offset, row in enumerate(rows):
        row_number = offset + 2  # header is row 1

        product_name = cell(row, "name")
        if not product_name:
            plan.errors.append(f"Row {row_number}: Empty product name")
            continue

        stock = _parse_int(cell(row, "stock")) if "stock" in index else None
        original_price = _parse_price(cell(row, "original_price"))
        price = _parse_price(cell(row, "price")) or original_price

        existing_id = products_by_name.get(product_name.lower())
        if existing_id:
            update: Dict[str, Any] = {}
            if stock is not None:
                update["stock"] = stock
            if price is not None:
                update["price"] = price
            if original_price is not None:
                update["original_price"] = original_price
            if update:
                plan.updates.append({"id": existing_id, **update})
            continue

        category_name = cell(row, "category")
        if not category_name:
            plan.errors.append(
                f'Row {row_number}: Cannot create "{product_name}" without category'
            )
            continue

        # "Groceries > Snacks" means the innermost category
        leaf_name = category_name.split(">")[-1].strip() or category_name
        category_id = categories_by_name.get(leaf_name.lower()) or categories_by_name.get(
            category_name.lower()
        )
        if not category_id:
            plan.errors.append(f'Row {row_number}: Category "{leaf_name}" not found')
            continue

        base_slug = slugify(product_name) or "product"
        slug = base_slug
        counter = 1
        while slug in taken_slugs:
            slug = f"{base_slug}-{counter}"
            counter += 1
        taken_slugs.add(slug)

        plan.creates.append(
            {
                "name": product_name,
                "slug": slug,
                "description": cell(row, "description") or None,
                "category_id": category_id,
                "price": price or 0,
                "original_price": original_price,
                "discount": compute_discount(price or 0, original_price),
                "stock": stock or 0,
                "unit": cell(row, "unit") or DEFAULT_PRODUCT_UNIT,
                "is_active": True,
                "images": [],
                "tags": [],
                "time_slots": [TimeSlot.ALL_DAY.value],
            }
        )

    return plan
