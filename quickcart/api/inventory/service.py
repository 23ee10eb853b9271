import time
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quickcart.api.inventory.models import (
    CreateSnapshotResponse,
    RollbackResultSchema,
    RollbackStats,
    SnapshotProduct,
    SnapshotSummarySchema,
    UploadLogSchema,
    UploadResultSchema,
    UploadStats,
)
from quickcart.api.inventory.services.csv_import import parse_csv, plan_import
from quickcart.api.inventory.services.snapshot_codec import (
    deserialize_product,
    serialize_catalog,
)
from quickcart.config.constants import (
    DEFAULT_DELIVERY_TIME,
    DEFAULT_PRODUCT_UNIT,
    Collections,
    TimeSlot,
)
from quickcart.database.models import (
    Category,
    InventorySnapshot,
    InventoryUploadLog,
    Product,
)
from quickcart.shared.cache_invalidation import CacheInvalidationManager
from quickcart.shared.error_handler import ErrorHandler, handle_service_errors
from quickcart.shared.exceptions import ResourceNotFoundException, ValidationException
from quickcart.shared.performance_utils import async_timer
from quickcart.shared.utils import compute_discount, get_logger, timestamp_label
from quickcart.shared.validation import require_object_id

logger = get_logger(__name__)

# Products written per transaction during CSV imports
IMPORT_BATCH_SIZE = 5
UPLOAD_ERRORS_REPORTED = 5


class InventoryService:
    """Catalog snapshots, best-effort rollback and CSV stock imports"""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        invalidation: CacheInvalidationManager,
        snapshot_list_limit: int = 20,
        upload_log_limit: int = 20,
    ):
        self._error_handler = ErrorHandler(__name__)
        self._session_factory = session_factory
        self._invalidation = invalidation
        self._snapshot_list_limit = snapshot_list_limit
        self._upload_log_limit = upload_log_limit

    # Snapshots

    async def _capture_catalog(self, session: AsyncSession) -> List[dict]:
        products = (await session.execute(select(Product).order_by(Product.created_at))).scalars().all()
        categories = {
            c.id: c for c in (await session.execute(select(Category))).scalars().all()
        }
        return serialize_catalog(products, categories)

    async def _write_snapshot(self, session: AsyncSession, name: str) -> InventorySnapshot:
        products = await self._capture_catalog(session)
        snapshot = InventorySnapshot(name=name, products=products, product_count=len(products))
        session.add(snapshot)
        await session.commit()
        await session.refresh(snapshot)
        logger.info(f"Snapshot '{name}' captured {len(products)} products")
        return snapshot

    @handle_service_errors("listing snapshots")
    async def list_snapshots(self) -> List[SnapshotSummarySchema]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(
                    InventorySnapshot.id,
                    InventorySnapshot.name,
                    InventorySnapshot.product_count,
                    InventorySnapshot.created_at,
                )
                .order_by(InventorySnapshot.created_at.desc())
                .limit(self._snapshot_list_limit)
            )
            return [SnapshotSummarySchema.model_validate(row) for row in result.all()]

    @handle_service_errors("creating snapshot")
    @async_timer("create_snapshot")
    async def create_snapshot(self, name: Optional[str] = None) -> CreateSnapshotResponse:
        async with self._session_factory() as session:
            snapshot = await self._write_snapshot(
                session, name or f"Manual Backup - {timestamp_label()}"
            )
            return CreateSnapshotResponse(
                snapshot=SnapshotSummarySchema.model_validate(snapshot)
            )

    # Rollback

    async def _resolve_category(
        self, session: AsyncSession, record: SnapshotProduct
    ) -> Tuple[Optional[str], Optional[str]]:
        """Category id for a re-created product, or an error message"""
        if record.category_id and await session.get(Category, record.category_id):
            return record.category_id, None
        if not record.category or not record.category.name:
            return None, f"Cannot restore product without category: {record.name}"

        category_id = (
            await session.execute(
                select(Category.id).where(Category.name == record.category.name).limit(1)
            )
        ).scalar()
        if category_id is None:
            return None, f"Category not found for product: {record.name}"
        return category_id, None

    async def _restore_existing(self, session: AsyncSession, product: Product, record: SnapshotProduct) -> None:
        """Overwrite mutable fields in place; the identifier never changes"""
        product.name = record.name
        product.slug = record.slug
        product.description = record.description
        product.price = record.price
        product.original_price = record.original_price
        product.discount = record.discount
        product.unit = record.unit or DEFAULT_PRODUCT_UNIT
        product.stock = record.stock
        product.is_active = record.is_active
        product.is_featured = record.is_featured
        product.images = list(record.images)
        product.tags = list(record.tags)
        product.time_slots = list(record.time_slots) or [TimeSlot.ALL_DAY.value]
        product.delivery_time = record.delivery_time or DEFAULT_DELIVERY_TIME
        await session.commit()

    async def _recreate(self, session: AsyncSession, record: SnapshotProduct, category_id: str) -> None:
        slug = record.slug
        slug_taken = (
            await session.execute(select(Product.id).where(Product.slug == slug))
        ).first()
        if slug_taken:
            slug = f"{slug}-restored-{int(time.time() * 1000)}"

        session.add(
            Product(
                name=record.name,
                slug=slug,
                description=record.description,
                category_id=category_id,
                price=record.price,
                original_price=record.original_price,
                discount=record.discount,
                unit=record.unit or DEFAULT_PRODUCT_UNIT,
                stock=record.stock,
                is_active=record.is_active,
                is_featured=record.is_featured,
                images=list(record.images),
                tags=list(record.tags),
                time_slots=list(record.time_slots) or [TimeSlot.ALL_DAY.value],
                delivery_time=record.delivery_time or DEFAULT_DELIVERY_TIME,
            )
        )
        await session.commit()

    @handle_service_errors("rolling back inventory")
    @async_timer("rollback_inventory")
    async def rollback(self, snapshot_id: Optional[str]) -> RollbackResultSchema:
        """Restore the catalog recorded in a snapshot, one product at a time.

        Products that still exist are overwritten in place, deleted ones are
        re-created with a fresh identifier. Failures are collected per product
        and never abort the remaining work.
        """
        if not snapshot_id:
            raise ValidationException(detail="Snapshot ID is required")
        require_object_id(snapshot_id, "snapshot ID")

        async with self._session_factory() as session:
            snapshot = await session.get(InventorySnapshot, snapshot_id)
            if not snapshot:
                raise ResourceNotFoundException(detail="Snapshot not found")
            snapshot_name = snapshot.name
            records = list(snapshot.products or [])

            # Makes the rollback itself reversible
            await self._write_snapshot(session, f"Pre-Rollback Backup - {timestamp_label()}")

        restored = 0
        created = 0
        errors: List[str] = []

        for raw in records:
            name = raw.get("name", "unknown") if isinstance(raw, dict) else "unknown"
            async with self._session_factory() as session:
                try:
                    record = deserialize_product(raw)
                    existing = await session.get(Product, record.id)
                    if existing:
                        await self._restore_existing(session, existing, record)
                        restored += 1
                        continue

                    category_id, error = await self._resolve_category(session, record)
                    if error:
                        errors.append(error)
                        continue

                    await self._recreate(session, record, category_id)
                    created += 1
                except Exception as e:
                    await session.rollback()
                    logger.warning(f"Rollback of product '{name}' failed: {e}")
                    errors.append(f"Error restoring {name}: {e}")

        async with self._session_factory() as session:
            session.add(
                InventoryUploadLog(
                    file_name=f"Rollback to: {snapshot_name}",
                    snapshot_id=snapshot_id,
                    products_updated=restored,
                    products_created=created,
                    products_deleted=0,
                    errors=errors or None,
                )
            )
            await session.commit()

        self._invalidation.invalidate_family(Collections.PRODUCTS)
        logger.info(
            f"Rollback to '{snapshot_name}': restored={restored} created={created} errors={len(errors)}"
        )
        return RollbackResultSchema(
            message="Rollback completed successfully",
            stats=RollbackStats(restored=restored, created=created, errors=len(errors)),
            errors=errors or None,
        )

    # CSV imports

    async def _lookup_maps(self, session: AsyncSession) -> Tuple[Dict[str, str], Dict[str, str], set]:
        products = (await session.execute(select(Product.id, Product.name, Product.slug))).all()
        categories = (await session.execute(select(Category.id, Category.name))).all()
        products_by_name = {row.name.lower(): row.id for row in products}
        categories_by_name = {row.name.lower(): row.id for row in categories}
        return products_by_name, categories_by_name, {row.slug for row in products}

    @handle_service_errors("importing inventory CSV")
    @async_timer("import_inventory_csv")
    async def import_csv(self, file_name: str, content: str) -> UploadResultSchema:
        """Update stock and prices of known products and create the rest"""
        headers, rows = parse_csv(content)
        if not headers or not rows:
            raise ValidationException(detail="Invalid CSV - no data found")
        if "name" not in headers:
            raise ValidationException(detail="Missing required column: Product Name")

        async with self._session_factory() as session:
            products_by_name, categories_by_name, taken_slugs = await self._lookup_maps(session)
        plan = plan_import(headers, rows, products_by_name, categories_by_name, taken_slugs)

        for start in range(0, len(plan.updates), IMPORT_BATCH_SIZE):
            async with self._session_factory() as session:
                for update in plan.updates[start:start + IMPORT_BATCH_SIZE]:
                    product = await session.get(Product, update["id"])
                    if product is None:
                        continue
                    for field, value in update.items():
                        if field != "id":
                            setattr(product, field, value)
                    if "price" in update or "original_price" in update:
                        product.discount = compute_discount(product.price, product.original_price)
                await session.commit()

        for start in range(0, len(plan.creates), IMPORT_BATCH_SIZE):
            async with self._session_factory() as session:
                session.add_all(
                    Product(**values) for values in plan.creates[start:start + IMPORT_BATCH_SIZE]
                )
                await session.commit()

        async with self._session_factory() as session:
            product_count = (await session.execute(select(func.count(Product.id)))).scalar()
            # Summary only: uploads record the resulting count, not the catalog
            snapshot = InventorySnapshot(
                name=f"Upload: {file_name} - {timestamp_label()}",
                products=[],
                product_count=product_count,
            )
            session.add(snapshot)
            await session.flush()
            session.add(
                InventoryUploadLog(
                    file_name=file_name,
                    snapshot_id=snapshot.id,
                    products_updated=len(plan.updates),
                    products_created=len(plan.creates),
                    errors=plan.errors or None,
                )
            )
            await session.commit()

        self._invalidation.invalidate_family(Collections.PRODUCTS)
        return UploadResultSchema(
            message=f"Processed {len(rows)} rows",
            stats=UploadStats(
                total=len(rows),
                updated=len(plan.updates),
                created=len(plan.creates),
                errors=len(plan.errors),
            ),
            errors=plan.errors[:UPLOAD_ERRORS_REPORTED] or None,
        )

    @handle_service_errors("listing upload history")
    async def list_upload_logs(self) -> List[UploadLogSchema]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(InventoryUploadLog)
                .order_by(InventoryUploadLog.created_at.desc())
                .limit(self._upload_log_limit)
            )
            return [UploadLogSchema.model_validate(log) for log in result.scalars().all()]
