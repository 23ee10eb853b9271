from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import String, cast, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import load_only

from quickcart.api.products.models import (
    BulkUpdateProductsSchema,
    BulkUpdateResultSchema,
    CreateProductSchema,
    ProductCategorySchema,
    ProductSchema,
    ProductSuggestionSchema,
    UpdateProductSchema,
)
from quickcart.config.cache_config import cache_config
from quickcart.config.constants import (
    DEFAULT_DELIVERY_TIME,
    DEFAULT_PRODUCT_UNIT,
    CacheKeys,
    Collections,
    TimeSlot,
)
from quickcart.database.models import Category, Product
from quickcart.shared.cache_invalidation import CacheInvalidationManager
from quickcart.shared.error_handler import ErrorHandler, handle_service_errors
from quickcart.shared.exceptions import ResourceNotFoundException, ValidationException
from quickcart.shared.performance_utils import (
    Listing,
    async_timer,
    execute_with_timeout,
    read_through,
    read_uncached,
)
from quickcart.shared.utils import compute_discount, is_valid_object_id, slugify
from quickcart.shared.validation import like_pattern, require_object_id

LISTING_COLUMNS = (
    Product.id,
    Product.name,
    Product.slug,
    Product.category_id,
    Product.price,
    Product.original_price,
    Product.discount,
    Product.unit,
    Product.stock,
    Product.is_active,
    Product.is_featured,
    Product.images,
    Product.tags,
    Product.time_slots,
    Product.delivery_time,
    Product.created_at,
)

SUGGESTION_CANDIDATES = 50
SUGGESTION_LIMIT = 10


async def unique_product_slug(
    session: AsyncSession, base_slug: str, exclude_id: Optional[str] = None
) -> str:
    """base_slug, or base_slug-N with the lowest free N"""
    stmt = select(Product.slug).where(
        or_(Product.slug == base_slug, Product.slug.like(f"{base_slug}-%"))
    )
    if exclude_id:
        stmt = stmt.where(Product.id != exclude_id)
    taken = set((await session.execute(stmt)).scalars().all())

    slug = base_slug
    counter = 1
    while slug in taken:
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


class ProductService:
    """Product catalog reads through the cache and admin mutations"""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        invalidation: CacheInvalidationManager,
        query_timeout: float,
    ):
        self._error_handler = ErrorHandler(__name__)
        self._session_factory = session_factory
        self._invalidation = invalidation
        self._cache = invalidation.cache
        self._query_timeout = query_timeout

    # Read path

    @async_timer("list_products")
    async def list_products(
        self,
        category_id: Optional[str] = None,
        category_slug: Optional[str] = None,
        search: Optional[str] = None,
        featured: bool = False,
    ) -> Listing:
        """Active products, newest first.

        Only the whole-family listings (all, featured) are cached; any
        category or search filter goes straight to the store.
        """
        if category_id is not None:
            require_object_id(category_id, "category ID")

        ttl = cache_config.get_ttl(Collections.PRODUCTS.value)
        if not (category_id or category_slug or search):
            if featured:
                return await read_through(
                    self._cache,
                    CacheKeys.PRODUCTS_FEATURED.value,
                    ttl,
                    lambda: self._load_products([Product.is_featured.is_(True)]),
                )
            return await read_through(
                self._cache, CacheKeys.PRODUCTS_ALL.value, ttl, lambda: self._load_products([])
            )

        async def load_filtered() -> List[Dict[str, Any]]:
            conditions = []
            if category_id:
                conditions.append(Product.category_id == category_id)
            elif category_slug:
                resolved = await self._category_id_for_slug(category_slug)
                if resolved is None:
                    return []
                conditions.append(Product.category_id == resolved)
            if search:
                pattern = like_pattern(search.strip())
                conditions.append(
                    or_(
                        Product.name.ilike(pattern, escape="\\"),
                        Product.description.ilike(pattern, escape="\\"),
                        # Exact tag match inside the serialized tag list
                        cast(Product.tags, String).ilike(
                            like_pattern(f'"{search.strip()}"'), escape="\\"
                        ),
                    )
                )
            if featured:
                conditions.append(Product.is_featured.is_(True))
            return await self._load_products(conditions)

        return await read_uncached(load_filtered, "products:filtered")

    async def _category_id_for_slug(self, slug: str) -> Optional[str]:
        async with self._session_factory() as session:
            result = await execute_with_timeout(
                session, select(Category.id).where(Category.slug == slug), self._query_timeout
            )
            return result.scalars().first()

    async def _load_products(self, conditions: Sequence[Any]) -> List[Dict[str, Any]]:
        async with self._session_factory() as session:
            result = await execute_with_timeout(
                session,
                select(Product)
                .options(load_only(*LISTING_COLUMNS))
                .where(Product.is_active.is_(True), *conditions)
                .order_by(Product.created_at.desc()),
                self._query_timeout,
            )
            products = result.scalars().all()

            categories = await self._categories_by_id(
                session, {product.category_id for product in products}
            )

        listing = []
        for product in products:
            # Only the projected columns are loaded; read nothing else
            record = {column.key: getattr(product, column.key) for column in LISTING_COLUMNS}
            record["category"] = categories.get(product.category_id)
            listing.append(
                ProductSchema.model_validate(record).model_dump(
                    mode="json", exclude={"updated_at"}
                )
            )
        return listing

    async def _categories_by_id(
        self, session: AsyncSession, category_ids: set
    ) -> Dict[str, Dict[str, str]]:
        if not category_ids:
            return {}
        result = await execute_with_timeout(
            session,
            select(Category.id, Category.name, Category.slug).where(
                Category.id.in_(category_ids)
            ),
            self._query_timeout,
        )
        return {
            row.id: {"id": row.id, "name": row.name, "slug": row.slug}
            for row in result.all()
        }

    @handle_service_errors("retrieving product")
    async def get_product(self, id_or_slug: str) -> ProductSchema:
        async with self._session_factory() as session:
            if is_valid_object_id(id_or_slug):
                product = await session.get(Product, id_or_slug)
            else:
                product = (
                    await session.execute(select(Product).where(Product.slug == id_or_slug))
                ).scalars().first()
            if not product:
                raise ResourceNotFoundException(detail="Product not found")

            schema = ProductSchema.model_validate(product)
            category = await session.get(Category, product.category_id)
            if category:
                schema.category = ProductCategorySchema.model_validate(category)
            return schema

    @handle_service_errors("retrieving product suggestions")
    async def suggest_products(self, query: Optional[str]) -> List[ProductSuggestionSchema]:
        """Up to ten active products whose name or tags contain the query"""
        if not query or not query.strip():
            return []
        term = query.strip().lower()
        pattern = like_pattern(term)

        async with self._session_factory() as session:
            result = await execute_with_timeout(
                session,
                select(Product)
                .where(
                    Product.is_active.is_(True),
                    or_(
                        Product.name.ilike(pattern, escape="\\"),
                        cast(Product.tags, String).ilike(pattern, escape="\\"),
                    ),
                )
                .limit(SUGGESTION_CANDIDATES),
                self._query_timeout,
            )
            products = result.scalars().all()

        # Names starting with the term first, then alphabetical
        ranked = sorted(
            products,
            key=lambda p: (not p.name.lower().startswith(term), p.name.lower()),
        )
        return [ProductSuggestionSchema.model_validate(p) for p in ranked[:SUGGESTION_LIMIT]]

    # Write path

    async def _require_category(self, session: AsyncSession, category_id: str) -> Category:
        require_object_id(category_id, "category ID")
        category = await session.get(Category, category_id)
        if not category:
            raise ResourceNotFoundException(detail="Category not found")
        return category

    @handle_service_errors("creating product")
    async def create_product(self, product_data: CreateProductSchema) -> ProductSchema:
        name = product_data.name.strip()
        base_slug = slugify(name)
        if not base_slug:
            raise ValidationException(detail="Product name must contain letters or digits")

        async with self._session_factory() as session:
            category = await self._require_category(session, product_data.category_id)

            product = Product(
                name=name,
                slug=await unique_product_slug(session, base_slug),
                description=product_data.description,
                category_id=category.id,
                price=product_data.price,
                original_price=product_data.original_price,
                discount=compute_discount(product_data.price, product_data.original_price),
                unit=product_data.unit or DEFAULT_PRODUCT_UNIT,
                stock=product_data.stock,
                is_active=product_data.is_active,
                is_featured=product_data.is_featured,
                images=list(product_data.images),
                tags=list(product_data.tags),
                time_slots=[slot.value for slot in product_data.time_slots]
                if product_data.time_slots
                else [TimeSlot.ALL_DAY.value],
                delivery_time=product_data.delivery_time or DEFAULT_DELIVERY_TIME,
            )
            session.add(product)
            await session.commit()
            await session.refresh(product)

            schema = ProductSchema.model_validate(product)
            schema.category = ProductCategorySchema.model_validate(category)

        self._invalidation.invalidate_family(Collections.PRODUCTS)
        return schema

    @handle_service_errors("updating product")
    async def update_product(
        self, product_id: str, product_data: UpdateProductSchema
    ) -> ProductSchema:
        require_object_id(product_id, "product ID")
        update_dict = product_data.model_dump(exclude_unset=True)

        async with self._session_factory() as session:
            product = await session.get(Product, product_id)
            if not product:
                raise ResourceNotFoundException(detail="Product not found")

            if update_dict.get("name"):
                name = update_dict["name"].strip()
                base_slug = slugify(name)
                if not base_slug:
                    raise ValidationException(
                        detail="Product name must contain letters or digits"
                    )
                product.name = name
                product.slug = await unique_product_slug(session, base_slug, product.id)

            if update_dict.get("category_id"):
                category = await self._require_category(session, update_dict["category_id"])
                product.category_id = category.id

            price_changed = False
            if update_dict.get("price") is not None:
                product.price = update_dict["price"]
                price_changed = True
            if "original_price" in update_dict:
                product.original_price = update_dict["original_price"]
                price_changed = True
            if price_changed:
                product.discount = compute_discount(product.price, product.original_price)

            for field in ("description", "unit", "stock", "is_active", "is_featured", "delivery_time"):
                if field in update_dict and (field == "description" or update_dict[field] is not None):
                    setattr(product, field, update_dict[field])
            for field in ("images", "tags"):
                if update_dict.get(field) is not None:
                    setattr(product, field, list(update_dict[field]))
            if update_dict.get("time_slots"):
                product.time_slots = [TimeSlot(slot).value for slot in update_dict["time_slots"]]

            await session.commit()
            await session.refresh(product)
            schema = ProductSchema.model_validate(product)

        self._invalidation.invalidate_family(Collections.PRODUCTS)
        return schema

    @handle_service_errors("deleting product")
    async def delete_product(self, product_id: str) -> None:
        require_object_id(product_id, "product ID")
        async with self._session_factory() as session:
            product = await session.get(Product, product_id)
            if not product:
                raise ResourceNotFoundException(detail="Product not found")

            await session.delete(product)
            await session.commit()

        self._invalidation.invalidate_family(Collections.PRODUCTS)

    @handle_service_errors("bulk updating products")
    async def bulk_update(self, payload: BulkUpdateProductsSchema) -> BulkUpdateResultSchema:
        """Apply time slots and featured/active flags to many products at once"""
        if not payload.product_ids:
            raise ValidationException(detail="No product IDs provided")
        updates = payload.updates.model_dump(exclude_none=True)
        if not updates:
            raise ValidationException(detail="No updates provided")
        for product_id in payload.product_ids:
            require_object_id(product_id, "product ID")
        if "time_slots" in updates:
            updates["time_slots"] = [TimeSlot(slot).value for slot in updates["time_slots"]]

        async with self._session_factory() as session:
            result = await session.execute(
                select(Product).where(Product.id.in_(set(payload.product_ids)))
            )
            products = result.scalars().all()

            modified = 0
            for product in products:
                changed = False
                for field, value in updates.items():
                    if getattr(product, field) != value:
                        setattr(product, field, value)
                        changed = True
                modified += changed
            await session.commit()

        if products:
            self._invalidation.invalidate_family(Collections.PRODUCTS)
        return BulkUpdateResultSchema(
            message=f"Updated {modified} products",
            matched_count=len(products),
            modified_count=modified,
        )
