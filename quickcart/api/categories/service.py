from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import load_only

from quickcart.api.categories.models import (
    CategoryPrioritySchema,
    CategorySchema,
    CreateCategorySchema,
    UpdateCategorySchema,
)
from quickcart.config.cache_config import cache_config
from quickcart.config.constants import CacheKeys, Collections
from quickcart.database.models import Category, Product
from quickcart.shared.cache_invalidation import CacheInvalidationManager
from quickcart.shared.error_handler import ErrorHandler, handle_service_errors
from quickcart.shared.exceptions import ResourceNotFoundException, ValidationException
from quickcart.shared.performance_utils import (
    Listing,
    async_timer,
    execute_with_timeout,
    read_through,
)
from quickcart.shared.utils import slugify
from quickcart.shared.validation import require_object_id

LISTING_COLUMNS = (
    Category.id,
    Category.name,
    Category.slug,
    Category.description,
    Category.image,
    Category.order,
    Category.priority,
    Category.is_active,
)


class CategoryService:
    """Category reads through the catalog cache and admin mutations"""

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

    @async_timer("list_categories")
    async def list_categories(self) -> Listing:
        """All categories by priority, each with its product count"""
        return await read_through(
            self._cache,
            CacheKeys.CATEGORIES.value,
            cache_config.get_ttl(Collections.CATEGORIES.value),
            self._load_categories,
        )

    async def _load_categories(self) -> List[Dict[str, Any]]:
        async with self._session_factory() as session:
            result = await execute_with_timeout(
                session,
                select(Category)
                .options(load_only(*LISTING_COLUMNS))
                .order_by(Category.priority, Category.name),
                self._query_timeout,
            )
            categories = result.scalars().all()

            counts_result = await execute_with_timeout(
                session,
                select(Product.category_id, func.count(Product.id)).group_by(
                    Product.category_id
                ),
                self._query_timeout,
            )
            counts = {category_id: count for category_id, count in counts_result.all()}

        listing = []
        for category in categories:
            # Only the projected columns are loaded; read nothing else
            record = {column.key: getattr(category, column.key) for column in LISTING_COLUMNS}
            record["product_count"] = counts.get(category.id, 0)
            listing.append(
                CategorySchema.model_validate(record).model_dump(
                    mode="json", exclude={"created_at", "updated_at"}
                )
            )
        return listing

    @handle_service_errors("retrieving category")
    async def get_category(self, category_id: str) -> CategorySchema:
        require_object_id(category_id, "category ID")
        async with self._session_factory() as session:
            category = await session.get(Category, category_id)
            if not category:
                raise ResourceNotFoundException(detail="Category not found")
            return CategorySchema.model_validate(category)

    @handle_service_errors("creating category")
    async def create_category(self, category_data: CreateCategorySchema) -> CategorySchema:
        name = category_data.name.strip()
        slug = slugify(name)
        if not slug:
            raise ValidationException(detail="Category name must contain letters or digits")

        async with self._session_factory() as session:
            max_priority = (
                await session.execute(select(func.max(Category.priority)))
            ).scalar()

            category = Category(
                name=name,
                slug=slug,
                description=category_data.description or "",
                image=category_data.image or "",
                order=category_data.order,
                priority=(max_priority or 0) + 1,
                is_active=True,
            )
            session.add(category)
            await session.commit()
            await session.refresh(category)

        self._invalidation.invalidate_family(Collections.CATEGORIES)
        return CategorySchema.model_validate(category)

    @handle_service_errors("updating category")
    async def update_category(
        self, category_id: str, category_data: UpdateCategorySchema
    ) -> CategorySchema:
        require_object_id(category_id, "category ID")
        update_dict = category_data.model_dump(exclude_unset=True)

        async with self._session_factory() as session:
            category = await session.get(Category, category_id)
            if not category:
                raise ResourceNotFoundException(detail="Category not found")

            if update_dict.get("name"):
                name = update_dict["name"].strip()
                slug = slugify(name)
                if not slug:
                    raise ValidationException(
                        detail="Category name must contain letters or digits"
                    )
                category.name = name
                category.slug = slug
            for field in ("description", "image", "order", "is_active"):
                if field in update_dict and update_dict[field] is not None:
                    setattr(category, field, update_dict[field])

            await session.commit()
            await session.refresh(category)

        self._invalidation.invalidate_family(Collections.CATEGORIES)
        return CategorySchema.model_validate(category)

    @handle_service_errors("updating category priority")
    async def update_priority(
        self, category_id: str, priority_data: CategoryPrioritySchema
    ) -> CategorySchema:
        require_object_id(category_id, "category ID")
        async with self._session_factory() as session:
            category = await session.get(Category, category_id)
            if not category:
                raise ResourceNotFoundException(detail="Category not found")

            category.priority = priority_data.priority
            await session.commit()
            await session.refresh(category)

        self._invalidation.invalidate_family(Collections.CATEGORIES)
        return CategorySchema.model_validate(category)

    @handle_service_errors("deleting category")
    async def delete_category(self, category_id: str) -> None:
        """Delete a category; its products keep their now dangling reference"""
        require_object_id(category_id, "category ID")
        async with self._session_factory() as session:
            category = await session.get(Category, category_id)
            if not category:
                raise ResourceNotFoundException(detail="Category not found")

            await session.delete(category)
            await session.commit()

        self._invalidation.invalidate_family(Collections.CATEGORIES)
