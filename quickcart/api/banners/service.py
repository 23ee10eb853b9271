from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quickcart.api.banners.models import (
    BannerSchema,
    CreateBannerSchema,
    PatchBannerSchema,
    UpdateBannerSchema,
)
from quickcart.config.cache_config import cache_config
from quickcart.config.constants import CacheKeys, Collections
from quickcart.database.models import Banner
from quickcart.shared.cache_invalidation import CacheInvalidationManager
from quickcart.shared.error_handler import ErrorHandler, handle_service_errors
from quickcart.shared.exceptions import ResourceNotFoundException
from quickcart.shared.performance_utils import Listing, execute_with_timeout, read_through
from quickcart.shared.validation import require_object_id


class BannerService:
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

    async def list_active_banners(self) -> Listing:
        """Storefront banners, cached as one family listing"""
        return await read_through(
            self._cache,
            CacheKeys.BANNERS.value,
            cache_config.get_ttl(Collections.BANNERS.value),
            self._load_active_banners,
        )

    async def _load_active_banners(self) -> List[Dict[str, Any]]:
        async with self._session_factory() as session:
            result = await execute_with_timeout(
                session,
                select(Banner).where(Banner.is_active.is_(True)).order_by(Banner.order),
                self._query_timeout,
            )
            return [
                BannerSchema.model_validate(banner).model_dump(mode="json")
                for banner in result.scalars().all()
            ]

    @handle_service_errors("retrieving all banners")
    async def list_all_banners(self) -> List[BannerSchema]:
        """Admin listing including inactive banners; never cached"""
        async with self._session_factory() as session:
            result = await session.execute(select(Banner).order_by(Banner.order))
            return [BannerSchema.model_validate(b) for b in result.scalars().all()]

    @handle_service_errors("retrieving banner")
    async def get_banner(self, banner_id: str) -> BannerSchema:
        require_object_id(banner_id, "banner ID")
        async with self._session_factory() as session:
            banner = await session.get(Banner, banner_id)
            if not banner:
                raise ResourceNotFoundException(detail="Banner not found")
            return BannerSchema.model_validate(banner)

    @handle_service_errors("creating banner")
    async def create_banner(self, banner_data: CreateBannerSchema) -> BannerSchema:
        async with self._session_factory() as session:
            banner = Banner(**banner_data.model_dump(mode="json"))
            session.add(banner)
            await session.commit()
            await session.refresh(banner)

        self._invalidation.invalidate_family(Collections.BANNERS)
        return BannerSchema.model_validate(banner)

    @handle_service_errors("updating banner")
    async def update_banner(
        self, banner_id: str, banner_data: UpdateBannerSchema
    ) -> BannerSchema:
        require_object_id(banner_id, "banner ID")
        async with self._session_factory() as session:
            banner = await session.get(Banner, banner_id)
            if not banner:
                raise ResourceNotFoundException(detail="Banner not found")

            for field, value in banner_data.model_dump(mode="json").items():
                setattr(banner, field, value)
            await session.commit()
            await session.refresh(banner)

        self._invalidation.invalidate_family(Collections.BANNERS)
        return BannerSchema.model_validate(banner)

    @handle_service_errors("patching banner")
    async def patch_banner(self, banner_id: str, banner_data: PatchBannerSchema) -> BannerSchema:
        """Toggle visibility or move a banner without touching its content"""
        require_object_id(banner_id, "banner ID")
        async with self._session_factory() as session:
            banner = await session.get(Banner, banner_id)
            if not banner:
                raise ResourceNotFoundException(detail="Banner not found")

            for field, value in banner_data.model_dump(exclude_none=True).items():
                setattr(banner, field, value)
            await session.commit()
            await session.refresh(banner)

        self._invalidation.invalidate_family(Collections.BANNERS)
        return BannerSchema.model_validate(banner)

    @handle_service_errors("deleting banner")
    async def delete_banner(self, banner_id: str) -> None:
        require_object_id(banner_id, "banner ID")
        async with self._session_factory() as session:
            banner = await session.get(Banner, banner_id)
            if not banner:
                raise ResourceNotFoundException(detail="Banner not found")
            await session.delete(banner)
            await session.commit()

        self._invalidation.invalidate_family(Collections.BANNERS)
