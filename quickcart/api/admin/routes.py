from fastapi import APIRouter, Depends

from quickcart.config.cache_config import cache_config
from quickcart.config.constants import Collections
from quickcart.core.responses import json_response
from quickcart.dependencies.services import get_cache, get_cache_invalidation
from quickcart.shared.cache_invalidation import CacheInvalidationManager
from quickcart.shared.core_cache import CacheStore
from quickcart.shared.exceptions import ValidationException

admin_cache_router = APIRouter(prefix="/admin/cache", tags=["Admin"])

INVALIDATABLE_FAMILIES = {
    Collections.CATEGORIES.value: Collections.CATEGORIES,
    Collections.PRODUCTS.value: Collections.PRODUCTS,
    Collections.BANNERS.value: Collections.BANNERS,
}


@admin_cache_router.get("", summary="Inspect the listing cache")
async def get_cache_stats(
    invalidation: CacheInvalidationManager = Depends(get_cache_invalidation),
):
    stats = invalidation.get_cache_stats()
    stats["ttl"] = cache_config.get_all_settings()
    return json_response(stats)


@admin_cache_router.delete("/{family}", summary="Invalidate one resource family")
async def invalidate_family(
    family: str,
    invalidation: CacheInvalidationManager = Depends(get_cache_invalidation),
):
    target = INVALIDATABLE_FAMILIES.get(family)
    if target is None:
        raise ValidationException(
            detail=f"Unknown cache family: {family}. Expected one of {sorted(INVALIDATABLE_FAMILIES)}"
        )
    deleted = invalidation.invalidate_family(target)
    return json_response({"family": family, "invalidated": deleted})


@admin_cache_router.delete("", summary="Drop every cached listing")
async def clear_cache(cache: CacheStore = Depends(get_cache)):
    cache.clear()
    return json_response({"message": "Cache cleared"})
