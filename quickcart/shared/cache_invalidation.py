"""
Resource-family cache invalidation for the catalog
"""

from typing import Any, Dict, List, Optional

from quickcart.config.constants import CacheKeys, Collections
from quickcart.shared.core_cache import CacheStore
from quickcart.shared.utils import get_logger

logger = get_logger(__name__)


# Every cache key a resource family owns
FAMILY_KEYS: Dict[Collections, List[CacheKeys]] = {
    Collections.CATEGORIES: [CacheKeys.CATEGORIES],
    Collections.PRODUCTS: [CacheKeys.PRODUCTS_ALL, CacheKeys.PRODUCTS_FEATURED],
    Collections.BANNERS: [CacheKeys.BANNERS],
}

# Families whose cached listings embed data owned by the key family
FAMILY_DEPENDENCIES: Dict[Collections, List[Collections]] = {
    # category listings carry product counts
    Collections.PRODUCTS: [Collections.CATEGORIES],
    # product listings carry category name and slug
    Collections.CATEGORIES: [Collections.PRODUCTS],
    Collections.BANNERS: [],
}


class CacheInvalidationManager:
    """Invalidates the enumerated keys of a resource family and its dependents"""

    def __init__(self, cache: CacheStore):
        self.cache = cache
        self._family_keys = FAMILY_KEYS
        self._dependency_map = FAMILY_DEPENDENCIES

    def keys_for(self, family: Collections, include_dependencies: bool = True) -> List[str]:
        families = [family]
        if include_dependencies:
            families.extend(self._dependency_map.get(family, []))

        keys: List[str] = []
        for name in families:
            for key in self._family_keys.get(name, []):
                if key.value not in keys:
                    keys.append(key.value)
        return keys

    def invalidate_family(
        self, family: Collections, include_dependencies: bool = True
    ) -> int:
        """Main entry point for catalog cache invalidation"""
        keys = self.keys_for(family, include_dependencies)
        if not keys:
            logger.warning(f"No cache keys registered for family: {family.value}")
            return 0

        deleted = sum(1 for key in keys if self.cache.invalidate(key))
        logger.info(
            f"Invalidated family '{family.value}': {deleted} of {len(keys)} keys were cached"
        )
        return deleted

    # Convenience methods for common operations
    def invalidate_categories(self) -> int:
        return self.invalidate_family(Collections.CATEGORIES)

    def invalidate_products(self) -> int:
        return self.invalidate_family(Collections.PRODUCTS)

    def invalidate_banners(self) -> int:
        return self.invalidate_family(Collections.BANNERS)

    def get_cache_stats(self) -> Dict[str, Any]:
        return {
            "family_keys": {
                family.value: [key.value for key in keys]
                for family, keys in self._family_keys.items()
            },
            "dependency_map": {
                family.value: [dep.value for dep in deps]
                for family, deps in self._dependency_map.items()
            },
            "store": self.cache.get_cache_stats(),
        }
