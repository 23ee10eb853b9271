"""
Cache configuration settings
Centralized TTL values for the catalog read-through cache
"""

import os
from typing import Any, Dict


class CacheConfig:
    """Cache configuration with environment variable overrides"""

    # Default TTL in seconds
    DEFAULT_TTL = int(os.getenv("CACHE_DEFAULT_TTL", "60"))  # 1 minute

    # Resource family TTL values
    CATEGORIES_TTL = int(os.getenv("CACHE_CATEGORIES_TTL", "300"))  # 5 minutes
    PRODUCTS_TTL = int(os.getenv("CACHE_PRODUCTS_TTL", "120"))  # 2 minutes
    BANNERS_TTL = int(os.getenv("CACHE_BANNERS_TTL", "600"))  # 10 minutes

    # Client-side cache hint sent with degraded (empty) listings
    ERROR_MAX_AGE = int(os.getenv("CACHE_ERROR_MAX_AGE", "10"))

    @classmethod
    def get_ttl(cls, family: str) -> int:
        """Get TTL for a resource family"""
        ttl_mapping = {
            "categories": cls.CATEGORIES_TTL,
            "products": cls.PRODUCTS_TTL,
            "banners": cls.BANNERS_TTL,
        }
        return ttl_mapping.get(family, cls.DEFAULT_TTL)

    @classmethod
    def get_all_settings(cls) -> Dict[str, Any]:
        """Get all cache settings for debugging/monitoring"""
        return {
            "ttl_settings": {
                "default": cls.DEFAULT_TTL,
                "categories": cls.CATEGORIES_TTL,
                "products": cls.PRODUCTS_TTL,
                "banners": cls.BANNERS_TTL,
            },
            "error_max_age": cls.ERROR_MAX_AGE,
        }


cache_config = CacheConfig()
