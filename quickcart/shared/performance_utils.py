"""
Performance utilities for database operations and caching.
"""
import asyncio
import time
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Awaitable, Callable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quickcart.config.constants import CacheState
from quickcart.shared.core_cache import CacheStore
from quickcart.shared.utils import get_logger

logger = get_logger(__name__)

# Failures a listing read degrades on instead of propagating
STORE_READ_ERRORS = (SQLAlchemyError, asyncio.TimeoutError, OSError)


@dataclass
class Listing:
    """Result of a listing read: the records and how they were obtained"""

    items: List[Any] = field(default_factory=list)
    cache_state: CacheState = CacheState.MISS
    degraded: bool = False


async def execute_with_timeout(session: AsyncSession, statement, timeout: float):
    """Run a statement, giving up once the query time budget is spent"""
    return await asyncio.wait_for(session.execute(statement), timeout=timeout)


async def read_through(
    cache: CacheStore,
    cache_key: str,
    ttl: float,
    loader: Callable[[], Awaitable[List[Any]]],
) -> Listing:
    """Serve cache_key from the cache, loading and caching it on a miss.

    A failed load yields an empty degraded listing and leaves the cache untouched.
    """
    cached = cache.get(cache_key)
    if cached is not None:
        return Listing(cached, CacheState.HIT)

    try:
        items = await loader()
    except STORE_READ_ERRORS as e:
        logger.warning(f"Listing '{cache_key}' degraded to empty result: {e!r}")
        return Listing([], CacheState.MISS, degraded=True)

    cache.set(cache_key, items, ttl)
    return Listing(items, CacheState.MISS)


async def read_uncached(loader: Callable[[], Awaitable[List[Any]]], label: str) -> Listing:
    """Run an ad-hoc listing query that never touches the cache"""
    try:
        items = await loader()
    except STORE_READ_ERRORS as e:
        logger.warning(f"Listing '{label}' degraded to empty result: {e!r}")
        return Listing([], CacheState.BYPASS, degraded=True)
    return Listing(items, CacheState.BYPASS)


def async_timer(operation_name: str):
    """Decorator to log operation timing for performance monitoring"""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = await func(*args, **kwargs)
                execution_time = time.time() - start_time
                if execution_time > 1.0:  # Log slow operations
                    logger.warning(f"Slow operation {operation_name}: {execution_time:.2f}s")
                else:
                    logger.debug(f"Operation {operation_name}: {execution_time:.3f}s")
                return result
            except Exception as e:
                execution_time = time.time() - start_time
                logger.error(f"Failed operation {operation_name} after {execution_time:.3f}s: {str(e)}")
                raise
        return wrapper
    return decorator
