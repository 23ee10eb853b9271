import time

from fastapi import Request

from quickcart.shared.utils import get_logger

logger = get_logger(__name__)

# Requests slower than this are logged as warnings
SLOW_REQUEST_SECONDS = 1.0


async def add_process_time_header(request: Request, call_next):
    """Report handling time in X-Process-Time and log every request."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started

    response.headers["X-Process-Time"] = f"{elapsed:.4f}"
    cache_state = response.headers.get("X-Cache")
    summary = (
        f"{request.method} {request.url.path} -> {response.status_code} in {elapsed:.4f}s"
        + (f" (cache {cache_state})" if cache_state else "")
    )
    if elapsed > SLOW_REQUEST_SECONDS:
        logger.warning(f"Slow request: {summary}")
    else:
        logger.info(summary)
    return response
