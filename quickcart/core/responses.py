from typing import Any, Optional

from fastapi import status
from fastapi.responses import JSONResponse

from quickcart.config.cache_config import cache_config
from quickcart.config.constants import CACHE_HEADER, CacheState


def json_response(
    data: Any,
    status_code: int = status.HTTP_200_OK,
    cache_state: Optional[CacheState] = None,
):
    headers = {CACHE_HEADER: cache_state.value} if cache_state else None
    return JSONResponse(status_code=status_code, content=data, headers=headers)


def degraded_listing_response():
    """Empty listing served when the store cannot answer"""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=[],
        headers={"Cache-Control": f"public, max-age={cache_config.ERROR_MAX_AGE}"},
    )
