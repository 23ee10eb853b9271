from typing import List

from fastapi import APIRouter, Depends, status

from quickcart.api.banners.models import (
    BannerSchema,
    CreateBannerSchema,
    PatchBannerSchema,
    UpdateBannerSchema,
)
from quickcart.api.banners.service import BannerService
from quickcart.core.responses import degraded_listing_response, json_response
from quickcart.dependencies.services import get_banner_service

banners_router = APIRouter(prefix="/banners", tags=["Banners"])
admin_banners_router = APIRouter(prefix="/admin/banners", tags=["Admin"])


@banners_router.get(
    "", summary="List active banners in display order", response_model=List[BannerSchema]
)
async def list_banners(banner_service: BannerService = Depends(get_banner_service)):
    listing = await banner_service.list_active_banners()
    if listing.degraded:
        return degraded_listing_response()
    return json_response(listing.items, cache_state=listing.cache_state)


@banners_router.get("/{id}", summary="Get a banner", response_model=BannerSchema)
async def get_banner(id: str, banner_service: BannerService = Depends(get_banner_service)):
    banner = await banner_service.get_banner(id)
    return json_response(banner.model_dump(mode="json"))


@banners_router.post(
    "",
    summary="Create a banner",
    response_model=BannerSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_banner(
    payload: CreateBannerSchema,
    banner_service: BannerService = Depends(get_banner_service),
):
    banner = await banner_service.create_banner(payload)
    return json_response(banner.model_dump(mode="json"), status_code=status.HTTP_201_CREATED)


@banners_router.put("/{id}", summary="Replace a banner", response_model=BannerSchema)
async def update_banner(
    id: str,
    payload: UpdateBannerSchema,
    banner_service: BannerService = Depends(get_banner_service),
):
    banner = await banner_service.update_banner(id, payload)
    return json_response(banner.model_dump(mode="json"))


@banners_router.patch(
    "/{id}", summary="Toggle or reorder a banner", response_model=BannerSchema
)
async def patch_banner(
    id: str,
    payload: PatchBannerSchema,
    banner_service: BannerService = Depends(get_banner_service),
):
    banner = await banner_service.patch_banner(id, payload)
    return json_response(banner.model_dump(mode="json"))


@banners_router.delete("/{id}", summary="Delete a banner")
async def delete_banner(id: str, banner_service: BannerService = Depends(get_banner_service)):
    await banner_service.delete_banner(id)
    return json_response({"id": id, "message": "Banner deleted successfully"})


@admin_banners_router.get(
    "", summary="List every banner including inactive ones", response_model=List[BannerSchema]
)
async def list_all_banners(banner_service: BannerService = Depends(get_banner_service)):
    banners = await banner_service.list_all_banners()
    return json_response([b.model_dump(mode="json") for b in banners])
