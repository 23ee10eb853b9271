from typing import List

from fastapi import APIRouter, Depends, status

from quickcart.api.categories.models import (
    CategoryPrioritySchema,
    CategorySchema,
    CreateCategorySchema,
    UpdateCategorySchema,
)
from quickcart.api.categories.service import CategoryService
from quickcart.core.responses import degraded_listing_response, json_response
from quickcart.dependencies.services import get_category_service

categories_router = APIRouter(prefix="/categories", tags=["Categories"])


@categories_router.get(
    "",
    summary="List categories by priority with product counts",
    response_model=List[CategorySchema],
)
async def list_categories(
    category_service: CategoryService = Depends(get_category_service),
):
    listing = await category_service.list_categories()
    if listing.degraded:
        return degraded_listing_response()
    return json_response(listing.items, cache_state=listing.cache_state)


@categories_router.get(
    "/{id}", summary="Get a category by ID", response_model=CategorySchema
)
async def get_category(
    id: str, category_service: CategoryService = Depends(get_category_service)
):
    category = await category_service.get_category(id)
    return json_response(category.model_dump(mode="json"))


@categories_router.post(
    "",
    summary="Create a category",
    response_model=CategorySchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    payload: CreateCategorySchema,
    category_service: CategoryService = Depends(get_category_service),
):
    category = await category_service.create_category(payload)
    return json_response(
        category.model_dump(mode="json"), status_code=status.HTTP_201_CREATED
    )


@categories_router.put(
    "/{id}", summary="Update a category", response_model=CategorySchema
)
@categories_router.patch(
    "/{id}", summary="Partially update a category", response_model=CategorySchema
)
async def update_category(
    id: str,
    payload: UpdateCategorySchema,
    category_service: CategoryService = Depends(get_category_service),
):
    category = await category_service.update_category(id, payload)
    return json_response(category.model_dump(mode="json"))


@categories_router.patch(
    "/{id}/priority",
    summary="Move a category in the storefront ordering",
    response_model=CategorySchema,
)
async def update_category_priority(
    id: str,
    payload: CategoryPrioritySchema,
    category_service: CategoryService = Depends(get_category_service),
):
    category = await category_service.update_priority(id, payload)
    return json_response(category.model_dump(mode="json"))


@categories_router.delete("/{id}", summary="Delete a category")
async def delete_category(
    id: str, category_service: CategoryService = Depends(get_category_service)
):
    await category_service.delete_category(id)
    return json_response({"id": id, "message": "Category deleted successfully"})
