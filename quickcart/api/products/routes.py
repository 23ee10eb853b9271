from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from quickcart.api.products.models import (
    BulkUpdateProductsSchema,
    BulkUpdateResultSchema,
    CreateProductSchema,
    ProductSchema,
    ProductSuggestionSchema,
    UpdateProductSchema,
)
from quickcart.api.products.service import ProductService
from quickcart.core.responses import degraded_listing_response, json_response
from quickcart.dependencies.services import get_product_service

products_router = APIRouter(prefix="/products", tags=["Products"])


@products_router.get(
    "",
    summary="List active products",
    response_model=List[ProductSchema],
)
async def list_products(
    category_id: Optional[str] = Query(None, description="Filter by category ID"),
    category: Optional[str] = Query(None, description="Filter by category slug"),
    search: Optional[str] = Query(None, description="Match name, description or tag"),
    featured: bool = Query(False, description="Only featured products"),
    product_service: ProductService = Depends(get_product_service),
):
    listing = await product_service.list_products(
        category_id=category_id,
        category_slug=category,
        search=search,
        featured=featured,
    )
    if listing.degraded:
        return degraded_listing_response()
    return json_response(listing.items, cache_state=listing.cache_state)


@products_router.get(
    "/suggestions",
    summary="Search-as-you-type product suggestions",
    response_model=List[ProductSuggestionSchema],
)
async def suggest_products(
    q: Optional[str] = Query(None, description="Search term"),
    product_service: ProductService = Depends(get_product_service),
):
    suggestions = await product_service.suggest_products(q)
    return json_response([s.model_dump(mode="json") for s in suggestions])


@products_router.patch(
    "/bulk-update",
    summary="Update time slots or flags of many products",
    response_model=BulkUpdateResultSchema,
)
async def bulk_update_products(
    payload: BulkUpdateProductsSchema,
    product_service: ProductService = Depends(get_product_service),
):
    result = await product_service.bulk_update(payload)
    return json_response(result.model_dump(mode="json"))


@products_router.get(
    "/{id}", summary="Get a product by ID or slug", response_model=ProductSchema
)
async def get_product(
    id: str, product_service: ProductService = Depends(get_product_service)
):
    product = await product_service.get_product(id)
    return json_response(product.model_dump(mode="json"))


@products_router.post(
    "",
    summary="Create a product",
    response_model=ProductSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    payload: CreateProductSchema,
    product_service: ProductService = Depends(get_product_service),
):
    product = await product_service.create_product(payload)
    return json_response(
        product.model_dump(mode="json"), status_code=status.HTTP_201_CREATED
    )


@products_router.put("/{id}", summary="Update a product", response_model=ProductSchema)
@products_router.patch(
    "/{id}", summary="Partially update a product", response_model=ProductSchema
)
async def update_product(
    id: str,
    payload: UpdateProductSchema,
    product_service: ProductService = Depends(get_product_service),
):
    product = await product_service.update_product(id, payload)
    return json_response(product.model_dump(mode="json"))


@products_router.delete("/{id}", summary="Delete a product")
async def delete_product(
    id: str, product_service: ProductService = Depends(get_product_service)
):
    await product_service.delete_product(id)
    return json_response({"id": id, "message": "Product deleted"})
