"""
Dependencies resolving the collaborators assembled in create_app.
"""

from fastapi import Request

from quickcart.api.addresses.service import AddressService
from quickcart.api.banners.service import BannerService
from quickcart.api.categories.service import CategoryService
from quickcart.api.inventory.service import InventoryService
from quickcart.api.products.service import ProductService
from quickcart.shared.cache_invalidation import CacheInvalidationManager
from quickcart.shared.core_cache import CacheStore


def get_cache(request: Request) -> CacheStore:
    return request.app.state.cache


def get_cache_invalidation(request: Request) -> CacheInvalidationManager:
    return request.app.state.cache_invalidation


def get_category_service(request: Request) -> CategoryService:
    return request.app.state.category_service


def get_product_service(request: Request) -> ProductService:
    return request.app.state.product_service


def get_banner_service(request: Request) -> BannerService:
    return request.app.state.banner_service


def get_address_service(request: Request) -> AddressService:
    return request.app.state.address_service


def get_inventory_service(request: Request) -> InventoryService:
    return request.app.state.inventory_service
