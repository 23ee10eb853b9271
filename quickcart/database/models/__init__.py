# Import all models to ensure they are registered with SQLAlchemy

from .address import Address
from .banner import Banner
from .category import Category
from .inventory import InventorySnapshot, InventoryUploadLog
from .product import Product

__all__ = [
    "Address",
    "Banner",
    "Category",
    "InventorySnapshot",
    "InventoryUploadLog",
    "Product",
]
