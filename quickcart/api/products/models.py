from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from quickcart.config.constants import TimeSlot


class ProductCategorySchema(BaseModel):
    id: str
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class ProductSchema(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    category_id: str
    price: float
    original_price: Optional[float] = None
    discount: Optional[int] = None
    unit: str
    stock: int = 0
    is_active: bool = True
    is_featured: bool = False
    images: List[str] = []  # First image is primary
    tags: List[str] = []
    time_slots: List[str] = []
    delivery_time: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Populated for listings; null when the category no longer exists
    category: Optional[ProductCategorySchema] = None

    model_config = ConfigDict(from_attributes=True)


class CreateProductSchema(BaseModel):
    name: str = Field(..., min_length=1, examples=["Potato Chips"])
    description: Optional[str] = None
    category_id: str = Field(..., examples=["65f1c2a9e4b0a1b2c3d4e5f6"])
    price: float = Field(..., ge=0, examples=[50])
    original_price: Optional[float] = Field(None, ge=0, examples=[60])
    unit: Optional[str] = Field(None, examples=["200 g"])
    stock: int = Field(0, ge=0)
    is_active: bool = True
    is_featured: bool = False
    images: List[str] = []
    tags: List[str] = []
    time_slots: Optional[List[TimeSlot]] = None
    delivery_time: Optional[int] = Field(None, gt=0)


class UpdateProductSchema(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category_id: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    time_slots: Optional[List[TimeSlot]] = None
    delivery_time: Optional[int] = Field(None, gt=0)


class BulkProductUpdates(BaseModel):
    time_slots: Optional[List[TimeSlot]] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None


class BulkUpdateProductsSchema(BaseModel):
    product_ids: List[str] = []
    updates: BulkProductUpdates = BulkProductUpdates()


class BulkUpdateResultSchema(BaseModel):
    message: str
    matched_count: int
    modified_count: int


class ProductSuggestionSchema(BaseModel):
    id: str
    name: str
    images: List[str] = []
    price: float
    unit: str

    model_config = ConfigDict(from_attributes=True)
