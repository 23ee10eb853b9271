from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SnapshotCategorySchema(BaseModel):
    name: str
    slug: str


class SnapshotProduct(BaseModel):
    """One product as recorded inside a snapshot, in portable form"""

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    category: Optional[SnapshotCategorySchema] = None
    price: float
    original_price: Optional[float] = None
    discount: Optional[int] = None
    unit: Optional[str] = None
    stock: int = 0
    is_active: bool = True
    is_featured: bool = False
    images: List[str] = []
    tags: List[str] = []
    time_slots: List[str] = []
    delivery_time: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SnapshotSummarySchema(BaseModel):
    id: str
    name: str
    product_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CreateSnapshotSchema(BaseModel):
    name: Optional[str] = Field(None, examples=["Before Diwali price update"])


class CreateSnapshotResponse(BaseModel):
    success: bool = True
    snapshot: SnapshotSummarySchema


class RollbackRequestSchema(BaseModel):
    snapshot_id: Optional[str] = None


class RollbackStats(BaseModel):
    restored: int = 0
    created: int = 0
    errors: int = 0


class RollbackResultSchema(BaseModel):
    success: bool = True
    message: str
    stats: RollbackStats
    errors: Optional[List[str]] = None


class UploadStats(BaseModel):
    total: int = 0
    updated: int = 0
    created: int = 0
    errors: int = 0


class UploadResultSchema(BaseModel):
    success: bool = True
    message: str
    stats: UploadStats
    errors: Optional[List[str]] = None


class UploadLogSchema(BaseModel):
    id: str
    file_name: str
    snapshot_id: Optional[str] = None
    products_updated: int
    products_created: int
    products_deleted: int
    errors: Optional[List[str]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
