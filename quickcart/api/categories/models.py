from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategorySchema(BaseModel):
    id: str = Field(..., examples=["65f1c2a9e4b0a1b2c3d4e5f6"])
    name: str = Field(..., min_length=1, examples=["Snacks"])
    slug: str = Field(..., examples=["snacks"])
    description: Optional[str] = Field("", examples=["Chips, cookies, and other snacks"])
    image: Optional[str] = Field("", examples=["https://example.com/images/snacks.png"])
    order: int = 0
    priority: int = 0
    is_active: bool = True
    product_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CreateCategorySchema(BaseModel):
    name: str = Field(..., min_length=1, examples=["Snacks"])
    description: Optional[str] = Field(
        None, examples=["Chips, cookies, and other snacks"]
    )
    image: Optional[str] = Field(
        None, examples=["https://example.com/images/snacks.png"]
    )
    order: int = Field(0, ge=0, examples=[2])


class UpdateCategorySchema(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class CategoryPrioritySchema(BaseModel):
    priority: int = Field(..., ge=0, examples=[3])
