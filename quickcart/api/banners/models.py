from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from quickcart.config.constants import BannerType


class BannerSchema(BaseModel):
    id: str
    title: str
    subtitle: Optional[str] = None
    image: Optional[str] = None
    link: Optional[str] = None
    cta_text: Optional[str] = None
    type: str = BannerType.PROMOTIONAL.value
    order: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CreateBannerSchema(BaseModel):
    title: str = Field(..., min_length=1, examples=["Fresh fruits, delivered in 10 minutes"])
    subtitle: Optional[str] = None
    image: Optional[str] = None
    link: Optional[str] = None
    cta_text: Optional[str] = Field(None, examples=["Shop now"])
    type: BannerType = BannerType.PROMOTIONAL
    order: int = 0
    is_active: bool = True


class UpdateBannerSchema(CreateBannerSchema):
    """Full replacement of a banner's editable fields"""


class PatchBannerSchema(BaseModel):
    is_active: Optional[bool] = None
    order: Optional[int] = None
