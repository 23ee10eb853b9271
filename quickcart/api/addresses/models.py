from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from quickcart.config.constants import DEFAULT_ADDRESS_LABEL


class AddressSchema(BaseModel):
    id: str
    user_id: str
    label: str
    name: Optional[str] = None
    phone: Optional[str] = None
    street: str
    landmark: Optional[str] = None
    city: str
    pincode: str
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CreateAddressSchema(BaseModel):
    user_id: Optional[str] = None
    label: Optional[str] = Field(None, examples=[DEFAULT_ADDRESS_LABEL])
    name: Optional[str] = None
    phone: Optional[str] = None
    street: Optional[str] = None
    landmark: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None
    is_default: bool = False


class UpdateAddressSchema(BaseModel):
    label: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    street: Optional[str] = None
    landmark: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None
    is_default: bool = False
