from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from quickcart.api.addresses.models import (
    AddressSchema,
    CreateAddressSchema,
    UpdateAddressSchema,
)
from quickcart.api.addresses.service import AddressService
from quickcart.core.responses import json_response
from quickcart.dependencies.services import get_address_service

addresses_router = APIRouter(prefix="/addresses", tags=["Addresses"])


@addresses_router.get(
    "", summary="List a user's addresses, default first", response_model=List[AddressSchema]
)
async def list_addresses(
    user_id: Optional[str] = Query(None, description="Owner of the addresses"),
    address_service: AddressService = Depends(get_address_service),
):
    addresses = await address_service.list_addresses(user_id)
    return json_response([a.model_dump(mode="json") for a in addresses])


@addresses_router.post(
    "",
    summary="Add an address",
    response_model=AddressSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_address(
    payload: CreateAddressSchema,
    address_service: AddressService = Depends(get_address_service),
):
    address = await address_service.create_address(payload)
    return json_response(address.model_dump(mode="json"), status_code=status.HTTP_201_CREATED)


@addresses_router.get("/{id}", summary="Get an address", response_model=AddressSchema)
async def get_address(
    id: str, address_service: AddressService = Depends(get_address_service)
):
    address = await address_service.get_address(id)
    return json_response(address.model_dump(mode="json"))


@addresses_router.put("/{id}", summary="Update an address", response_model=AddressSchema)
async def update_address(
    id: str,
    payload: UpdateAddressSchema,
    address_service: AddressService = Depends(get_address_service),
):
    address = await address_service.update_address(id, payload)
    return json_response(address.model_dump(mode="json"))


@addresses_router.delete("/{id}", summary="Delete an address")
async def delete_address(
    id: str, address_service: AddressService = Depends(get_address_service)
):
    await address_service.delete_address(id)
    return json_response({"id": id, "message": "Address deleted successfully"})
