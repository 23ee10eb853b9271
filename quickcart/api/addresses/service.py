from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quickcart.api.addresses.models import (
    AddressSchema,
    CreateAddressSchema,
    UpdateAddressSchema,
)
from quickcart.config.constants import DEFAULT_ADDRESS_LABEL
from quickcart.database.models import Address
from quickcart.shared.error_handler import ErrorHandler, handle_service_errors
from quickcart.shared.exceptions import ResourceNotFoundException, ValidationException
from quickcart.shared.utils import get_logger
from quickcart.shared.validation import require_object_id

logger = get_logger(__name__)


class AddressService:
    """Delivery addresses with at most one default per user"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._error_handler = ErrorHandler(__name__)
        self._session_factory = session_factory

    async def _clear_other_defaults(
        self, session: AsyncSession, user_id: str, keep_id: Optional[str] = None
    ) -> int:
        """Unset the default flag on the user's other addresses.

        Each record is committed on its own, so a crash part-way can leave the
        user with zero or several defaults; the next default assignment repairs it.
        """
        stmt = select(Address).where(Address.user_id == user_id, Address.is_default.is_(True))
        if keep_id:
            stmt = stmt.where(Address.id != keep_id)
        defaults = (await session.execute(stmt)).scalars().all()

        for address in defaults:
            address.is_default = False
            await session.commit()

        if defaults:
            logger.info(f"Cleared {len(defaults)} previous default address(es) for user {user_id}")
        return len(defaults)

    @handle_service_errors("listing addresses")
    async def list_addresses(self, user_id: Optional[str]) -> List[AddressSchema]:
        if not user_id:
            raise ValidationException(detail="User ID is required")
        async with self._session_factory() as session:
            result = await session.execute(
                select(Address)
                .where(Address.user_id == user_id)
                .order_by(Address.is_default.desc(), Address.created_at)
            )
            return [AddressSchema.model_validate(a) for a in result.scalars().all()]

    @handle_service_errors("retrieving address")
    async def get_address(self, address_id: str) -> AddressSchema:
        require_object_id(address_id, "address ID")
        async with self._session_factory() as session:
            address = await session.get(Address, address_id)
            if not address:
                raise ResourceNotFoundException(detail="Address not found")
            return AddressSchema.model_validate(address)

    @handle_service_errors("creating address")
    async def create_address(self, address_data: CreateAddressSchema) -> AddressSchema:
        if not all(
            (address_data.user_id, address_data.street, address_data.city, address_data.pincode)
        ):
            raise ValidationException(detail="Missing required fields")

        async with self._session_factory() as session:
            if address_data.is_default:
                await self._clear_other_defaults(session, address_data.user_id)

            address = Address(
                user_id=address_data.user_id,
                label=address_data.label or DEFAULT_ADDRESS_LABEL,
                name=address_data.name,
                phone=address_data.phone,
                street=address_data.street,
                landmark=address_data.landmark,
                city=address_data.city,
                pincode=address_data.pincode,
                is_default=address_data.is_default,
            )
            session.add(address)
            await session.commit()
            await session.refresh(address)
            return AddressSchema.model_validate(address)

    @handle_service_errors("updating address")
    async def update_address(
        self, address_id: str, address_data: UpdateAddressSchema
    ) -> AddressSchema:
        require_object_id(address_id, "address ID")
        if not all(
            (
                address_data.name,
                address_data.phone,
                address_data.street,
                address_data.city,
                address_data.pincode,
            )
        ):
            raise ValidationException(detail="Missing required fields")

        async with self._session_factory() as session:
            address = await session.get(Address, address_id)
            if not address:
                raise ResourceNotFoundException(detail="Address not found")

            if address_data.is_default:
                await self._clear_other_defaults(session, address.user_id, keep_id=address.id)

            address.label = address_data.label or DEFAULT_ADDRESS_LABEL
            address.name = address_data.name
            address.phone = address_data.phone
            address.street = address_data.street
            address.landmark = address_data.landmark or ""
            address.city = address_data.city
            address.pincode = address_data.pincode
            address.is_default = address_data.is_default
            await session.commit()
            await session.refresh(address)
            return AddressSchema.model_validate(address)

    @handle_service_errors("deleting address")
    async def delete_address(self, address_id: str) -> None:
        require_object_id(address_id, "address ID")
        async with self._session_factory() as session:
            address = await session.get(Address, address_id)
            if not address:
                raise ResourceNotFoundException(detail="Address not found")
            await session.delete(address)
            await session.commit()
