from typing import Optional

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from quickcart.config.constants import DEFAULT_ADDRESS_LABEL
from quickcart.database.base import Base, DocumentMixin


class Address(DocumentMixin, Base):
    __tablename__ = "addresses"
    __table_args__ = (Index("idx_addresses_user_default", "user_id", "is_default"),)

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    label: Mapped[str] = mapped_column(String(50), nullable=False, default=DEFAULT_ADDRESS_LABEL)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    street: Mapped[str] = mapped_column(String(300), nullable=False)
    landmark: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    pincode: Mapped[str] = mapped_column(String(12), nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
