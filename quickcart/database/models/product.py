from typing import List, Optional

from sqlalchemy import JSON, Boolean, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from quickcart.config.constants import DEFAULT_DELIVERY_TIME, DEFAULT_PRODUCT_UNIT, TimeSlot
from quickcart.database.base import Base, DocumentMixin


def _default_time_slots() -> List[str]:
    return [TimeSlot.ALL_DAY.value]


class Product(DocumentMixin, Base):
    __tablename__ = "products"
    __table_args__ = (
        Index("idx_products_active_created", "is_active", "created_at"),
        Index("idx_products_featured", "is_featured"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(300), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Plain reference: categories may be deleted independently of their products
    category_id: Mapped[str] = mapped_column(String(24), nullable=False, index=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    original_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    discount: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    unit: Mapped[str] = mapped_column(String(50), nullable=False, default=DEFAULT_PRODUCT_UNIT)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    time_slots: Mapped[List[str]] = mapped_column(
        JSON, nullable=False, default=_default_time_slots
    )
    delivery_time: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_DELIVERY_TIME
    )
