from typing import Optional

from sqlalchemy import Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from quickcart.database.base import Base, DocumentMixin


class Category(DocumentMixin, Base):
    __tablename__ = "categories"
    __table_args__ = (
        Index("idx_categories_priority", "priority"),
        Index("idx_categories_name", "name"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default="")
    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, default="")
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
