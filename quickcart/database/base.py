from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from quickcart.shared.utils import new_object_id, utcnow


class Base(DeclarativeBase):
    pass


class DocumentMixin:
    """24-hex string identifier plus created/updated timestamps"""

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
