from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from quickcart.database.base import Base
from quickcart.shared.utils import new_object_id, utcnow


class InventorySnapshot(Base):
    """Immutable point-in-time copy of the product catalog"""

    __tablename__ = "inventory_snapshots"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    products: Mapped[List[Any]] = mapped_column(JSON, nullable=False, default=list)
    product_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )


class InventoryUploadLog(Base):
    """Audit record for CSV imports and rollbacks"""

    __tablename__ = "inventory_upload_logs"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    snapshot_id: Mapped[Optional[str]] = mapped_column(String(24), nullable=True)
    products_updated: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    products_created: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    products_deleted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    errors: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
