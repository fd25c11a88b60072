from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String

from stockwatch.core.constants import DEFAULT_LOW_STOCK_THRESHOLD
from stockwatch.database.base import Base


def _utc_now():
    return datetime.now(timezone.utc)


class InventoryItem(Base):
    __tablename__ = "inventory"

    id = Column("item_id", Integer, primary_key=True, autoincrement=True)

    name = Column("item_name", String, nullable=False)
    description = Column("item_description", String, nullable=False, default="")
    category = Column("item_category", String, nullable=False, default="")

    quantity = Column("item_quantity", Integer, nullable=False, default=0)
    low_stock_threshold = Column(
        Integer,
        nullable=False,
        default=DEFAULT_LOW_STOCK_THRESHOLD,
    )
    barcode = Column(String, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        onupdate=_utc_now,
    )

    __table_args__ = (
        CheckConstraint("item_quantity >= 0", name="ck_inventory_quantity_non_negative"),
        CheckConstraint("low_stock_threshold >= 0", name="ck_inventory_threshold_non_negative"),
        Index("idx_inventory_name", "item_name"),
        Index("idx_inventory_quantity", "item_quantity"),
    )


__all__ = ["InventoryItem"]
