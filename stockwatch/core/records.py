from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from stockwatch.core.constants import DEFAULT_LOW_STOCK_THRESHOLD
from stockwatch.core.errors import NegativeQuantityRejected
from stockwatch.core.stock_rules import classify, needs_restock

UNSAVED_ID = -1


def _clean_text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(eq=False)
class InventoryRecord:
    """One stock item as seen by callers of the store.

    Text fields are trimmed and counts are clamped at zero on construction,
    so a record can never carry a negative quantity into the store.
    Records compare by ``id`` alone.
    """

    name: str = ""
    description: str = ""
    category: str = ""
    quantity: int = 0
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    barcode: str = ""
    id: int = UNSAVED_ID
    created_at: Optional[datetime] = field(default=None, repr=False)
    updated_at: Optional[datetime] = field(default=None, repr=False)

    def __post_init__(self):
        self.name = _clean_text(self.name)
        self.description = _clean_text(self.description)
        self.category = _clean_text(self.category)
        self.barcode = _clean_text(self.barcode)
        self.quantity = max(0, int(self.quantity))
        self.low_stock_threshold = max(0, int(self.low_stock_threshold))
        if self.id is None:
            self.id = UNSAVED_ID

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, InventoryRecord):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    @property
    def is_persisted(self) -> bool:
        return self.id != UNSAVED_ID

    @property
    def stock_status(self) -> str:
        return classify(self.quantity, self.low_stock_threshold)

    @property
    def needs_restock(self) -> bool:
        return needs_restock(self.quantity, self.low_stock_threshold)

    def adjusted(self, delta: int) -> "InventoryRecord":
        new_quantity = self.quantity + int(delta)
        if new_quantity < 0:
            raise NegativeQuantityRejected(self.id, new_quantity)
        return replace(self, quantity=new_quantity)

    def with_quantity(self, quantity: int) -> "InventoryRecord":
        return replace(self, quantity=quantity)

    def mutable_fields(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "quantity": self.quantity,
            "low_stock_threshold": self.low_stock_threshold,
            "barcode": self.barcode,
        }

    @classmethod
    def from_row(cls, row) -> "InventoryRecord":
        return cls(
            id=row.id,
            name=row.name,
            description=row.description,
            category=row.category,
            quantity=row.quantity,
            low_stock_threshold=row.low_stock_threshold,
            barcode=row.barcode,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


__all__ = ["InventoryRecord", "UNSAVED_ID"]
