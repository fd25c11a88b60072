from __future__ import annotations

from typing import Optional


class InventoryError(Exception):
    """Base class for errors raised by the inventory core."""


class ValidationError(InventoryError):
    def __init__(self, field: str, reason: str, *, errors: Optional[dict[str, str]] = None):
        super().__init__("{}: {}".format(field, reason))
        self.field = field
        self.reason = reason
        self.errors = dict(errors) if errors else {field: reason}

    def to_detail(self) -> dict:
        return {"field": self.field, "reason": self.reason, "errors": dict(self.errors)}


class NotFound(InventoryError):
    def __init__(self, item_id):
        super().__init__("Inventory item {} not found".format(item_id))
        self.item_id = item_id


class StorageError(InventoryError):
    pass


class NegativeQuantityRejected(InventoryError):
    def __init__(self, item_id, quantity: int):
        super().__init__(
            "Quantity {} for item {} would be negative".format(quantity, item_id)
        )
        self.item_id = item_id
        self.quantity = quantity


__all__ = [
    "InventoryError",
    "NegativeQuantityRejected",
    "NotFound",
    "StorageError",
    "ValidationError",
]
