"""Request -> store call -> result.

Each command validates its input, performs one store operation and returns
a ``CommandResult``. Domain errors never escape; the caller decides what to
do with a ``not_found`` or ``failed`` result.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from stockwatch.core.errors import (
    InventoryError,
    NegativeQuantityRejected,
    NotFound,
    StorageError,
    ValidationError,
)
from stockwatch.core.records import InventoryRecord
from stockwatch.core.validation import record_from_payload, validate_item_payload, validate_quantity
from stockwatch.schemas.item import ItemUpdate

logger = logging.getLogger(__name__)

OK = "ok"
NOT_FOUND = "not_found"
INVALID = "invalid"
REJECTED = "rejected"
FAILED = "failed"


@dataclass
class CommandResult:
    status: str
    record: Optional[InventoryRecord] = None
    error: Optional[InventoryError] = None

    @property
    def ok(self) -> bool:
        return self.status == OK

    @classmethod
    def from_error(cls, exc: InventoryError) -> "CommandResult":
        if isinstance(exc, ValidationError):
            return cls(INVALID, error=exc)
        if isinstance(exc, NotFound):
            return cls(NOT_FOUND, error=exc)
        if isinstance(exc, NegativeQuantityRejected):
            return cls(REJECTED, error=exc)
        return cls(FAILED, error=exc)


def _payload_dict(payload) -> Mapping[str, Any]:
    if hasattr(payload, "model_dump"):
        return payload.model_dump()
    return payload


def create_item(store, payload) -> CommandResult:
    try:
        validated = validate_item_payload(_payload_dict(payload))
        item_id = store.create(record_from_payload(validated))
        return CommandResult(OK, record=store.get(item_id))
    except InventoryError as exc:
        return CommandResult.from_error(exc)


def update_item(store, item_id: int, payload) -> CommandResult:
    try:
        validated = validate_item_payload(_payload_dict(payload), ItemUpdate)
        rows = store.update(record_from_payload(validated, item_id=item_id))
        if not rows:
            return CommandResult(NOT_FOUND, error=NotFound(item_id))
        return CommandResult(OK, record=store.get(item_id))
    except InventoryError as exc:
        return CommandResult.from_error(exc)


def change_quantity(store, item_id: int, new_quantity, notifier=None) -> CommandResult:
    try:
        quantity = validate_quantity(new_quantity)
        before = store.get(item_id)
        if not store.update_quantity(item_id, quantity):
            return CommandResult(NOT_FOUND, error=NotFound(item_id))
        after = before.with_quantity(quantity)
    except InventoryError as exc:
        return CommandResult.from_error(exc)

    if notifier is not None:
        notifier.on_quantity_changed(before, after)
    return CommandResult(OK, record=after)


def adjust_item_quantity(store, item_id: int, delta: int, notifier=None) -> CommandResult:
    try:
        before = store.get(item_id)
        validate_quantity(before.adjusted(delta).quantity)
        after = store.adjust_quantity(item_id, delta)
    except InventoryError as exc:
        return CommandResult.from_error(exc)

    if notifier is not None:
        notifier.on_quantity_changed(before, after)
    return CommandResult(OK, record=after)


def delete_item(store, item_id: int) -> CommandResult:
    try:
        rows = store.delete(item_id)
    except StorageError as exc:
        return CommandResult.from_error(exc)
    if not rows:
        return CommandResult(NOT_FOUND, error=NotFound(item_id))
    return CommandResult(OK)


__all__ = [
    "CommandResult",
    "FAILED",
    "INVALID",
    "NOT_FOUND",
    "OK",
    "REJECTED",
    "adjust_item_quantity",
    "change_quantity",
    "create_item",
    "delete_item",
    "update_item",
]
