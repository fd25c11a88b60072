from __future__ import annotations

from typing import Any, Iterable, Mapping

import pydantic

from stockwatch.core.constants import NAME_MAX_LENGTH
from stockwatch.core.errors import ValidationError
from stockwatch.core.records import InventoryRecord
from stockwatch.schemas.item import ItemBase, ItemCreate, QuantityUpdate

_BLANK_MEANS_MISSING = ("name", "quantity", "category", "low_stock_threshold")

_FIELD_ORDER = ("name", "quantity", "low_stock_threshold", "category", "description", "barcode")

_NUMBER_ERRORS = {"int_parsing", "int_type", "int_from_float"}

_REASONS = {
    ("name", "missing"): "Product name is required",
    ("name", "string_too_short"): "Product name is required",
    ("name", "string_too_long"): (
        "Product name is too long (max {} characters)".format(NAME_MAX_LENGTH)
    ),
    ("quantity", "missing"): "Quantity is required",
    ("quantity", "greater_than_equal"): "Quantity cannot be negative",
    ("quantity", "less_than_equal"): "Quantity is too large",
    ("low_stock_threshold", "greater_than_equal"): "Threshold cannot be negative",
    ("low_stock_threshold", "less_than_equal"): "Threshold is too large",
    ("category", "missing"): "Please select a category",
    ("category", "string_too_short"): "Please select a category",
    ("delta", "greater_than_equal"): "Adjustment is too large",
    ("delta", "less_than_equal"): "Adjustment is too large",
}


def _prepare(data: Mapping[str, Any]) -> dict:
    prepared = {}
    for key, value in data.items():
        if isinstance(value, str):
            value = value.strip()
            if not value and key in _BLANK_MEANS_MISSING:
                continue
        if value is None and key in _BLANK_MEANS_MISSING:
            continue
        prepared[key] = value
    return prepared


def _reason_for(field: str, error_type: str, default: str) -> str:
    if error_type in _NUMBER_ERRORS:
        return "Please enter a valid number"
    return _REASONS.get((field, error_type), default)


def validation_error_from(raw_errors: Iterable[Mapping[str, Any]]) -> ValidationError:
    """Collapse pydantic-style error entries into one ``ValidationError``.

    Each field keeps its first message; the reported field is the earliest
    one in form order.
    """
    errors: dict[str, str] = {}
    for error in raw_errors:
        loc = error.get("loc") or ("__root__",)
        field = str(loc[0])
        if field in errors:
            continue
        errors[field] = _reason_for(field, error.get("type", ""), error.get("msg", "Invalid value"))

    ordered = sorted(
        errors,
        key=lambda name: _FIELD_ORDER.index(name) if name in _FIELD_ORDER else len(_FIELD_ORDER),
    )
    if not ordered:
        return ValidationError("__root__", "Invalid request")
    first = ordered[0]
    return ValidationError(first, errors[first], errors={name: errors[name] for name in ordered})


def _raise_from(exc: pydantic.ValidationError) -> None:
    raise validation_error_from(exc.errors()) from exc


def validate_item_payload(data: Mapping[str, Any], schema: type[ItemBase] = ItemCreate) -> ItemBase:
    """Apply the create/update form rules to raw input.

    Blank text for a required field counts as missing; a blank threshold
    falls back to the default.
    """
    try:
        return schema.model_validate(_prepare(data))
    except pydantic.ValidationError as exc:
        _raise_from(exc)


def validate_quantity(value: Any) -> int:
    data = {"quantity": value}
    try:
        return QuantityUpdate.model_validate(_prepare(data)).quantity
    except pydantic.ValidationError as exc:
        _raise_from(exc)


def record_from_payload(payload: ItemBase, *, item_id: int = -1) -> InventoryRecord:
    return InventoryRecord(id=item_id, **payload.model_dump())


__all__ = [
    "record_from_payload",
    "validate_item_payload",
    "validate_quantity",
    "validation_error_from",
]
