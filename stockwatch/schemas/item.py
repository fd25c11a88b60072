from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stockwatch.core.constants import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    NAME_MAX_LENGTH,
    QUANTITY_MAX,
    THRESHOLD_MAX,
)


class ItemBase(BaseModel):
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    description: str = ""
    category: str = Field(min_length=1)
    quantity: int = Field(ge=0, le=QUANTITY_MAX)
    low_stock_threshold: int = Field(
        default=DEFAULT_LOW_STOCK_THRESHOLD,
        ge=0,
        le=THRESHOLD_MAX,
    )
    barcode: str = ""

    @field_validator("name", "description", "category", "barcode", mode="before")
    @classmethod
    def _strip_text(cls, value):
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value


class ItemCreate(ItemBase):
    pass


class ItemUpdate(ItemBase):
    pass


class ItemRead(BaseModel):
    id: int
    name: str
    description: str
    category: str
    quantity: int
    low_stock_threshold: int
    barcode: str
    stock_status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class QuantityUpdate(BaseModel):
    quantity: int = Field(ge=0, le=QUANTITY_MAX)


class QuantityAdjust(BaseModel):
    delta: int = Field(ge=-QUANTITY_MAX, le=QUANTITY_MAX)


class InventoryStatsRead(BaseModel):
    total: int
    low: int
    critical: int

    model_config = ConfigDict(from_attributes=True)


class LowStockCheckRead(BaseModel):
    items: int
    sent: bool
    message: Optional[str] = None
