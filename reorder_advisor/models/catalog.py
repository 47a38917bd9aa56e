"""
Catalog item model.

``CatalogItem`` is the post-augmentation shape every record must reach before
it can be evaluated. Validation here is strict: out-of-range values are
rejected, never clamped, so that a bad source record is reported instead of
silently producing a reorder decision.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class CatalogItem(BaseModel):
    """A single inventory item with its stock and sales figures.

    Attributes:
        id: Opaque identifier, unique within a loaded catalog. Numeric source
            ids are coerced to strings.
        name: Display name.
        sku: Stock-keeping code (string; numeric codes are coerced).
        current_inventory: Units on hand, ``>= 0``.
        avg_sales_per_week: Average units sold per week, ``>= 0``.
        days_to_replenish: Supplier lead time in days, ``> 0``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    sku: str
    current_inventory: int
    avg_sales_per_week: float
    days_to_replenish: int

    @field_validator("id", "sku", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("id must not be empty.")
        return v.strip()

    @field_validator("current_inventory")
    @classmethod
    def validate_inventory(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"current_inventory must be non-negative, got {v}.")
        try:
            float(v)
        except OverflowError:
            raise ValueError("current_inventory is too large to represent as a float.") from None
        return v

    @field_validator("avg_sales_per_week")
    @classmethod
    def validate_sales(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError(f"avg_sales_per_week must be finite and non-negative, got {v}.")
        return v

    @field_validator("days_to_replenish")
    @classmethod
    def validate_lead_time(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"days_to_replenish must be a positive integer, got {v}.")
        return v
