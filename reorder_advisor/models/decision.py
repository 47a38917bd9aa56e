"""
Reorder decision models.

``ReorderDecision`` is derived once per item by the evaluator and bundled with
the item into an ``EnrichedItem``. Both are frozen: filtering and sorting a
catalog must never re-derive a decision.

``WeeksOfStock`` replaces a floating-point infinity with an explicit
``unbounded`` variant, so zero-velocity items cannot leak ``inf`` into
comparisons, JSON, or formatted output.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from reorder_advisor.models.catalog import CatalogItem


class WeeksOfStock(BaseModel):
    """Weeks until stock runs out at the current sales velocity.

    Attributes:
        value: Finite number of weeks (rounded to 2 dp), or ``None`` when
            stock never depletes (zero sales).
    """

    model_config = ConfigDict(frozen=True)

    value: Optional[float] = None

    @classmethod
    def finite(cls, value: float) -> "WeeksOfStock":
        return cls(value=value)

    @classmethod
    def unbounded(cls) -> "WeeksOfStock":
        return cls(value=None)

    @property
    def is_unbounded(self) -> bool:
        return self.value is None

    def sort_key(self) -> tuple[int, float]:
        """Ordering key: every finite ratio sorts below unbounded."""
        if self.value is None:
            return (1, 0.0)
        return (0, self.value)

    def __str__(self) -> str:
        return "inf" if self.value is None else f"{self.value:.2f}"

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not (0.0 <= v < float("inf")):
            raise ValueError(f"weeks of stock must be finite and non-negative, got {v}.")
        return v


class ReorderDecision(BaseModel):
    """Reorder verdict and derived metrics for one catalog item.

    Attributes:
        needs_reorder: ``True`` when the classifier probability exceeds the
            decision threshold.
        suggested_reorder_qty: Two weeks of average sales (rounded up) when
            ``needs_reorder``; otherwise ``0``.
        weeks_of_stock: Inventory cover at current velocity.
        probability: Classifier output the verdict was taken from.
    """

    model_config = ConfigDict(frozen=True)

    needs_reorder: bool
    suggested_reorder_qty: int
    weeks_of_stock: WeeksOfStock
    probability: float

    @model_validator(mode="after")
    def validate_decision_consistency(self) -> "ReorderDecision":
        if self.suggested_reorder_qty < 0:
            raise ValueError("suggested_reorder_qty must be non-negative.")
        if not self.needs_reorder and self.suggested_reorder_qty != 0:
            raise ValueError(
                "suggested_reorder_qty must be 0 when needs_reorder is False, "
                f"got {self.suggested_reorder_qty}."
            )
        if not 0.0 <= self.probability <= 1.0:
            raise ValueError(f"probability must be in [0.0, 1.0], got {self.probability}.")
        return self


class EnrichedItem(BaseModel):
    """A catalog item together with its reorder decision."""

    model_config = ConfigDict(frozen=True)

    item: CatalogItem
    decision: ReorderDecision

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def needs_reorder(self) -> bool:
        return self.decision.needs_reorder
