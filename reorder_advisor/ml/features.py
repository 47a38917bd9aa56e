"""
Feature extraction for the reorder classifier.

The classifier sees exactly three raw numbers per item, in the order given by
``FEATURE_COLS``. Values are copied straight from the catalog item with no
scaling: the bootstrap dataset below is expressed in the same raw units, so
changing either side requires changing both.

Why a separate module?
----------------------
The ML layer does not import the engine or reporting packages. This module is
the single place to update if the feature order or the bootstrap dataset ever
changes.
"""

from __future__ import annotations

from typing import NamedTuple, TYPE_CHECKING

if TYPE_CHECKING:
    from reorder_advisor.models.catalog import CatalogItem

# ── Feature order ─────────────────────────────────────────────────────────────
# Part of the trained model's contract. Never reorder without retraining.

FEATURE_COLS: tuple[str, ...] = (
    "current_inventory",
    "avg_sales_per_week",
    "days_to_replenish",
)


class FeatureVector(NamedTuple):
    """Model input triple, in ``FEATURE_COLS`` order."""

    current_inventory: float
    avg_sales_per_week: float
    days_to_replenish: float


# ── Bootstrap dataset ─────────────────────────────────────────────────────────
# label 1 = "would reorder", 0 = "would not".

BOOTSTRAP_FEATURES: tuple[FeatureVector, ...] = (
    FeatureVector(20.0, 50.0, 3.0),
    FeatureVector(5.0, 30.0, 5.0),
    FeatureVector(15.0, 40.0, 4.0),
    FeatureVector(8.0, 60.0, 2.0),
)

BOOTSTRAP_LABELS: tuple[int, ...] = (0, 1, 0, 1)


def extract_features(item: "CatalogItem") -> FeatureVector:
    """Copy the three model inputs off a catalog item (no normalization)."""
    return FeatureVector(
        current_inventory=float(item.current_inventory),
        avg_sales_per_week=float(item.avg_sales_per_week),
        days_to_replenish=float(item.days_to_replenish),
    )


def build_feature_matrix(vectors: list[FeatureVector]) -> list[list[float]]:
    """Return a row-major matrix of feature values for a list of vectors."""
    return [[float(v) for v in vec] for vec in vectors]
