"""
Item-level reorder evaluation.

``ReorderEvaluator`` turns a ``CatalogItem`` into a ``ReorderDecision``:

  1. Extract the raw ``FeatureVector`` (no normalization).
  2. Ask the shared classifier for a reorder probability; the first call
     suspends until the one-time training has finished.
  3. Derive the metrics:
       suggested_reorder_qty = ceil(avg_sales_per_week * 2) if reorder else 0
       weeks_of_stock        = round(current_inventory / avg_sales_per_week, 2)
                               or unbounded when avg_sales_per_week == 0

``evaluate_catalog()`` enriches a whole batch. Malformed records, and items
whose evaluation fails (e.g. a sales figure so small that weeks of stock
overflows), are rejected one by one and reported alongside the enriched
items. A classifier ``InitializationFailure`` is not per-item and propagates
to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union

from pydantic import ValidationError

from reorder_advisor.ml.features import extract_features
from reorder_advisor.ml.trainer import InitializationFailure, LazyClassifier
from reorder_advisor.models.catalog import CatalogItem
from reorder_advisor.models.decision import EnrichedItem, ReorderDecision, WeeksOfStock

logger = logging.getLogger(__name__)

CatalogRecord = Union[CatalogItem, Mapping[str, Any]]

# Weeks of sales covered by a suggested reorder.
REORDER_COVER_WEEKS = 2


class MalformedItemError(ValueError):
    """Raised when a catalog record cannot be evaluated.

    Attributes:
        item_id: Identifier of the offending record, if it had one.
        reason:  Human-readable validation failure.
    """

    def __init__(self, item_id: str | None, reason: str) -> None:
        self.item_id = item_id
        self.reason = reason
        super().__init__(f"Malformed catalog item '{item_id}': {reason}")


@dataclass(frozen=True)
class RejectedItem:
    """A record excluded from the enriched catalog, with the reason."""

    item_id: str | None
    reason: str


@dataclass
class EnrichmentReport:
    """Result of enriching a batch of catalog records.

    Attributes:
        items:    Enriched items, in input order.
        rejected: Records that failed validation, then items whose
                  evaluation raised; each group in input order.
    """

    items: list[EnrichedItem] = field(default_factory=list)
    rejected: list[RejectedItem] = field(default_factory=list)


# ── Pure helpers ──────────────────────────────────────────────────────────────


def parse_catalog_item(record: CatalogRecord) -> CatalogItem:
    """Validate a raw record into a ``CatalogItem``.

    Raises:
        MalformedItemError: If any field is missing or out of range.
    """
    if isinstance(record, CatalogItem):
        return record
    raw_id = record.get("id") if isinstance(record, Mapping) else None
    item_id = None if raw_id is None else str(raw_id)
    if not isinstance(record, Mapping):
        raise MalformedItemError(item_id, f"expected a mapping, got {type(record).__name__}")
    try:
        return CatalogItem.model_validate(dict(record))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
            for err in exc.errors()
        )
        raise MalformedItemError(item_id, problems) from exc


def compute_suggested_reorder_qty(avg_sales_per_week: float, needs_reorder: bool) -> int:
    """Two weeks of average sales, rounded up; 0 when no reorder is needed."""
    if not needs_reorder:
        return 0
    return max(0, math.ceil(avg_sales_per_week * REORDER_COVER_WEEKS))


def compute_weeks_of_stock(current_inventory: int, avg_sales_per_week: float) -> WeeksOfStock:
    """Inventory cover in weeks; unbounded when nothing sells."""
    if avg_sales_per_week > 0:
        return WeeksOfStock.finite(round(current_inventory / avg_sales_per_week, 2))
    return WeeksOfStock.unbounded()


# ── Evaluator ─────────────────────────────────────────────────────────────────


class ReorderEvaluator:
    """Derives reorder decisions using a shared, lazily trained classifier.

    Args:
        classifier: The process's ``LazyClassifier`` handle. Several
            evaluators may share one handle; it trains once either way.
    """

    def __init__(self, classifier: LazyClassifier) -> None:
        self.classifier = classifier

    async def evaluate(self, item: CatalogItem) -> ReorderDecision:
        """Classify one item and derive its reorder metrics.

        Raises:
            InitializationFailure: If the classifier cannot be trained.
        """
        model = await self.classifier.get()
        probability = model.predict_proba(extract_features(item))
        needs_reorder = model.needs_reorder(probability)
        return ReorderDecision(
            needs_reorder=needs_reorder,
            suggested_reorder_qty=compute_suggested_reorder_qty(
                item.avg_sales_per_week, needs_reorder
            ),
            weeks_of_stock=compute_weeks_of_stock(
                item.current_inventory, item.avg_sales_per_week
            ),
            probability=probability,
        )

    async def enrich(self, item: CatalogItem) -> EnrichedItem:
        """Return ``item`` bundled with its decision."""
        return EnrichedItem(item=item, decision=await self.evaluate(item))

    async def _enrich_or_reject(self, item: CatalogItem) -> Union[EnrichedItem, RejectedItem]:
        try:
            return await self.enrich(item)
        except InitializationFailure:
            raise
        except Exception as exc:
            reason = f"evaluation failed: {type(exc).__name__}: {exc}"
            logger.warning(
                "Rejected catalog item %s: %s", item.id, reason, extra={"item_id": item.id}
            )
            return RejectedItem(item_id=item.id, reason=reason)

    async def evaluate_catalog(self, records: Iterable[CatalogRecord]) -> EnrichmentReport:
        """Validate and enrich a whole catalog.

        Records are validated first; malformed ones and repeated identifiers
        are rejected individually. Valid items are then evaluated
        concurrently; an item whose evaluation raises is rejected as well,
        after the validation rejections. The report is returned only once
        every valid item is enriched or rejected.

        Raises:
            InitializationFailure: If the classifier cannot be trained.
        """
        report = EnrichmentReport()
        valid: list[CatalogItem] = []
        seen_ids: set[str] = set()

        for record in records:
            try:
                item = parse_catalog_item(record)
                if item.id in seen_ids:
                    raise MalformedItemError(item.id, "duplicate id within catalog")
            except MalformedItemError as exc:
                logger.warning("Rejected catalog item: %s", exc, extra={"item_id": exc.item_id})
                report.rejected.append(RejectedItem(item_id=exc.item_id, reason=exc.reason))
                continue
            seen_ids.add(item.id)
            valid.append(item)

        if valid:
            await self.classifier.train_once()
            results = await asyncio.gather(*(self._enrich_or_reject(i) for i in valid))
            for result in results:
                if isinstance(result, RejectedItem):
                    report.rejected.append(result)
                else:
                    report.items.append(result)

        logger.info(
            "Catalog enriched: %d item(s), %d rejected",
            len(report.items), len(report.rejected),
        )
        return report
