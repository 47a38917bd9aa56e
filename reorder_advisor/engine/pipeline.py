"""
Catalog view pipeline: text filter → reorder-only filter → sort, plus
dashboard aggregates.

Every function here is synchronous and pure. Inputs are already-enriched
items; nothing in this module calls the classifier or mutates an item, so the
pipeline can be re-run on every change of query, toggle, or sort setting.

Stage order
-----------
Filters run before the sort so the comparator only touches the reduced set.
Both filters are conjunctive.

Sorting
-------
``sorted()`` is stable in both directions (``reverse=True`` keeps equal
elements in input order), so ties always keep their original relative order.
There is no secondary key.

Aggregates
----------
Computed over the full enriched catalog, independent of the active filters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Sequence

from reorder_advisor.models.decision import EnrichedItem


class SortKey(str, Enum):
    """Sortable columns of the catalog view."""

    NEEDS_REORDER = "needs_reorder"
    NAME = "name"
    CURRENT_INVENTORY = "current_inventory"
    AVG_SALES_PER_WEEK = "avg_sales_per_week"
    DAYS_TO_REPLENISH = "days_to_replenish"
    WEEKS_OF_STOCK = "weeks_of_stock"


_SORT_VALUE: dict[SortKey, Callable[[EnrichedItem], Any]] = {
    SortKey.NEEDS_REORDER:      lambda e: 1 if e.decision.needs_reorder else 0,
    SortKey.NAME:               lambda e: e.item.name.lower(),
    SortKey.CURRENT_INVENTORY:  lambda e: e.item.current_inventory,
    SortKey.AVG_SALES_PER_WEEK: lambda e: e.item.avg_sales_per_week,
    SortKey.DAYS_TO_REPLENISH:  lambda e: e.item.days_to_replenish,
    SortKey.WEEKS_OF_STOCK:     lambda e: e.decision.weeks_of_stock.sort_key(),
}


@dataclass(frozen=True)
class CatalogAggregates:
    """Dashboard summary numbers.

    Attributes:
        total_products: Number of enriched items.
        reorder_count:  Items flagged ``needs_reorder``.
        avg_inventory:  Mean ``current_inventory``, 1 dp; 0.0 when empty.
    """

    total_products: int
    reorder_count: int
    avg_inventory: float


@dataclass(frozen=True)
class PipelineResult:
    """Rows to display plus catalog-wide aggregates."""

    rows: tuple[EnrichedItem, ...]
    aggregates: CatalogAggregates


# ── Stages ────────────────────────────────────────────────────────────────────


def filter_by_query(items: Sequence[EnrichedItem], query: str | None) -> list[EnrichedItem]:
    """Keep items whose name or SKU contains ``query`` (case-insensitive).

    A ``None``, empty, or whitespace-only query matches everything.
    """
    q = (query or "").strip().lower()
    if not q:
        return list(items)
    return [
        e for e in items
        if q in e.item.name.lower() or q in e.item.sku.lower()
    ]


def filter_reorder_only(items: Sequence[EnrichedItem], only_reorder: bool) -> list[EnrichedItem]:
    """Keep only items flagged for reorder when ``only_reorder`` is set."""
    if not only_reorder:
        return list(items)
    return [e for e in items if e.decision.needs_reorder]


def sort_items(
    items: Sequence[EnrichedItem],
    sort_key: SortKey | str = SortKey.NEEDS_REORDER,
    sort_asc: bool = False,
) -> list[EnrichedItem]:
    """Stable sort by ``sort_key``.

    Raises:
        ValueError: Unknown sort key.
    """
    key = SortKey(sort_key)
    return sorted(items, key=_SORT_VALUE[key], reverse=not sort_asc)


def compute_aggregates(items: Sequence[EnrichedItem]) -> CatalogAggregates:
    """Summary numbers over the full catalog."""
    total = len(items)
    if total == 0:
        return CatalogAggregates(total_products=0, reorder_count=0, avg_inventory=0.0)
    reorder_count = sum(1 for e in items if e.decision.needs_reorder)
    inventory_sum = sum(e.item.current_inventory for e in items)
    return CatalogAggregates(
        total_products=total,
        reorder_count=reorder_count,
        avg_inventory=round(inventory_sum / total, 1),
    )


def run_pipeline(
    items: Sequence[EnrichedItem],
    query: str | None = "",
    only_reorder: bool = False,
    sort_key: SortKey | str = SortKey.NEEDS_REORDER,
    sort_asc: bool = False,
) -> PipelineResult:
    """Filter, sort, and summarise an enriched catalog.

    Args:
        items:        Fully enriched catalog (never re-evaluated here).
        query:        Free-text filter on name or SKU.
        only_reorder: Keep only items that need reordering.
        sort_key:     Column to sort by.
        sort_asc:     Ascending when True, descending otherwise.

    Returns:
        ``PipelineResult`` with the ordered rows and aggregates computed over
        all of ``items``.
    """
    rows = filter_by_query(items, query)
    rows = filter_reorder_only(rows, only_reorder)
    rows = sort_items(rows, sort_key, sort_asc)
    return PipelineResult(rows=tuple(rows), aggregates=compute_aggregates(items))
