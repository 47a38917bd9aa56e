"""
Export helpers for pipeline output.

All writers create parent directories and return the written ``Path``.
``enriched_to_records()`` flattens ``EnrichedItem`` objects into one dict per
row so CSV exports load directly in a spreadsheet or pandas. Unbounded weeks
of stock are written as an empty value plus ``weeks_of_stock_unbounded=True``.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Sequence

from reorder_advisor.engine.pipeline import CatalogAggregates
from reorder_advisor.models.decision import EnrichedItem

EXPORT_FIELDNAMES: list[str] = [
    "id",
    "name",
    "sku",
    "current_inventory",
    "avg_sales_per_week",
    "days_to_replenish",
    "needs_reorder",
    "suggested_reorder_qty",
    "weeks_of_stock",
    "weeks_of_stock_unbounded",
    "probability",
]


def enriched_to_records(rows: Sequence[EnrichedItem]) -> list[dict]:
    """Flatten enriched items into export rows (``EXPORT_FIELDNAMES`` keys)."""
    records: list[dict] = []
    for e in rows:
        d = e.decision
        records.append({
            "id":                       e.item.id,
            "name":                     e.item.name,
            "sku":                      e.item.sku,
            "current_inventory":        e.item.current_inventory,
            "avg_sales_per_week":       e.item.avg_sales_per_week,
            "days_to_replenish":        e.item.days_to_replenish,
            "needs_reorder":            d.needs_reorder,
            "suggested_reorder_qty":    d.suggested_reorder_qty,
            "weeks_of_stock":           d.weeks_of_stock.value,
            "weeks_of_stock_unbounded": d.weeks_of_stock.is_unbounded,
            "probability":              round(d.probability, 4),
        })
    return records


def build_report_payload(
    rows: Sequence[EnrichedItem],
    aggregates: CatalogAggregates,
) -> dict:
    """JSON-ready dict with summary numbers and flattened rows."""
    return {
        "summary": {
            "total_products": aggregates.total_products,
            "reorder_count":  aggregates.reorder_count,
            "avg_inventory":  aggregates.avg_inventory,
        },
        "items": enriched_to_records(rows),
    }


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order. Defaults to ``EXPORT_FIELDNAMES``.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    cols = fieldnames or EXPORT_FIELDNAMES
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path
