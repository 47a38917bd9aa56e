"""
ASCII terminal formatters for the ``report`` CLI command.

All formatters accept pipeline output and return plain multi-line strings
suitable for ``typer.echo()``. No third-party dependencies.

Unbounded weeks of stock (zero sales) render as ``inf``.
"""

from __future__ import annotations

from typing import Sequence

from reorder_advisor.engine.pipeline import CatalogAggregates
from reorder_advisor.models.decision import EnrichedItem

_NAME_WIDTH = 32


def _truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


# ── Summary ───────────────────────────────────────────────────────────────────


def format_summary(aggregates: CatalogAggregates) -> str:
    """Return the three dashboard numbers as an aligned block."""
    return "\n".join([
        "  Catalog summary",
        "  " + "-" * 30,
        f"  Total products:   {aggregates.total_products:>8}",
        f"  Needs reorder:    {aggregates.reorder_count:>8}",
        f"  Avg inventory:    {aggregates.avg_inventory:>8.1f}",
    ])


# ── Catalog table ─────────────────────────────────────────────────────────────


def format_catalog_table(
    rows: Sequence[EnrichedItem],
    limit: int | None = None,
) -> str:
    """Format pipeline rows as a fixed-width table.

    Args:
        rows:  Ordered rows from ``run_pipeline()``.
        limit: Maximum rows to print; ``None`` prints all. A trailer line
               reports how many rows were omitted.

    Returns:
        Multi-line table, or a single "no matching items" line.
    """
    if not rows:
        return "  (no matching items)"

    header = (
        f"  {'Reorder':<7}  {'Name':<{_NAME_WIDTH}}  {'SKU':<10}  "
        f"{'Inv':>5}  {'Sales/wk':>8}  {'Lead d':>6}  {'Wks stock':>9}  {'Qty':>5}"
    )
    lines = [header, "  " + "-" * (len(header) - 2)]

    shown = rows if limit is None else rows[:limit]
    for e in shown:
        d = e.decision
        lines.append(
            f"  {'YES' if d.needs_reorder else 'no':<7}  "
            f"{_truncate(e.item.name, _NAME_WIDTH):<{_NAME_WIDTH}}  "
            f"{_truncate(e.item.sku, 10):<10}  "
            f"{e.item.current_inventory:>5}  "
            f"{e.item.avg_sales_per_week:>8.1f}  "
            f"{e.item.days_to_replenish:>6}  "
            f"{str(d.weeks_of_stock):>9}  "
            f"{d.suggested_reorder_qty:>5}"
        )

    omitted = len(rows) - len(shown)
    if omitted > 0:
        lines.append(f"  ... {omitted} more row(s) not shown")
    return "\n".join(lines)
