"""Tests for reorder_advisor.reporting.formatters."""

from __future__ import annotations

from reorder_advisor.engine.pipeline import CatalogAggregates
from reorder_advisor.models.catalog import CatalogItem
from reorder_advisor.models.decision import EnrichedItem, ReorderDecision, WeeksOfStock
from reorder_advisor.reporting.formatters import format_catalog_table, format_summary


def _row(
    id: str = "1",
    name: str = "Widget",
    reorder: bool = False,
    weeks: float | None = 3.5,
) -> EnrichedItem:
    return EnrichedItem(
        item=CatalogItem(
            id=id, name=name, sku=f"SKU-{id}",
            current_inventory=35, avg_sales_per_week=10.0, days_to_replenish=4,
        ),
        decision=ReorderDecision(
            needs_reorder=reorder,
            suggested_reorder_qty=20 if reorder else 0,
            weeks_of_stock=WeeksOfStock(value=weeks),
            probability=0.8 if reorder else 0.2,
        ),
    )


# ── format_summary ────────────────────────────────────────────────────────────


def test_summary_contains_all_numbers() -> None:
    """Total, reorder count and average inventory all appear."""
    text = format_summary(
        CatalogAggregates(total_products=3, reorder_count=1, avg_inventory=20.0)
    )
    assert "Total products:" in text
    assert "Needs reorder:" in text
    assert "20.0" in text
    lines = text.splitlines()
    assert lines[2].rstrip().endswith("3")
    assert lines[3].rstrip().endswith("1")


# ── format_catalog_table ──────────────────────────────────────────────────────


def test_table_empty() -> None:
    """No rows gives a single placeholder line."""
    assert format_catalog_table([]) == "  (no matching items)"


def test_table_has_header_and_one_line_per_row() -> None:
    rows = [_row(id="1"), _row(id="2", reorder=True)]
    lines = format_catalog_table(rows).splitlines()
    assert "Reorder" in lines[0]
    assert "Wks stock" in lines[0]
    assert len(lines) == 2 + 2


def test_table_reorder_flag_and_qty() -> None:
    lines = format_catalog_table([_row(reorder=True)]).splitlines()
    assert lines[2].strip().startswith("YES")
    assert lines[2].rstrip().endswith("20")


def test_table_unbounded_weeks_rendered_as_inf() -> None:
    """Zero-sales rows show 'inf' rather than a number."""
    text = format_catalog_table([_row(weeks=None)])
    assert " inf " in text


def test_table_finite_weeks_two_decimals() -> None:
    text = format_catalog_table([_row(weeks=3.5)])
    assert "3.50" in text


def test_table_long_name_truncated() -> None:
    text = format_catalog_table([_row(name="X" * 60)])
    assert "X" * 60 not in text
    assert "..." in text


def test_table_limit_adds_trailer() -> None:
    rows = [_row(id=str(i)) for i in range(5)]
    lines = format_catalog_table(rows, limit=2).splitlines()
    assert len(lines) == 2 + 2 + 1
    assert "3 more row(s) not shown" in lines[-1]


def test_table_limit_larger_than_rows_no_trailer() -> None:
    rows = [_row(id=str(i)) for i in range(2)]
    assert "not shown" not in format_catalog_table(rows, limit=10)
