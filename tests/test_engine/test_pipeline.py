"""
Tests for reorder_advisor/engine/pipeline.py.

What we test
------------
filter_by_query():
  - Case-insensitive substring on name; partial match on SKU.
  - Empty / whitespace / None query passes everything through.

filter_reorder_only():
  - Keeps only needs_reorder items when enabled; no-op otherwise.

sort_items():
  - Every SortKey in both directions.
  - name is case-insensitive; needs_reorder sorts True above False.
  - Unbounded weeks_of_stock sorts above every finite value.
  - Ties keep input order in both directions (stability).
  - Unknown key raises ValueError.

compute_aggregates():
  - Example: inventories [10, 20, 30], one flagged -> 3, 1, 20.0.
  - Empty catalog -> zeros.
  - Rounded to 1 dp.

run_pipeline():
  - Filters are conjunctive.
  - Aggregates cover the full catalog regardless of filters.
  - Input list is not mutated.
"""

from __future__ import annotations

import pytest

from reorder_advisor.engine.pipeline import (
    CatalogAggregates,
    SortKey,
    compute_aggregates,
    filter_by_query,
    filter_reorder_only,
    run_pipeline,
    sort_items,
)
from reorder_advisor.models.catalog import CatalogItem
from reorder_advisor.models.decision import EnrichedItem, ReorderDecision, WeeksOfStock


def _enriched(
    id: str = "1",
    name: str = "Widget",
    sku: str | None = None,
    inventory: int = 100,
    sales: float = 10.0,
    lead: int = 5,
    reorder: bool = False,
    weeks: float | None = 10.0,
) -> EnrichedItem:
    return EnrichedItem(
        item=CatalogItem(
            id=id,
            name=name,
            sku=sku if sku is not None else id,
            current_inventory=inventory,
            avg_sales_per_week=sales,
            days_to_replenish=lead,
        ),
        decision=ReorderDecision(
            needs_reorder=reorder,
            suggested_reorder_qty=2 if reorder else 0,
            weeks_of_stock=WeeksOfStock(value=weeks),
            probability=0.9 if reorder else 0.1,
        ),
    )


def _ids(rows) -> list[str]:
    return [e.id for e in rows]


@pytest.fixture
def catalog() -> list[EnrichedItem]:
    return [
        _enriched(id="1", name="Red Lipstick", sku="LIP-01", inventory=5, sales=20.0,
                  lead=3, reorder=True, weeks=0.25),
        _enriched(id="2", name="blue pen", sku="PEN-77", inventory=300, sales=0.0,
                  lead=10, reorder=False, weeks=None),
        _enriched(id="3", name="Apple", sku="FRU-3", inventory=40, sales=4.0,
                  lead=1, reorder=False, weeks=10.0),
        _enriched(id="4", name="Lip Balm", sku="LIP-02", inventory=13, sales=8.0,
                  lead=7, reorder=True, weeks=1.5),
    ]


class TestFilterByQuery:
    def test_name_case_insensitive(self, catalog):
        assert _ids(filter_by_query(catalog, "LIP")) == ["1", "4"]

    def test_sku_partial_match(self, catalog):
        assert _ids(filter_by_query(catalog, "pen-7")) == ["2"]

    def test_name_or_sku(self, catalog):
        assert _ids(filter_by_query(catalog, "fru")) == ["3"]

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_blank_query_matches_everything(self, catalog, query):
        assert _ids(filter_by_query(catalog, query)) == ["1", "2", "3", "4"]

    def test_query_is_trimmed(self, catalog):
        assert _ids(filter_by_query(catalog, "  apple  ")) == ["3"]

    def test_no_match(self, catalog):
        assert filter_by_query(catalog, "zzz") == []


class TestFilterReorderOnly:
    def test_enabled(self, catalog):
        assert _ids(filter_reorder_only(catalog, True)) == ["1", "4"]

    def test_disabled(self, catalog):
        assert _ids(filter_reorder_only(catalog, False)) == ["1", "2", "3", "4"]


class TestSortItems:
    def test_name_ascending_case_insensitive(self, catalog):
        assert _ids(sort_items(catalog, SortKey.NAME, sort_asc=True)) == ["3", "2", "4", "1"]

    def test_name_descending(self, catalog):
        assert _ids(sort_items(catalog, SortKey.NAME, sort_asc=False)) == ["1", "4", "2", "3"]

    def test_needs_reorder_descending_puts_true_first(self, catalog):
        assert _ids(sort_items(catalog, SortKey.NEEDS_REORDER, sort_asc=False)) == [
            "1", "4", "2", "3"
        ]

    def test_needs_reorder_ascending_puts_false_first(self, catalog):
        assert _ids(sort_items(catalog, SortKey.NEEDS_REORDER, sort_asc=True)) == [
            "2", "3", "1", "4"
        ]

    def test_current_inventory(self, catalog):
        assert _ids(sort_items(catalog, SortKey.CURRENT_INVENTORY, sort_asc=True)) == [
            "1", "4", "3", "2"
        ]

    def test_avg_sales_per_week(self, catalog):
        assert _ids(sort_items(catalog, SortKey.AVG_SALES_PER_WEEK, sort_asc=False)) == [
            "1", "4", "3", "2"
        ]

    def test_days_to_replenish(self, catalog):
        assert _ids(sort_items(catalog, SortKey.DAYS_TO_REPLENISH, sort_asc=True)) == [
            "3", "1", "4", "2"
        ]

    def test_weeks_of_stock_unbounded_sorts_high(self, catalog):
        assert _ids(sort_items(catalog, SortKey.WEEKS_OF_STOCK, sort_asc=True)) == [
            "1", "4", "3", "2"
        ]
        assert _ids(sort_items(catalog, SortKey.WEEKS_OF_STOCK, sort_asc=False)) == [
            "2", "3", "4", "1"
        ]

    def test_unbounded_above_very_large_finite(self):
        rows = [_enriched(id="u", weeks=None), _enriched(id="big", weeks=1e9)]
        assert _ids(sort_items(rows, SortKey.WEEKS_OF_STOCK, sort_asc=True)) == ["big", "u"]

    def test_string_key_accepted(self, catalog):
        assert _ids(sort_items(catalog, "name", sort_asc=True)) == ["3", "2", "4", "1"]

    def test_unknown_key_raises(self, catalog):
        with pytest.raises(ValueError):
            sort_items(catalog, "price")

    @pytest.mark.parametrize("ascending", [True, False])
    def test_ties_keep_input_order(self, ascending):
        rows = [
            _enriched(id="a", inventory=10),
            _enriched(id="b", inventory=5),
            _enriched(id="c", inventory=10),
            _enriched(id="d", inventory=10),
        ]
        result = _ids(sort_items(rows, SortKey.CURRENT_INVENTORY, sort_asc=ascending))
        tied = [i for i in result if i != "b"]
        assert tied == ["a", "c", "d"]

    @pytest.mark.parametrize("ascending", [True, False])
    def test_name_ties_ignore_case_and_keep_order(self, ascending):
        rows = [_enriched(id="x", name="Pen"), _enriched(id="y", name="pen")]
        assert _ids(sort_items(rows, SortKey.NAME, sort_asc=ascending)) == ["x", "y"]


class TestComputeAggregates:
    def test_example(self):
        rows = [
            _enriched(id="1", inventory=10, reorder=True),
            _enriched(id="2", inventory=20),
            _enriched(id="3", inventory=30),
        ]
        assert compute_aggregates(rows) == CatalogAggregates(
            total_products=3, reorder_count=1, avg_inventory=20.0
        )

    def test_empty(self):
        assert compute_aggregates([]) == CatalogAggregates(
            total_products=0, reorder_count=0, avg_inventory=0.0
        )

    def test_rounded_to_one_decimal(self):
        rows = [_enriched(id="1", inventory=1), _enriched(id="2", inventory=2),
                _enriched(id="3", inventory=2)]
        assert compute_aggregates(rows).avg_inventory == 1.7


class TestRunPipeline:
    def test_filters_are_conjunctive(self, catalog):
        # "apple" matches an item that does not need reorder; reorder items
        # do not match "apple".
        result = run_pipeline(catalog, query="apple", only_reorder=True)
        assert result.rows == ()

    def test_query_and_reorder_only(self, catalog):
        result = run_pipeline(
            catalog, query="lip", only_reorder=True,
            sort_key=SortKey.CURRENT_INVENTORY, sort_asc=False,
        )
        assert _ids(result.rows) == ["4", "1"]

    def test_aggregates_ignore_filters(self, catalog):
        result = run_pipeline(catalog, query="zzz", only_reorder=True)
        assert result.rows == ()
        assert result.aggregates.total_products == 4
        assert result.aggregates.reorder_count == 2
        assert result.aggregates.avg_inventory == 89.5

    def test_defaults_sort_reorder_first(self, catalog):
        result = run_pipeline(catalog)
        assert _ids(result.rows) == ["1", "4", "2", "3"]

    def test_does_not_mutate_input(self, catalog):
        before = list(catalog)
        run_pipeline(catalog, sort_key=SortKey.NAME, sort_asc=True)
        assert catalog == before

    def test_rows_are_same_objects(self, catalog):
        result = run_pipeline(catalog)
        assert {id(e) for e in result.rows} == {id(e) for e in catalog}

    def test_empty_catalog(self):
        result = run_pipeline([], query="x", only_reorder=True)
        assert result.rows == ()
        assert result.aggregates.total_products == 0
