"""
Reorder Advisor — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (load catalog, enrich, run the view pipeline).
  5. Report result to stdout.

Install and run::

    pip install -e .
    reorder-advisor --help
    reorder-advisor validate-config
    reorder-advisor report --fixture --only-reorder
    reorder-advisor report --file data/catalog.json --sort-key weeks_of_stock --asc
    reorder-advisor report --query lipstick --json-out data/exports/report.json
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="reorder-advisor",
    help="Inventory reorder advisor — classify a catalog and list items to reorder.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from reorder_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from reorder_advisor.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_raw_records(config, catalog_file: Optional[str], use_fixture: bool) -> list[dict]:
    """Load raw catalog records from a file, the fixture set, or the HTTP source."""
    import httpx

    from reorder_advisor.ingestion.catalog_client import CatalogClient, load_catalog_file

    client = CatalogClient(
        source_url=config.catalog.source_url,
        timeout_s=config.catalog.request_timeout_s,
    )
    try:
        if catalog_file:
            return load_catalog_file(Path(catalog_file))
        if use_fixture:
            return client.get_fixture_records()
        typer.echo(f"Fetching catalog from: {config.catalog.source_url}")
        return client.fetch_products(limit=config.catalog.fetch_limit)
    except (FileNotFoundError, ValueError, httpx.HTTPError) as exc:
        typer.echo(f"[ERROR] Could not load catalog: {exc}", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Catalog source:    {config.catalog.source_url}")
    typer.echo(f"  Min catalog size:  {config.catalog.min_catalog_size}")
    typer.echo(f"  Hidden units:      {config.classifier.hidden_units}")
    typer.echo(f"  Training epochs:   {config.classifier.epochs}")
    typer.echo(f"  Decision threshold:{config.classifier.decision_threshold}")
    typer.echo(f"  Default sort:      {config.pipeline.default_sort_key}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("report")
def report(
    catalog_file: Optional[str] = typer.Option(
        None,
        "--file",
        "-f",
        help="Load raw catalog records from a JSON file instead of the HTTP source.",
    ),
    use_fixture: bool = typer.Option(
        False,
        "--fixture",
        help="Use the built-in fixture records (no network).",
    ),
    query: str = typer.Option(
        "",
        "--query",
        "-q",
        help="Case-insensitive filter on item name or SKU.",
    ),
    only_reorder: bool = typer.Option(
        False,
        "--only-reorder",
        help="Show only items that need reordering.",
    ),
    sort_key: Optional[str] = typer.Option(
        None,
        "--sort-key",
        help=(
            "needs_reorder | name | current_inventory | avg_sales_per_week | "
            "days_to_replenish | weeks_of_stock. Defaults to config."
        ),
    ),
    sort_asc: Optional[bool] = typer.Option(
        None,
        "--asc/--desc",
        help="Sort direction. Defaults to config.",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=0,
        help="Maximum table rows to print (default: config pipeline.table_rows).",
    ),
    no_pad: bool = typer.Option(
        False,
        "--no-pad",
        help="Do not pad the catalog up to catalog.min_catalog_size.",
    ),
    json_out: Optional[str] = typer.Option(
        None,
        "--json-out",
        help="Also write summary + filtered rows to this JSON file.",
    ),
    csv_out: Optional[str] = typer.Option(
        None,
        "--csv-out",
        help="Also write the filtered rows to this CSV file.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Classify the catalog and print the filtered, sorted reorder view.

    Exit codes: 1 on config / catalog errors, 2 if the classifier cannot be
    trained.
    """
    from reorder_advisor.engine.evaluator import ReorderEvaluator
    from reorder_advisor.engine.pipeline import SortKey, run_pipeline
    from reorder_advisor.ingestion.augment import augment_records, pad_catalog
    from reorder_advisor.ml.trainer import InitializationFailure, LazyClassifier
    from reorder_advisor.reporting.export import (
        build_report_payload,
        enriched_to_records,
        export_to_csv,
        export_to_json,
    )
    from reorder_advisor.reporting.formatters import format_catalog_table, format_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    key_value = sort_key or config.pipeline.default_sort_key
    try:
        key = SortKey(key_value)
    except ValueError:
        valid = ", ".join(k.value for k in SortKey)
        typer.echo(f"[ERROR] Unknown sort key '{key_value}'. Valid: {valid}", err=True)
        raise typer.Exit(code=1)
    ascending = config.pipeline.default_sort_asc if sort_asc is None else sort_asc

    raw = _load_raw_records(config, catalog_file, use_fixture)
    records = augment_records(raw, seed=config.catalog.augment_seed)
    if not no_pad:
        records = pad_catalog(records, config.catalog.min_catalog_size)

    evaluator = ReorderEvaluator(LazyClassifier(config.classifier))
    try:
        enrichment = asyncio.run(evaluator.evaluate_catalog(records))
    except InitializationFailure as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=2)

    result = run_pipeline(
        enrichment.items,
        query=query,
        only_reorder=only_reorder,
        sort_key=key,
        sort_asc=ascending,
    )

    typer.echo(format_summary(result.aggregates))
    typer.echo("")
    typer.echo(
        f"  Showing {len(result.rows)} of {result.aggregates.total_products} item(s)"
        f"  sort={key.value} {'asc' if ascending else 'desc'}"
    )
    typer.echo(format_catalog_table(
        result.rows,
        limit=limit if limit is not None else config.pipeline.table_rows,
    ))

    if enrichment.rejected:
        typer.echo("")
        typer.echo(f"  [WARN] {len(enrichment.rejected)} record(s) rejected:")
        for rej in enrichment.rejected:
            typer.echo(f"    - {rej.item_id}: {rej.reason}")

    if json_out:
        path = export_to_json(
            build_report_payload(result.rows, result.aggregates), Path(json_out)
        )
        typer.echo(f"  JSON written: {path}")
    if csv_out:
        path = export_to_csv(enriched_to_records(result.rows), Path(csv_out))
        typer.echo(f"  CSV written: {path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
