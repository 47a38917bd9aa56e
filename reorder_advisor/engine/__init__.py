"""
Reorder decision engine.

Modules
-------
evaluator : ReorderEvaluator — per-item classification + derived metrics;
            evaluate_catalog() batch enrichment with per-item rejection.
pipeline  : run_pipeline() — text filter, reorder-only filter, stable sort,
            and catalog aggregates. Pure functions, no I/O.
"""
