"""
Domain models (pydantic, frozen).

Modules
-------
catalog  : CatalogItem — validated post-augmentation input record.
decision : WeeksOfStock, ReorderDecision, EnrichedItem — evaluator output.
"""
