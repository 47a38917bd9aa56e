"""
Reorder Advisor — inventory reorder decision engine.

Trains a small classifier once per process, classifies each catalog item,
derives a suggested reorder quantity and weeks of stock, and serves a
filtered, sorted, summarised view of the enriched catalog.
"""

__version__ = "0.1.0"
