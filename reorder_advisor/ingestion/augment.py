"""
Raw record augmentation and catalog padding.

Product feeds carry identity fields but no stock or sales figures. Until a
real inventory source is wired in, ``augment_record()`` simulates them:

  current_inventory   uniform int in [0, 500]
  avg_sales_per_week  uniform float in [0, 40), rounded to 1 dp
  days_to_replenish   uniform int in [1, 30]

Figures already present on a record are kept as-is, so a feed that does carry
real numbers is passed through untouched.

All randomness comes from the ``random.Random`` passed in, so a seeded
generator reproduces the same catalog.

``pad_catalog()`` clones records until a minimum catalog size is reached.
Clones get ``"{id}-dup-{n}"`` identifiers, where ``n`` is the clone's
position; a collision with an existing id bumps ``n`` until it is unique.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Optional

logger = logging.getLogger(__name__)

MAX_SIMULATED_INVENTORY = 500
MAX_SIMULATED_WEEKLY_SALES = 40.0
MAX_SIMULATED_LEAD_DAYS = 30


def augment_record(raw: dict[str, Any], rng: random.Random) -> dict[str, Any]:
    """Map a raw product record onto the catalog item shape.

    Args:
        raw: Source record with ``id`` and ``title`` or ``name``.
        rng: Random source for simulated figures.

    Returns:
        Dict with ``id``, ``name``, ``sku``, ``current_inventory``,
        ``avg_sales_per_week`` and ``days_to_replenish``. Missing identity
        fields are left as ``None`` so validation rejects the record later.
    """
    item_id = raw.get("id")
    current_inventory = raw.get("current_inventory")
    if current_inventory is None:
        current_inventory = rng.randint(0, MAX_SIMULATED_INVENTORY)
    avg_sales = raw.get("avg_sales_per_week")
    if avg_sales is None:
        avg_sales = round(rng.random() * MAX_SIMULATED_WEEKLY_SALES, 1)
    lead_days = raw.get("days_to_replenish")
    if lead_days is None:
        lead_days = rng.randint(1, MAX_SIMULATED_LEAD_DAYS)

    return {
        "id": item_id,
        "name": raw.get("title", raw.get("name")),
        "sku": raw.get("sku", item_id),
        "current_inventory": current_inventory,
        "avg_sales_per_week": avg_sales,
        "days_to_replenish": lead_days,
    }


def augment_records(
    raws: list[dict[str, Any]],
    seed: Optional[int] = None,
) -> list[dict[str, Any]]:
    """Augment a list of raw records with one generator seeded by ``seed``."""
    rng = random.Random(seed)
    return [augment_record(r, rng) for r in raws]


def pad_catalog(records: list[dict[str, Any]], min_size: int) -> list[dict[str, Any]]:
    """Clone records until the catalog holds at least ``min_size`` entries.

    Originals are cycled in order; each clone keeps the figures of its
    source record and gets a fresh unique id. Empty input is returned as is.
    """
    if not records or len(records) >= min_size:
        return list(records)

    padded = list(records)
    used_ids = {str(r.get("id")) for r in records}
    n_originals = len(records)

    while len(padded) < min_size:
        source = records[len(padded) % n_originals]
        n = len(padded)
        clone_id = f"{source.get('id')}-dup-{n}"
        while clone_id in used_ids:
            n += 1
            clone_id = f"{source.get('id')}-dup-{n}"
        used_ids.add(clone_id)
        padded.append({**source, "id": clone_id})

    logger.info(
        "Padded catalog from %d to %d record(s)", n_originals, len(padded)
    )
    return padded
