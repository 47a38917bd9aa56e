"""
Product catalog source.

Fetches raw product records from a JSON products endpoint (default:
``https://dummyjson.com/products``) or from a local JSON file. Raw records
carry identity fields only (``id``, ``title``/``name``, optional ``sku``);
stock and sales figures are filled in by ``reorder_advisor.ingestion.augment``.

Two payload shapes are accepted, both from the API and from files::

    {"products": [{...}, {...}], "total": 194, ...}
    [{...}, {...}]

Fixture mode (no network)::

    client = CatalogClient()
    records = client.get_fixture_records()
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, ClassVar, Optional

import httpx

logger = logging.getLogger(__name__)


def extract_records(payload: Any) -> list[dict[str, Any]]:
    """Return the list of product dicts from either supported payload shape.

    Raises:
        ValueError: If the payload is neither a list nor a dict with a
            ``products`` list, or contains non-object entries.
    """
    if isinstance(payload, dict):
        records = payload.get("products")
    else:
        records = payload
    if not isinstance(records, list):
        raise ValueError(
            "Catalog payload must be a JSON list or an object with a 'products' list."
        )
    bad = [i for i, r in enumerate(records) if not isinstance(r, dict)]
    if bad:
        raise ValueError(f"Catalog entries at positions {bad[:5]} are not JSON objects.")
    return records


def load_catalog_file(path: Path) -> list[dict[str, Any]]:
    """Load raw catalog records from a JSON file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError:        If the file content has an unsupported shape.
    """
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")
    payload = json.loads(path.read_text(encoding="utf-8"))
    records = extract_records(payload)
    logger.info("Loaded %d catalog record(s) from %s", len(records), path)
    return records


class CatalogClient:
    """HTTP client for a JSON product catalog.

    Attributes:
        source_url: Products endpoint.
        timeout_s:  Per-request timeout in seconds.
    """

    FIXTURE_RECORDS: ClassVar[list[dict[str, Any]]] = [
        {"id": 1, "title": "Essence Mascara Lash Princess"},
        {"id": 2, "title": "Eyeshadow Palette with Mirror"},
        {"id": 3, "title": "Powder Canister"},
        {"id": 4, "title": "Red Lipstick"},
        {"id": 5, "title": "Red Nail Polish"},
        {"id": 6, "title": "Calvin Klein CK One"},
        {"id": 7, "title": "Chanel Coco Noir Eau De"},
        {"id": 8, "title": "Dior J'adore"},
        {"id": 9, "title": "Dolce Shine Eau de"},
        {"id": 10, "title": "Gucci Bloom Eau de"},
    ]

    def __init__(
        self,
        source_url: str = "https://dummyjson.com/products",
        timeout_s: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialise the catalog client.

        Args:
            source_url:  Products endpoint URL.
            timeout_s:   Request timeout in seconds.
            http_client: Optional pre-configured ``httpx.Client`` (e.g. with a
                mock transport). When omitted, module-level ``httpx.get`` is used.
        """
        self.source_url = source_url
        self.timeout_s = timeout_s
        self._http = http_client

    def fetch_products(self, limit: int = 100) -> list[dict[str, Any]]:
        """Fetch up to ``limit`` raw product records.

        Endpoint::

            GET {source_url}?limit={limit}

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
            ValueError:            If the response body has an unsupported shape.
        """
        params = {"limit": limit}
        if self._http is not None:
            resp = self._http.get(self.source_url, params=params, timeout=self.timeout_s)
        else:
            resp = httpx.get(self.source_url, params=params, timeout=self.timeout_s)
        resp.raise_for_status()
        records = extract_records(resp.json())
        logger.info("Fetched %d product record(s) from %s", len(records), self.source_url)
        return records

    def get_fixture_records(self) -> list[dict[str, Any]]:
        """Return a copy of the built-in fixture records (offline mode)."""
        return [dict(r) for r in self.FIXTURE_RECORDS]
