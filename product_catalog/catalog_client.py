# product_catalog/catalog_client.py
"""
Thin HTTP client wrapper for the remote product catalog.
"""

from __future__ import annotations

import requests
from typing import Any, Dict


class CatalogClient:
    """A minimal client for retrieving JSON from the catalog API base."""

    def __init__(self, base_url: str, timeout: int = 10) -> None:
        """Store the base URL and build request headers."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {"User-Agent": "product-catalog/1.0", "Accept": "application/json"}

    def get_json(self, path: str) -> Dict[str, Any]:
        """
        Execute a GET request to base_url + path and return parsed JSON.

        Raises:
            requests.HTTPError on non-2xx responses.
            requests.RequestException on connection failures and timeouts.
            ValueError if the body is not JSON.
        """
        url = f"{self.base_url}{path}"
        r = requests.get(url, timeout=self.timeout, headers=self._headers)
        r.raise_for_status()
        return r.json()

    def products(self) -> Dict[str, Any]:
        """Fetch the product list payload ({"products": [...], "total": ..., ...})."""
        return self.get_json("/products")

    def product(self, product_id: int) -> Dict[str, Any]:
        """Fetch a single product payload, reviews included."""
        return self.get_json(f"/products/{product_id}")
