# product_catalog/services/product_service.py
"""
Product list / product detail flows.

Responsibilities:
  - build cache keys for catalog resources
  - fetch and decode catalog payloads inside the loader, so only decoded models are cached
  - expose both flows as futures from the cached accessor
"""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass

from ..cache import CacheEntry
from ..catalog_client import CatalogClient
from ..loading import CachedAccessor
from ..models import Product, ProductPage


def products_key() -> str:
    """Cache key for the product list."""
    return "products"


def product_key(product_id: int) -> str:
    """Cache key for a single product."""
    return f"product:{product_id}"


@dataclass
class ProductService:
    """Service responsible for returning cached products."""

    client: CatalogClient
    accessor: CachedAccessor

    def _load_products(self) -> ProductPage:
        """Fetch and decode the product list."""
        return ProductPage.from_payload(self.client.products())

    def _product_loader(self, product_id: int):
        def loader() -> Product:
            return Product.from_payload(self.client.product(product_id))
        return loader

    def list_products(self) -> "Future[ProductPage]":
        """Return a future for the product list (cached for the accessor's TTL)."""
        return self.accessor.get_or_load(products_key(), self._load_products)

    def product_detail(self, product_id: int) -> "Future[Product]":
        """Return a future for a single product with reviews."""
        return self.accessor.get_or_load(product_key(product_id), self._product_loader(product_id))

    def list_products_entry(self) -> "Future[CacheEntry]":
        """Product list together with the time it was fetched."""
        return self.accessor.get_entry_or_load(products_key(), self._load_products)

    def product_detail_entry(self, product_id: int) -> "Future[CacheEntry]":
        """Single product together with the time it was fetched."""
        return self.accessor.get_entry_or_load(product_key(product_id), self._product_loader(product_id))
