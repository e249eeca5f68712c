# product_catalog/handlers/product_handler.py
"""
Handler/controller responsible for building product view models.

Keeps Flask routes simple by concentrating assembly logic here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from dateutil import tz

from ..models import ProductDetailViewModel, ProductListViewModel
from ..services.product_service import ProductService


@dataclass
class ProductHandler:
    """Waits on the product service futures and shapes the results for display."""

    product_service: ProductService
    tz_name: str
    timeout: Optional[float] = None

    @property
    def app_tz(self):
        """Return the configured timezone object used for all local conversions."""
        return tz.gettz(self.tz_name)

    def _local(self, ts: float) -> datetime:
        """Convert a clock reading to a local datetime."""
        return datetime.fromtimestamp(ts, tz=self.app_tz)

    def build_list(self) -> ProductListViewModel:
        """
        Build the product list view model.

        Raises:
            LoadError if the catalog could not be loaded.
            concurrent.futures.TimeoutError if the load outlasts the handler timeout.
        """
        entry = self.product_service.list_products_entry().result(timeout=self.timeout)
        page = entry.value
        return ProductListViewModel(
            now=datetime.now(tz=self.app_tz),
            products=page.products,
            total=page.total,
            cached_at=self._local(entry.created_at),
        )

    def build_detail(self, product_id: int) -> ProductDetailViewModel:
        """
        Build the product detail view model (reviews included).

        Raises:
            LoadError if the product could not be loaded.
            concurrent.futures.TimeoutError if the load outlasts the handler timeout.
        """
        entry = self.product_service.product_detail_entry(product_id).result(timeout=self.timeout)
        product = entry.value
        return ProductDetailViewModel(
            now=datetime.now(tz=self.app_tz),
            product=product,
            average_review_rating=product.average_review_rating,
            cached_at=self._local(entry.created_at),
        )
