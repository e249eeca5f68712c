"""
Flask entrypoint for the product catalog service.

Routes (JSON):
  - /api/products
  - /api/products/<id>
  - /api/cache            (GET: cache status)
  - /api/cache/<key>      (DELETE: drop one cached key)
  - /health

Notes:
  - The cache store, load coordinator and accessor are built once per process in
    create_app() and injected into the product service; nothing is a module global.
  - A failed remote load returns 502. Retrying is just repeating the request.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import Executor, TimeoutError as FuturesTimeout
from typing import Any, Callable, Dict, Optional

from flask import Flask, jsonify

from product_catalog.cache import CacheStore
from product_catalog.catalog_client import CatalogClient
from product_catalog.config import AppConfig
from product_catalog.handlers.product_handler import ProductHandler
from product_catalog.loading import CachedAccessor, LoadCoordinator, LoadError
from product_catalog.models import Product, Review
from product_catalog.services.product_service import ProductService

log = logging.getLogger(__name__)


def create_app(
    cfg: Optional[AppConfig] = None,
    client: Optional[CatalogClient] = None,
    clock: Callable[[], float] = time.time,
    executor: Optional[Executor] = None,
) -> Flask:
    """
    App factory.

    Builds shared dependencies (client + store + coordinator + accessor) once per process.
    Tests pass their own client, clock and executor.
    """
    cfg = cfg or AppConfig()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = client or CatalogClient(cfg.catalog_api_base, timeout=cfg.http_timeout_seconds)
    store = CacheStore(capacity=cfg.cache_capacity)
    coordinator = LoadCoordinator(
        store,
        clock=clock,
        executor=executor,
        max_workers=cfg.loader_workers,
    )
    accessor = CachedAccessor(store, coordinator, ttl_seconds=cfg.cache_ttl_seconds)
    products = ProductService(client=client, accessor=accessor)
    handler = ProductHandler(
        product_service=products,
        tz_name=cfg.tz,
        timeout=cfg.response_timeout_seconds,
    )

    app = Flask(__name__)
    app.extensions["product_catalog"] = {
        "accessor": accessor,
        "coordinator": coordinator,
        "products": products,
    }

    # -------------------------
    # Serialization helpers
    # -------------------------

    def review_to_dict(r: Review) -> Dict[str, Any]:
        """Serialize a Review model into JSON-safe primitives."""
        return {
            "rating": r.rating,
            "body": r.body,
            "user": r.user,
            "date": r.date,
        }

    def product_to_dict(p: Product, with_reviews: bool = False) -> Dict[str, Any]:
        """Serialize a Product model; reviews only for the detail view."""
        out: Dict[str, Any] = {
            "id": p.id,
            "title": p.title,
            "description": p.description,
            "price": p.price,
            "thumbnail": p.thumbnail,
            "rating": p.rating,
            "stock": p.stock,
        }
        if with_reviews:
            out["images"] = list(p.images)
            out["reviews"] = [review_to_dict(r) for r in p.reviews]
        return out

    # -------------------------
    # Error mapping
    # -------------------------

    @app.errorhandler(LoadError)
    def load_failed(err: LoadError):
        """Upstream catalog failure: report it, never cache it."""
        log.warning("responding 502 for key=%s", err.key)
        what = "product details" if err.key.startswith("product:") else "products"
        return jsonify({"error": f"Failed to load {what}. Please try again.", "key": err.key}), 502

    @app.errorhandler(FuturesTimeout)
    def load_timed_out(err):
        """The load is still running; a later request will pick it up from the cache."""
        return jsonify({"error": "The catalog is taking too long to respond. Please try again."}), 504

    # -------------------------
    # Product routes
    # -------------------------

    @app.get("/api/products")
    def api_products():
        """Product list JSON payload."""
        vm = handler.build_list()
        return jsonify(
            {
                "generatedAt": vm.now.isoformat(),
                "cachedAt": vm.cached_at.isoformat() if vm.cached_at else None,
                "total": vm.total,
                "products": [product_to_dict(p) for p in vm.products],
            }
        )

    @app.get("/api/products/<int:product_id>")
    def api_product_detail(product_id: int):
        """Product detail JSON payload, reviews included."""
        vm = handler.build_detail(product_id)
        return jsonify(
            {
                "generatedAt": vm.now.isoformat(),
                "cachedAt": vm.cached_at.isoformat() if vm.cached_at else None,
                "averageReviewRating": vm.average_review_rating,
                "product": product_to_dict(vm.product, with_reviews=True),
            }
        )

    # -------------------------
    # Cache maintenance
    # -------------------------

    @app.get("/api/cache")
    def api_cache_status():
        """Cache occupancy and in-flight loads."""
        return jsonify(
            {
                "capacity": store.capacity,
                "size": len(store),
                "ttlSeconds": accessor.ttl_seconds,
                "keys": store.keys(),
                "inFlight": coordinator.in_flight(),
            }
        )

    @app.delete("/api/cache/<path:key>")
    def api_cache_invalidate(key: str):
        """Drop one key so the next read reloads it."""
        removed = accessor.invalidate(key)
        log.info("cache invalidate key=%s removed=%s", key, removed)
        return jsonify({"key": key, "removed": removed})

    # -------------------------
    # Health
    # -------------------------

    @app.get("/health")
    def health():
        """Simple health endpoint for Docker/monitoring checks."""
        return {"ok": True}

    return app


# WSGI entrypoint for gunicorn (app:app)
app = create_app()

if __name__ == "__main__":
    # Dev server (not for production).
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "8000")), debug=True)
