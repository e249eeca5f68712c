"""
Pytest configuration and fixtures.
"""
import threading

import pytest

from product_catalog.cache import CacheStore
from product_catalog.loading import CachedAccessor, LoadCoordinator


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def product_payload(product_id, title="Essence Mascara Lash Princess", reviews=None):
    return {
        "id": product_id,
        "title": title,
        "description": "A popular mascara known for its volumizing effects.",
        "price": 9.99,
        "thumbnail": f"https://cdn.dummyjson.com/products/{product_id}/thumbnail.png",
        "images": [f"https://cdn.dummyjson.com/products/{product_id}/1.png"],
        "rating": 4.94,
        "stock": 5,
        "reviews": reviews if reviews is not None else [
            {"rating": 2, "comment": "Very unhappy with my purchase!", "date": "2024-05-23T08:56:21.618Z",
             "reviewerName": "John Doe", "reviewerEmail": "john.doe@x.dummyjson.com"},
            {"rating": 5, "comment": "Very satisfied!", "date": "2024-05-23T08:56:21.618Z",
             "reviewerName": "Nolan Gonzalez", "reviewerEmail": "nolan.gonzalez@x.dummyjson.com"},
        ],
    }


class StubClient:
    """Stands in for CatalogClient; records calls and can fail or block on demand."""

    def __init__(self, products=None):
        self.products_payload = {
            "products": products if products is not None else [product_payload(1), product_payload(2, "Eyeshadow Palette")],
            "total": 194,
            "skip": 0,
            "limit": 30,
        }
        self.calls = []
        self.fail = None
        self.gate = None

    def _enter(self, call):
        self.calls.append(call)
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.fail is not None:
            raise self.fail

    def products(self):
        self._enter("products")
        return self.products_payload

    def product(self, product_id):
        self._enter(f"product:{product_id}")
        return product_payload(product_id)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return CacheStore(capacity=100)


@pytest.fixture
def coordinator(store, clock):
    coord = LoadCoordinator(store, clock=clock, max_workers=16)
    yield coord
    coord.shutdown(wait=False)


@pytest.fixture
def accessor(store, coordinator):
    return CachedAccessor(store, coordinator, ttl_seconds=3600)


@pytest.fixture
def stub_client():
    return StubClient()


@pytest.fixture
def gate():
    ev = threading.Event()
    yield ev
    ev.set()


@pytest.fixture
def make_product_payload():
    """Factory for catalog product payloads."""
    return product_payload
