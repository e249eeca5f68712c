# product_catalog/models.py
"""
Domain models for the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Sequence


def safe_int(v, default=0) -> int:
    """Convert a value to int safely; return default on failures."""
    try:
        return int(v)
    except Exception:
        return default


def safe_float(v, default=0.0) -> float:
    """Convert a value to float safely; return default on failures."""
    try:
        return float(v)
    except Exception:
        return default


def _opt_str(v) -> Optional[str]:
    return v.strip() if isinstance(v, str) and v.strip() else None


@dataclass(frozen=True)
class Review:
    """A single product review."""
    rating: int
    body: Optional[str] = None
    user: Optional[str] = None
    date: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Review":
        """
        Normalize a review payload.

        Payload can be either:
          - {"rating": 4, "comment": "...", "reviewerName": "..."}
          - {"rating": 4, "body": "...", "user": {"username": "..."}} (or "user": "...")
        """
        user = raw.get("reviewerName") or raw.get("user")
        if isinstance(user, dict):
            user = user.get("username") or user.get("fullName")
        return cls(
            rating=safe_int(raw.get("rating"), 0),
            body=_opt_str(raw.get("comment") or raw.get("body")),
            user=_opt_str(user),
            date=_opt_str(raw.get("date")),
        )


@dataclass(frozen=True)
class Product:
    """A normalized catalog product."""
    id: int
    title: str
    description: str
    price: float
    thumbnail: str
    images: Sequence[str] = ()
    rating: float = 0.0
    stock: int = 0
    reviews: Sequence[Review] = ()

    @classmethod
    def from_payload(cls, raw: Any) -> "Product":
        """
        Build a Product from a catalog payload.

        Raises:
            ValueError if the payload is not an object or has no usable id.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"product payload must be an object, got {type(raw).__name__}")
        pid = safe_int(raw.get("id"), -1)
        if pid < 0:
            raise ValueError(f"product payload has no valid id: {raw.get('id')!r}")

        images = raw.get("images")
        reviews = raw.get("reviews")
        return cls(
            id=pid,
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            price=safe_float(raw.get("price"), 0.0),
            thumbnail=str(raw.get("thumbnail") or ""),
            images=tuple(i for i in images if isinstance(i, str)) if isinstance(images, list) else (),
            rating=safe_float(raw.get("rating"), 0.0),
            stock=safe_int(raw.get("stock"), 0),
            reviews=tuple(Review.from_payload(r) for r in reviews if isinstance(r, dict))
            if isinstance(reviews, list) else (),
        )

    @property
    def average_review_rating(self) -> Optional[float]:
        """Mean of review ratings, or None without reviews."""
        if not self.reviews:
            return None
        return sum(r.rating for r in self.reviews) / len(self.reviews)


@dataclass(frozen=True)
class ProductPage:
    """The product list as returned by the catalog. An empty page is still a valid page."""
    products: Sequence[Product]
    total: int
    skip: int = 0
    limit: int = 0

    @classmethod
    def from_payload(cls, raw: Any) -> "ProductPage":
        """
        Build a ProductPage from the list payload.

        Raises:
            ValueError if the payload lacks a "products" list.
        """
        if not isinstance(raw, dict) or not isinstance(raw.get("products"), list):
            raise ValueError("product list payload has no 'products' list")
        products = tuple(Product.from_payload(p) for p in raw["products"])
        return cls(
            products=products,
            total=safe_int(raw.get("total"), len(products)),
            skip=safe_int(raw.get("skip"), 0),
            limit=safe_int(raw.get("limit"), len(products)),
        )


@dataclass(frozen=True)
class ProductListViewModel:
    """All data needed to render the product list."""
    now: datetime
    products: Sequence[Product]
    total: int
    cached_at: Optional[datetime] = None


@dataclass(frozen=True)
class ProductDetailViewModel:
    """All data needed to render a product detail page."""
    now: datetime
    product: Product
    average_review_rating: Optional[float] = None
    cached_at: Optional[datetime] = None
