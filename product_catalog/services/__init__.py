# product_catalog/services/__init__.py
"""
Services package exports.
"""
from .product_service import ProductService, product_key, products_key

__all__ = ["ProductService", "product_key", "products_key"]
