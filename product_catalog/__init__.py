"""
Product catalog service: cache-aside access to a remote product catalog.
"""
from .cache import CacheEntry, CacheStore
from .loading import CachedAccessor, LoadCoordinator, LoadError

__all__ = ["CacheEntry", "CacheStore", "CachedAccessor", "LoadCoordinator", "LoadError"]
