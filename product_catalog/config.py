# product_catalog/config.py
"""
Configuration for the product catalog service.

This module centralizes all tunable settings (catalog API base URL, cache capacity
and TTL, loader pool size, timeouts, timezone and log level).
"""

from __future__ import annotations

from dataclasses import dataclass
import os


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, returning default on missing/invalid values."""
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _env_float(name: str, default: float) -> float:
    """Read a float environment variable, returning default on missing/invalid values."""
    try:
        return float(os.getenv(name, str(default)))
    except Exception:
        return default


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable app configuration.

    Notes on cache config:
      - cache_capacity: hard ceiling on resident entries (LRU beyond that).
      - cache_ttl_seconds: entries at or past this age are reloaded on next read.
      - loader_workers: threads available for concurrent remote loads.
    """

    # Core settings
    tz: str = os.getenv("TZ", "UTC")
    catalog_api_base: str = os.getenv("CATALOG_API_BASE", "https://dummyjson.com")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Cache controls
    cache_capacity: int = _env_int("CACHE_CAPACITY", 100)
    cache_ttl_seconds: int = _env_int("CACHE_TTL_SECONDS", 60 * 60)
    loader_workers: int = _env_int("LOADER_WORKERS", 8)

    # Timeouts
    http_timeout_seconds: int = _env_int("HTTP_TIMEOUT_SECONDS", 10)
    response_timeout_seconds: float = _env_float("RESPONSE_TIMEOUT_SECONDS", 15.0)

    def __post_init__(self):
        """Clamp out-of-range values back to their defaults."""
        # dataclass frozen => use object.__setattr__
        if self.cache_capacity < 1:
            object.__setattr__(self, "cache_capacity", 100)
        if self.loader_workers < 1:
            object.__setattr__(self, "loader_workers", 8)
        if self.cache_ttl_seconds < 0:
            object.__setattr__(self, "cache_ttl_seconds", 60 * 60)
        if self.http_timeout_seconds < 1:
            object.__setattr__(self, "http_timeout_seconds", 10)
        if self.response_timeout_seconds <= 0:
            object.__setattr__(self, "response_timeout_seconds", 15.0)
