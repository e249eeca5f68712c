# product_catalog/loading.py
"""
Cache-aside loading on top of CacheStore.

Responsibilities:
  - decide whether a stored entry is still fresh (CachedAccessor)
  - collapse concurrent reloads of the same key into one loader call (LoadCoordinator)
  - hand every caller of a load cycle the same value, or the same LoadError

Loaders run on a worker pool, so callers get a Future and choose whether to block.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, TypeVar

from .cache import CacheEntry, CacheStore

T = TypeVar("T")

Clock = Callable[[], float]
Loader = Callable[[], T]

log = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60
DEFAULT_WORKERS = 8


class LoadError(Exception):
    """A loader failed. `cause` is whatever the loader raised; it is never cached."""

    def __init__(self, key: str, cause: BaseException) -> None:
        super().__init__(f"loading {key!r} failed: {cause}")
        self.key = key
        self.cause = cause
        self.__cause__ = cause


def _resolved(value: T) -> "Future[T]":
    fut: Future = Future()
    fut.set_running_or_notify_cancel()
    fut.set_result(value)
    return fut


def _values_of(source: "Future[CacheEntry]") -> Future:
    """A future that resolves with source's entry value, or source's exception."""
    out: Future = Future()
    out.set_running_or_notify_cancel()

    def copy(done: Future) -> None:
        exc = done.exception()
        if exc is not None:
            out.set_exception(exc)
        else:
            out.set_result(done.result().value)

    source.add_done_callback(copy)
    return out


class LoadCoordinator:
    """Runs at most one loader per key at a time and fans the outcome out to every waiter."""

    def __init__(
        self,
        store: CacheStore,
        clock: Clock = time.time,
        executor: Optional[Executor] = None,
        max_workers: int = DEFAULT_WORKERS,
    ) -> None:
        """
        Args:
            store: where successful loads are written.
            clock: time source for CacheEntry.created_at.
            executor: pool that runs loaders. If omitted, the coordinator owns a thread pool.
            max_workers: size of the owned pool (ignored when executor is given).
        """
        self.store = store
        self.clock = clock
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="catalog-loader",
        )
        self._in_flight: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def fetch_once(
        self,
        key: str,
        loader: Loader,
        is_fresh: Optional[Callable[[CacheEntry], bool]] = None,
    ) -> "Future[CacheEntry]":
        """
        Return a future for key's new CacheEntry, starting the loader only if no load is already running.

        The future is marked running before it is shared, so one caller cannot cancel it
        for the others. Callers that lose interest simply stop waiting.

        Args:
            is_fresh: when given, the stored entry is checked again under the registry lock,
                so a caller that read a stale entry just before a reload finished reuses it.

        Raises:
            LoadError if the executor no longer accepts work.
        """
        with self._lock:
            pending = self._in_flight.get(key)
            if pending is not None:
                log.debug("joining in-flight load key=%s", key)
                return pending
            if is_fresh is not None:
                entry = self.store.peek(key)
                if entry is not None and is_fresh(entry):
                    log.debug("reload already landed key=%s", key)
                    return _resolved(entry)
            pending = Future()
            pending.set_running_or_notify_cancel()
            self._in_flight[key] = pending

        log.debug("starting load key=%s", key)
        try:
            self._executor.submit(self._run, key, loader, pending)
        except RuntimeError as exc:
            # Someone may have attached between registration and submit.
            error = LoadError(key, exc)
            self._release(key, pending)
            pending.set_exception(error)
            raise error
        return pending

    def _run(self, key: str, loader: Loader, pending: Future) -> None:
        try:
            entry = CacheEntry(value=loader(), created_at=self.clock())
            self.store.put(key, entry)
        except BaseException as exc:
            error = exc if isinstance(exc, LoadError) else LoadError(key, exc)
            self._release(key, pending)
            log.warning("load failed key=%s: %r", key, exc)
            pending.set_exception(error)
            if not isinstance(exc, Exception):
                raise
            return

        self._release(key, pending)
        pending.set_result(entry)

    def _release(self, key: str, pending: Future) -> None:
        with self._lock:
            if self._in_flight.get(key) is pending:
                del self._in_flight[key]

    def in_flight(self) -> List[str]:
        """Snapshot of keys currently being loaded."""
        with self._lock:
            return list(self._in_flight.keys())

    def shutdown(self, wait: bool = True) -> None:
        """Stop the owned worker pool. An injected executor is left to its owner."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)


class CachedAccessor:
    """
    Entry point for cached reads.

    A fresh entry is served straight from the store. Anything else (missing, expired)
    goes through the coordinator, which is the only code that writes to the store.
    """

    def __init__(
        self,
        store: CacheStore,
        coordinator: LoadCoordinator,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Optional[Clock] = None,
    ) -> None:
        self.store = store
        self.coordinator = coordinator
        self.ttl_seconds = ttl_seconds
        self.clock = clock or coordinator.clock

    def is_fresh(self, entry: CacheEntry) -> bool:
        """True while the entry is younger than the TTL. An age equal to the TTL is stale."""
        return (self.clock() - entry.created_at) < self.ttl_seconds

    def get_entry_or_load(self, key: str, loader: Loader) -> "Future[CacheEntry]":
        """
        Like get_or_load, but the future carries the whole CacheEntry.

        Use this when the caller also needs to know when the value was produced;
        value and created_at always belong to the same load.
        """
        entry = self.store.get(key)
        if entry is not None and self.is_fresh(entry):
            log.debug("cache hit key=%s", key)
            return _resolved(entry)

        log.debug("cache %s key=%s", "stale" if entry is not None else "miss", key)
        return self.coordinator.fetch_once(key, loader, is_fresh=self.is_fresh)

    def get_or_load(self, key: str, loader: Loader) -> Future:
        """
        Return a future for the value under key.

        Args:
            key: cache key, e.g. "products" or "product:42".
            loader: zero-argument callable fetching the value when the cache is stale/missing.

        Returns:
            An already-resolved future on a fresh hit, otherwise one that follows the shared
            in-flight load. A failed load resolves with LoadError.
        """
        return _values_of(self.get_entry_or_load(key, loader))

    def load(self, key: str, loader: Loader, timeout: Optional[float] = None):
        """
        Blocking form of get_or_load.

        Raises:
            LoadError if the loader failed.
            concurrent.futures.TimeoutError if timeout elapses first; the load keeps going.
        """
        return self.get_or_load(key, loader).result(timeout=timeout)

    def invalidate(self, key: str) -> bool:
        return self.store.invalidate(key)

    def clear(self) -> None:
        self.store.clear()
