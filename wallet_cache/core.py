"""
Core asynchronous memoization store for the wallet cache.

The store keeps one entry per key. A key that is missing or stale starts a
single computation; every caller that asks for the key while that computation
is running waits on the same result instead of starting its own. Successful
results are kept for the TTL of their category, failures are never kept.

A single lock guards the key map and is only held for metadata transitions,
never while a computation runs, so slow lookups do not block other keys. The
in-flight result is shared through a ``concurrent.futures.Future`` which lets
callers in other threads and event loops wait on it too.
"""
import asyncio
import dataclasses
import inspect
import math
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar, Union

import structlog

from .categories import CacheCategory
from .exceptions import CacheError, InvalidKeyError
from .keys import scope_matches
from .monitoring import CacheMonitor, get_monitor

logger = structlog.get_logger()

# Type variable for generic factory return types
T = TypeVar('T')

Factory = Callable[[], Union[Awaitable[T], T]]


class EntryState(Enum):
    PENDING = "pending"
    READY = "ready"
    EXPIRED = "expired"


@dataclass
class CacheEntry:
    """One memoized computation and its bookkeeping."""
    key: str
    category: CacheCategory
    state: EntryState = EntryState.PENDING
    value: Any = None
    produced_at: Optional[float] = None
    in_flight: Optional[Future] = field(default=None, repr=False, compare=False)

    @property
    def slot(self) -> Tuple[CacheCategory, str]:
        return self.category, self.key

    def is_fresh(self, now: float, ttl: float) -> bool:
        if self.state is not EntryState.READY or self.produced_at is None:
            return False
        return now - self.produced_at < ttl


class CacheStore:
    """
    Process-wide store of in-flight and completed asynchronous computations.

    Entries are created lazily by ``get_or_compute`` and only ever changed by
    the store. Callers never see a pending or stale value.
    """

    def __init__(
        self,
        ttl_policy: Optional[Mapping[Any, float]] = None,
        max_size: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
        monitor: Optional[CacheMonitor] = None,
    ):
        """
        Initialize the store.

        Args:
            ttl_policy: Seconds to keep a value, per category. Defaults to
                the TTLs from ``CacheSettings``
            max_size: Maximum number of ready entries, or None for unbounded
            clock: Monotonic clock used for freshness checks
            monitor: Metrics recorder, or None to use the global monitor
        """
        if ttl_policy is None:
            from .config.settings import get_settings
            ttl_policy = get_settings().ttl_policy()
        self._ttl_policy = self._build_policy(ttl_policy)

        if max_size is not None and max_size <= 0:
            raise ValueError("max_size must be positive")
        self._max_size = max_size
        self._clock = clock
        self._monitor = monitor if monitor is not None else get_monitor()

        # Indexed by (category, key) so categories never share an entry
        self._entries: Dict[Tuple[CacheCategory, str], CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._coalesced = 0
        self._evictions = 0

    @staticmethod
    def _build_policy(ttl_policy: Mapping[Any, float]) -> Dict[CacheCategory, float]:
        policy = {}
        for category, ttl in ttl_policy.items():
            ttl = float(ttl)
            if math.isnan(ttl) or ttl < 0:
                raise ValueError(f"TTL for {category} must be >= 0, got {ttl}")
            policy[CacheCategory.coerce(category)] = ttl

        missing = [c.name for c in CacheCategory if c not in policy]
        if missing:
            raise CacheError(f"No TTL configured for categories: {', '.join(missing)}")
        return policy

    def ttl(self, category: CacheCategory) -> float:
        return self._ttl_policy[CacheCategory.coerce(category)]

    async def get_or_compute(self, key: str, category: CacheCategory, factory: Factory) -> T:
        """
        Return the fresh value for ``key`` or compute it with ``factory``.

        Concurrent callers asking for the same key while a computation is in
        flight all receive its result; ``factory`` runs once for them.

        Args:
            key: Cache key, see ``wallet_cache.keys``
            category: Cache category deciding the TTL
            factory: Zero-argument callable returning an awaitable (or a
                plain value) that produces the result

        Returns:
            The cached or freshly computed value

        Raises:
            InvalidKeyError: If the key is empty or not a string
            UnknownCategoryError: If the category is not a CacheCategory
            Exception: Whatever ``factory`` raised; nothing is cached
        """
        if not isinstance(key, str) or not key.strip():
            raise InvalidKeyError(f"Cache key must be a non-empty string, got {key!r}")
        category = CacheCategory.coerce(category)
        if not callable(factory):
            raise TypeError("factory must be callable")

        ttl = self._ttl_policy[category]

        with self._lock:
            entry = self._entries.get((category, key))
            if entry is not None and entry.state is EntryState.PENDING:
                self._coalesced += 1
                future = entry.in_flight
                leader = False
            elif entry is not None and entry.is_fresh(self._clock(), ttl):
                self._hits += 1
                value = entry.value
                future = None
                leader = False
            else:
                if entry is not None:
                    entry.state = EntryState.EXPIRED
                future = Future()
                entry = CacheEntry(key=key, category=category, in_flight=future)
                self._entries[entry.slot] = entry
                self._misses += 1
                leader = True

        if future is None:
            self._monitor.record_hit(category)
            logger.debug("Cache hit", key=key, category=category.value)
            return value

        if not leader:
            self._monitor.record_coalesced(category)
            logger.debug("Waiting on in-flight computation", key=key, category=category.value)
            # Shielded so a cancelled waiter does not cancel the shared result
            return await asyncio.shield(asyncio.wrap_future(future))

        self._monitor.record_miss(category)
        logger.debug("Cache miss", key=key, category=category.value)
        return await self._compute(entry, ttl, factory)

    async def _compute(self, entry: CacheEntry, ttl: float, factory: Factory) -> Any:
        future = entry.in_flight
        started = time.perf_counter()
        try:
            value = factory()
            if inspect.isawaitable(value):
                value = await value
        except BaseException as exc:
            with self._lock:
                if self._entries.get(entry.slot) is entry:
                    del self._entries[entry.slot]
                entry.state = EntryState.EXPIRED
                entry.in_flight = None
            self._monitor.record_failure(entry.category)
            future.set_exception(exc)
            raise

        self._monitor.record_latency(entry.category, time.perf_counter() - started)

        with self._lock:
            entry.value = value
            entry.produced_at = self._clock()
            entry.in_flight = None
            if self._entries.get(entry.slot) is not entry:
                # Invalidated while in flight; waiters still get the value
                entry.state = EntryState.EXPIRED
            elif ttl <= 0:
                entry.state = EntryState.EXPIRED
                del self._entries[entry.slot]
            else:
                entry.state = EntryState.READY
                self._evict_locked(keep=entry)
            size = self._ready_count_locked()

        self._monitor.update_size(size)
        future.set_result(value)
        return value

    def _ready_count_locked(self) -> int:
        return sum(1 for e in self._entries.values() if e.state is EntryState.READY)

    def _evict_locked(self, keep: CacheEntry) -> None:
        if self._max_size is None:
            return
        ready = [e for e in self._entries.values() if e.state is EntryState.READY and e is not keep]
        overflow = len(ready) + 1 - self._max_size
        if overflow <= 0:
            return
        ready.sort(key=lambda e: e.produced_at)
        for entry in ready[:overflow]:
            del self._entries[entry.slot]
            entry.state = EntryState.EXPIRED
            self._evictions += 1
            self._monitor.record_eviction(entry.category)
            logger.debug("Evicted cache entry", key=entry.key, category=entry.category.value)

    def _drop_locked(self, slot: Tuple[CacheCategory, str]) -> None:
        entry = self._entries.pop(slot)
        entry.state = EntryState.EXPIRED

    def _slots_locked(self, key: str, category: Optional[CacheCategory] = None) -> List[Tuple[CacheCategory, str]]:
        if category is not None:
            slot = (CacheCategory.coerce(category), key)
            return [slot] if slot in self._entries else []
        return [slot for slot in self._entries if slot[1] == key]

    def invalidate(self, key: str, category: Optional[CacheCategory] = None) -> bool:
        """
        Drop the entry for ``key``.

        A computation in flight for the key still resolves its current
        waiters but its result is not kept.

        Args:
            key: Cache key
            category: Only drop the entry of this category, or None for any

        Returns:
            True if an entry was dropped
        """
        with self._lock:
            slots = self._slots_locked(key, category)
            for slot in slots:
                self._drop_locked(slot)
        return bool(slots)

    def invalidate_scope(self, key: str) -> int:
        """Drop ``key`` and every argument-fingerprinted key derived from it."""
        with self._lock:
            slots = [slot for slot in self._entries if scope_matches(key, slot[1])]
            for slot in slots:
                self._drop_locked(slot)
        if slots:
            logger.debug("Invalidated cache scope", key=key, count=len(slots))
        return len(slots)

    def invalidate_category(self, category: CacheCategory) -> int:
        """Drop every entry of ``category`` across all accounts and networks."""
        category = CacheCategory.coerce(category)
        with self._lock:
            slots = [slot for slot in self._entries if slot[0] is category]
            for slot in slots:
                self._drop_locked(slot)
        logger.info("Invalidated cache category", category=category.value, count=len(slots))
        return len(slots)

    def clear(self) -> None:
        """Drop every entry and reset statistics."""
        with self._lock:
            for slot in list(self._entries):
                self._drop_locked(slot)
            self._hits = 0
            self._misses = 0
            self._coalesced = 0
            self._evictions = 0
        self._monitor.update_size(0)

    def reap(self, grace: float = 1.0) -> int:
        """
        Drop ready entries whose age exceeds ``ttl * grace``.

        Stale entries are already never served; reaping only bounds memory.

        Returns:
            Number of entries dropped
        """
        now = self._clock()
        with self._lock:
            slots = [
                slot for slot, e in self._entries.items()
                if e.state is EntryState.READY
                and now - e.produced_at >= self._ttl_policy[e.category] * grace
            ]
            for slot in slots:
                self._drop_locked(slot)
            size = self._ready_count_locked()
        self._monitor.update_size(size)
        if slots:
            logger.info("Reaped stale cache entries", count=len(slots))
        return len(slots)

    def peek(self, key: str, category: Optional[CacheCategory] = None) -> Optional[CacheEntry]:
        """Snapshot of the entry for ``key`` without affecting it."""
        with self._lock:
            slots = self._slots_locked(key, category)
            if not slots:
                return None
            entry = self._entries[slots[0]]
            snapshot = dataclasses.replace(entry, in_flight=None)
            ttl = self._ttl_policy[entry.category]
            if entry.state is EntryState.READY and not entry.is_fresh(self._clock(), ttl):
                snapshot.state = EntryState.EXPIRED
            return snapshot

    def __contains__(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            return any(
                self._entries[slot].is_fresh(now, self._ttl_policy[slot[0]])
                for slot in self._slots_locked(key)
            )

    def __len__(self) -> int:
        with self._lock:
            return self._ready_count_locked()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        with self._lock:
            ready = [e for e in self._entries.values() if e.state is EntryState.READY]
            pending = len(self._entries) - len(ready)
            hits, misses = self._hits, self._misses
            stats = {
                'size': len(ready),
                'pending': pending,
                'max_size': self._max_size,
                'hits': hits,
                'misses': misses,
                'coalesced': self._coalesced,
                'evictions': self._evictions,
                'categories': {
                    c.value: sum(1 for e in ready if e.category is c) for c in CacheCategory
                },
            }
        total_requests = hits + misses
        stats['hit_ratio'] = hits / total_requests if total_requests > 0 else 0
        return stats


# Process-wide store, built on first use
_global_store: Optional[CacheStore] = None
_global_lock = threading.Lock()

def get_store() -> CacheStore:
    """Get the process-wide store, creating it from settings on first use."""
    global _global_store
    with _global_lock:
        if _global_store is None:
            from .config.settings import get_settings
            settings = get_settings()
            _global_store = CacheStore(
                ttl_policy=settings.ttl_policy(),
                max_size=settings.max_size,
            )
        return _global_store

def reset_store() -> None:
    """Clear and discard the process-wide store."""
    global _global_store
    with _global_lock:
        if _global_store is not None:
            _global_store.clear()
        _global_store = None
