"""
Monitoring for the wallet cache.

Prometheus metrics labelled by cache category, plus a monitor that records
them for a store and produces a report from the store's own statistics.
"""
import time
from typing import Any, Dict, Optional

import structlog
from prometheus_client import Counter, Gauge, Histogram

from .categories import CacheCategory

logger = structlog.get_logger()

# Define Prometheus metrics
CACHE_HITS = Counter('wallet_cache_hits_total', 'Total number of cache hits', ['category'])
CACHE_MISSES = Counter('wallet_cache_misses_total', 'Total number of cache misses', ['category'])
CACHE_COALESCED = Counter('wallet_cache_coalesced_total',
                          'Requests that waited on an in-flight computation', ['category'])
FACTORY_FAILURES = Counter('wallet_cache_factory_failures_total',
                           'Computations that failed and were not cached', ['category'])
CACHE_EVICTIONS = Counter('wallet_cache_evictions_total',
                          'Entries evicted to respect the size bound', ['category'])
CACHE_ENTRIES = Gauge('wallet_cache_entries', 'Current number of ready entries in the cache')
FACTORY_LATENCY = Histogram('wallet_cache_factory_seconds',
                            'Time spent computing values for cache misses', ['category'])


class CacheMonitor:
    """
    Records cache events into the Prometheus metrics.

    A store calls the ``record_*`` methods as entries change; the monitor
    never touches the store's map itself.
    """

    def __init__(self):
        self.start_time = time.time()

    def record_hit(self, category: CacheCategory) -> None:
        CACHE_HITS.labels(category=category.value).inc()

    def record_miss(self, category: CacheCategory) -> None:
        CACHE_MISSES.labels(category=category.value).inc()

    def record_coalesced(self, category: CacheCategory) -> None:
        CACHE_COALESCED.labels(category=category.value).inc()

    def record_failure(self, category: CacheCategory) -> None:
        FACTORY_FAILURES.labels(category=category.value).inc()

    def record_eviction(self, category: CacheCategory) -> None:
        CACHE_EVICTIONS.labels(category=category.value).inc()

    def record_latency(self, category: CacheCategory, latency: float) -> None:
        FACTORY_LATENCY.labels(category=category.value).observe(latency)

    def update_size(self, size: int) -> None:
        CACHE_ENTRIES.set(size)

    def get_hit_ratio(self, category: CacheCategory) -> float:
        """
        Get the hit ratio for a category since process start.

        Args:
            category: Cache category

        Returns:
            Hit ratio as a float between 0 and 1
        """
        hits = CACHE_HITS.labels(category=category.value)._value.get()
        misses = CACHE_MISSES.labels(category=category.value)._value.get()
        total = hits + misses

        if total == 0:
            return 0.0

        return hits / total

    def get_metrics_report(self, store: Optional[Any] = None) -> Dict[str, Any]:
        """
        Generate a metrics report.

        Args:
            store: Store whose statistics are included, or None for the
                process-wide store

        Returns:
            Dictionary with cache metrics
        """
        if store is None:
            from .core import get_store
            store = get_store()

        stats = store.get_stats()
        report = {
            'uptime_seconds': time.time() - self.start_time,
            'cache_size': stats['size'],
            'pending': stats['pending'],
            'max_cache_size': stats['max_size'],
            'total_hits': stats['hits'],
            'total_misses': stats['misses'],
            'total_coalesced': stats['coalesced'],
            'overall_hit_ratio': stats['hit_ratio'],
        }
        for category in CacheCategory:
            report[f'{category.value}_hit_ratio'] = self.get_hit_ratio(category)
        return report

    def log_metrics(self, store: Optional[Any] = None) -> None:
        """Log current cache metrics."""
        report = self.get_metrics_report(store)
        logger.info("Cache metrics report", **report)


# Create a global monitor instance
monitor = CacheMonitor()

def get_monitor() -> CacheMonitor:
    """Get the global cache monitor instance."""
    return monitor
