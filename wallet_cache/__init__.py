"""
Wallet account caching.

This package caches the expensive, network-bound reads of a blockchain
account (balances, collectibles, transaction history, token catalogs) behind
a decorator that forwards every other account operation untouched:

- ``CacheStore``: asynchronous memoization store with per-category TTLs and
  a single in-flight computation per key
- ``CachingAccountProxy``: account decorator routing reads through the store
- ``CacheInvalidator``: drops entries made stale by state-changing operations
- ``CacheReaper``: optional background cleanup of long-expired entries
"""

from .categories import CacheCategory
from .core import CacheEntry, CacheStore, EntryState, get_store, reset_store
from .exceptions import CacheError, InvalidKeyError, UnknownCategoryError
from .invalidation import CacheInvalidator, invalidates_cache
from .keys import account_key, argument_fingerprint, network_key, with_fingerprint
from .proxy import CachingAccountProxy
from .reaper import CacheReaper

__all__ = [
    'CacheCategory',
    'CacheEntry',
    'CacheStore',
    'EntryState',
    'get_store',
    'reset_store',
    'CacheError',
    'InvalidKeyError',
    'UnknownCategoryError',
    'CacheInvalidator',
    'invalidates_cache',
    'account_key',
    'argument_fingerprint',
    'network_key',
    'with_fingerprint',
    'CachingAccountProxy',
    'CacheReaper'
]
