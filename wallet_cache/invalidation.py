import functools
import inspect
from typing import Any, Dict, Iterable, List, Optional

import structlog

from .categories import CacheCategory
from .core import CacheStore, get_store
from .keys import account_key, network_key

logger = structlog.get_logger()

# Categories made stale by each kind of state-changing operation
INVALIDATION_RULES: Dict[str, List[CacheCategory]] = {
    'transfer': [
        CacheCategory.BALANCE,
        CacheCategory.TRANSACTIONS,
    ],
    'swap': [
        CacheCategory.BALANCE,
        CacheCategory.TRANSACTIONS,
    ],
    'airdrop': [
        CacheCategory.BALANCE,
        CacheCategory.TRANSACTIONS,
    ],
    'token_account': [
        CacheCategory.BALANCE,
    ],
    'nft_burn': [
        CacheCategory.NFTS_ALL,
        CacheCategory.SINGLE_NFT,
        CacheCategory.NFTS_GROUPED,
        CacheCategory.BALANCE,
        CacheCategory.TRANSACTIONS,
    ],
    'nft_trade': [
        CacheCategory.NFTS_ALL,
        CacheCategory.SINGLE_NFT,
        CacheCategory.NFTS_GROUPED,
        CacheCategory.BALANCE,
        CacheCategory.TRANSACTIONS,
    ],
}


class CacheInvalidator:
    def __init__(self, store: Optional[CacheStore] = None):
        self.store = store if store is not None else get_store()
        self.invalidation_rules = {event: list(c) for event, c in INVALIDATION_RULES.items()}

    def categories_for(self, event: str) -> List[CacheCategory]:
        try:
            return self.invalidation_rules[event]
        except KeyError:
            raise ValueError(f"Unknown invalidation event: {event!r}") from None

    def invalidate_account(self, network_id: Any, address: str, event: str) -> int:
        """Invalidate the account's entries made stale by ``event``."""
        dropped = 0
        for category in self.categories_for(event):
            if category.network_scoped:
                dropped += self.store.invalidate_scope(network_key(network_id, category))
            else:
                dropped += self.store.invalidate_scope(account_key(network_id, address, category))
        logger.info("cache_invalidated", type=event, network=network_id,
                    address=address, count=dropped)
        return dropped

    def invalidate_network(self, network_id: Any, *categories: CacheCategory) -> int:
        """Invalidate network-wide catalogs, all of them when no category is given."""
        targets: Iterable[CacheCategory] = (
            [CacheCategory.coerce(c) for c in categories] if categories
            else [c for c in CacheCategory if c.network_scoped]
        )
        dropped = 0
        for category in targets:
            if not category.network_scoped:
                raise ValueError(f"{category.name} is cached per account, not per network")
            dropped += self.store.invalidate_scope(network_key(network_id, category))
        logger.info("cache_invalidated", type="network", network=network_id, count=dropped)
        return dropped


def invalidates_cache(*events: str):
    """
    Decorator to invalidate an account's cache after a method succeeds.

    The decorated coroutine method's owner must expose ``cache_invalidator``
    and an ``account`` (or be the account itself) with ``network.id`` and
    ``get_receive_address()``. Nothing is invalidated if the call fails.
    """
    for event in events:
        if event not in INVALIDATION_RULES:
            raise ValueError(f"Unknown invalidation event: {event!r}")

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            result = await func(self, *args, **kwargs)

            # Get cache invalidator instance
            invalidator = getattr(self, 'cache_invalidator', None)
            if not invalidator:
                return result

            account = getattr(self, 'account', self)
            address = account.get_receive_address()
            if inspect.isawaitable(address):
                address = await address

            for event in events:
                invalidator.invalidate_account(account.network.id, address, event)

            return result
        return wrapper
    return decorator
