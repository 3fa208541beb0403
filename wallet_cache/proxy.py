"""
Caching decorator for blockchain accounts.

``CachingAccountProxy`` wraps a base account and routes its expensive read
operations through a ``CacheStore``. Every other operation is forwarded to
the base account as is: the proxy returns whatever the base method returns
(including the awaitable of an async method) and lets its failures through.
"""
import inspect
from typing import Any, Iterable, List, Optional

import structlog

from .account import BaseAccount
from .categories import ACCOUNT_CATEGORIES, CacheCategory
from .core import CacheStore, get_store
from .keys import account_key, network_key, with_fingerprint

logger = structlog.get_logger()


class CachingAccountProxy:
    """
    Account that returns cached results for read operations.

    Balances, collectibles and recent transactions are cached per account;
    the available and featured token catalogs are cached per network and
    shared by every account on it.
    """

    def __init__(self, base: BaseAccount, store: Optional[CacheStore] = None):
        """
        Wrap a base account.

        Args:
            base: Account implementation providing the operations
            store: Store to cache into, or None to use the process-wide store
        """
        self.base = base
        self.store = store if store is not None else get_store()
        self.network = base.network
        self.index = getattr(base, "index", None)
        self.path = getattr(base, "path", None)
        self.key_pair = getattr(base, "key_pair", None)
        self.public_key = getattr(base, "public_key", None)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base={self.base!r})"

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes the proxy does not define
        if name == "base":
            raise AttributeError(name)
        return getattr(self.base, name)

    async def _receive_address(self) -> str:
        address = self.base.get_receive_address()
        if inspect.isawaitable(address):
            address = await address
        return address

    async def base_key(self, category: CacheCategory) -> str:
        """Key for ``category`` scoped to this account on its network."""
        return account_key(self.network.id, await self._receive_address(), category)

    def network_key(self, category: CacheCategory) -> str:
        """Key for ``category`` shared by all accounts on this network."""
        return network_key(self.network.id, category)

    async def _account_cached(self, category: CacheCategory, method: str,
                              args: tuple = (), kwargs: Optional[dict] = None,
                              fingerprint: bool = False) -> Any:
        kwargs = kwargs or {}
        key = await self.base_key(category)
        if fingerprint or args or kwargs:
            key = with_fingerprint(key, args, kwargs)
        func = getattr(self.base, method)
        return await self.store.get_or_compute(key, category, lambda: func(*args, **kwargs))

    # Cached operations

    async def get_balance(self, *args: Any, **kwargs: Any) -> Any:
        """Get the account balance. Cached per account."""
        return await self._account_cached(CacheCategory.BALANCE, "get_balance", args, kwargs)

    async def get_all_nfts(self) -> List[Any]:
        """Get all collectibles owned by the account. Cached per account."""
        return await self._account_cached(CacheCategory.NFTS_ALL, "get_all_nfts")

    async def get_nft(self, *args: Any, **kwargs: Any) -> Any:
        """
        Get one collectible. Cached per account and argument tuple.

        Args:
            *args, **kwargs: Arguments identifying the collectible, passed
                through to the base account

        Returns:
            The collectible details
        """
        return await self._account_cached(
            CacheCategory.SINGLE_NFT, "get_nft", args, kwargs, fingerprint=True
        )

    async def get_all_nfts_grouped(self) -> Any:
        """Get collectibles grouped by collection. Cached per account."""
        return await self._account_cached(CacheCategory.NFTS_GROUPED, "get_all_nfts_grouped")

    async def get_recent_transactions(self, *args: Any, **kwargs: Any) -> List[Any]:
        """Get recent transactions. Cached per account."""
        return await self._account_cached(
            CacheCategory.TRANSACTIONS, "get_recent_transactions", args, kwargs
        )

    async def get_available_tokens(self) -> List[Any]:
        """Get tokens available on the network. Cached per network."""
        key = self.network_key(CacheCategory.AVAILABLE_TOKENS)
        return await self.store.get_or_compute(
            key, CacheCategory.AVAILABLE_TOKENS, self.base.get_available_tokens
        )

    async def get_featured_tokens(self) -> List[Any]:
        """Get tokens featured on the network. Cached per network."""
        key = self.network_key(CacheCategory.FEATURED_TOKENS)
        return await self.store.get_or_compute(
            key, CacheCategory.FEATURED_TOKENS, self.base.get_featured_tokens
        )

    async def invalidate(self, *categories: CacheCategory) -> int:
        """
        Drop cached results so the next read goes to the base account.

        Account categories are dropped for this account only, including every
        argument-specific entry. Network categories are dropped for this
        account's network. Without categories, every account category is
        dropped.

        Returns:
            Number of entries dropped
        """
        targets: Iterable[CacheCategory] = (
            [CacheCategory.coerce(c) for c in categories] if categories else ACCOUNT_CATEGORIES
        )
        dropped = 0
        for category in targets:
            if category.network_scoped:
                key = self.network_key(category)
            else:
                key = await self.base_key(category)
            dropped += self.store.invalidate_scope(key)
        logger.debug("Invalidated account cache", network=self.network.id, count=dropped)
        return dropped

    # Pass-through operations

    def retrieve_secure_private_key(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.retrieve_secure_private_key(*args, **kwargs)

    def get_connection(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_connection(*args, **kwargs)

    def get_credit(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_credit(*args, **kwargs)

    def get_tokens(self, *args: Any, **kwargs: Any) -> Any:
        """Token balances held by the account. Not cached."""
        return self.base.get_tokens(*args, **kwargs)

    def get_receive_address(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_receive_address(*args, **kwargs)

    def get_or_create_token_account(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_or_create_token_account(*args, **kwargs)

    def validate_destination_account(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.validate_destination_account(*args, **kwargs)

    def airdrop(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.airdrop(*args, **kwargs)

    def get_collection_group(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_collection_group(*args, **kwargs)

    def get_collection(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_collection(*args, **kwargs)

    def get_collection_items(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_collection_items(*args, **kwargs)

    def get_listed_nfts(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_listed_nfts(*args, **kwargs)

    def get_nft_bids(self, *args: Any, **kwargs: Any) -> Any:
        """
        Get the bids on a collectible.

        Base accounts expose this lookup as ``get_nfts_bids``; accounts that
        name it ``get_nft_bids`` are supported too.
        """
        lookup = getattr(self.base, "get_nfts_bids", None)
        if lookup is None:
            lookup = self.base.get_nft_bids
        return lookup(*args, **kwargs)

    def create_nft_burn_tx(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.create_nft_burn_tx(*args, **kwargs)

    def confirm_nft_burn(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.confirm_nft_burn(*args, **kwargs)

    def get_best_swap_quote(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_best_swap_quote(*args, **kwargs)

    def expire_swap_quote(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.expire_swap_quote(*args, **kwargs)

    def estimate_transactions_fee(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.estimate_transactions_fee(*args, **kwargs)

    def estimate_transfer_fee(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.estimate_transfer_fee(*args, **kwargs)

    def create_transfer_transaction(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.create_transfer_transaction(*args, **kwargs)

    def confirm_transfer_transaction(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.confirm_transfer_transaction(*args, **kwargs)

    def create_swap_transaction(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.create_swap_transaction(*args, **kwargs)

    def list_nft(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.list_nft(*args, **kwargs)

    def unlist_nft(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.unlist_nft(*args, **kwargs)

    def buy_nft(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.buy_nft(*args, **kwargs)

    def bid_nft(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.bid_nft(*args, **kwargs)

    def cancel_bid_nft(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.cancel_bid_nft(*args, **kwargs)

    def get_transaction(self, *args: Any, **kwargs: Any) -> Any:
        """Look up a single transaction. Not cached."""
        return self.base.get_transaction(*args, **kwargs)

    def get_domain(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_domain(*args, **kwargs)

    def get_domain_from_public_key(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_domain_from_public_key(*args, **kwargs)

    def get_public_key_from_domain(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.get_public_key_from_domain(*args, **kwargs)

    def scan_transactions(self, *args: Any, **kwargs: Any) -> Any:
        return self.base.scan_transactions(*args, **kwargs)
