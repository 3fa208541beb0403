"""
Capability set of a base blockchain account.

Any object with this shape can be wrapped by ``CachingAccountProxy``; the
protocols only describe it, nothing needs to inherit from them.
"""
from typing import Any, Awaitable, List, Optional, Protocol, Union, runtime_checkable


class Network(Protocol):
    """Network an account lives on."""
    id: Any


@runtime_checkable
class BaseAccount(Protocol):
    """Non-caching account implementation wrapped by the proxy."""

    network: Network
    index: Any
    path: Any
    key_pair: Any
    public_key: Any

    def get_receive_address(self, *args: Any, **kwargs: Any) -> Union[str, Awaitable[str]]: ...

    # Keys and connectivity
    async def retrieve_secure_private_key(self) -> Any: ...
    async def get_connection(self) -> Any: ...
    async def get_credit(self) -> Any: ...
    async def get_tokens(self) -> List[Any]: ...

    # Balance and token accounts
    async def get_balance(self, *args: Any, **kwargs: Any) -> Any: ...
    async def get_or_create_token_account(self, *args: Any, **kwargs: Any) -> Any: ...
    async def validate_destination_account(self, *args: Any, **kwargs: Any) -> bool: ...
    async def airdrop(self, *args: Any, **kwargs: Any) -> Any: ...

    # Collectibles
    async def get_all_nfts(self) -> List[Any]: ...
    async def get_nft(self, *args: Any, **kwargs: Any) -> Any: ...
    async def get_all_nfts_grouped(self) -> Any: ...
    async def get_collection_group(self, *args: Any, **kwargs: Any) -> Any: ...
    async def get_collection(self, *args: Any, **kwargs: Any) -> Any: ...
    async def get_collection_items(self, *args: Any, **kwargs: Any) -> List[Any]: ...
    async def get_listed_nfts(self, *args: Any, **kwargs: Any) -> List[Any]: ...
    async def get_nfts_bids(self, *args: Any, **kwargs: Any) -> List[Any]: ...
    async def create_nft_burn_tx(self, *args: Any, **kwargs: Any) -> Any: ...
    async def confirm_nft_burn(self, *args: Any, **kwargs: Any) -> Any: ...
    async def list_nft(self, *args: Any, **kwargs: Any) -> Any: ...
    async def unlist_nft(self, *args: Any, **kwargs: Any) -> Any: ...
    async def buy_nft(self, *args: Any, **kwargs: Any) -> Any: ...
    async def bid_nft(self, *args: Any, **kwargs: Any) -> Any: ...
    async def cancel_bid_nft(self, *args: Any, **kwargs: Any) -> Any: ...

    # Swaps, fees and transfers
    async def get_best_swap_quote(self, *args: Any, **kwargs: Any) -> Any: ...
    async def expire_swap_quote(self, *args: Any, **kwargs: Any) -> Any: ...
    async def create_swap_transaction(self, *args: Any, **kwargs: Any) -> Any: ...
    async def estimate_transactions_fee(self, *args: Any, **kwargs: Any) -> Any: ...
    async def estimate_transfer_fee(self, *args: Any, **kwargs: Any) -> Any: ...
    async def create_transfer_transaction(self, *args: Any, **kwargs: Any) -> Any: ...
    async def confirm_transfer_transaction(self, *args: Any, **kwargs: Any) -> Any: ...

    # Transactions
    async def get_transaction(self, *args: Any, **kwargs: Any) -> Any: ...
    async def get_recent_transactions(self, *args: Any, **kwargs: Any) -> List[Any]: ...
    async def scan_transactions(self, *args: Any, **kwargs: Any) -> List[Any]: ...

    # Domains
    async def get_domain(self) -> Optional[str]: ...
    async def get_domain_from_public_key(self, *args: Any, **kwargs: Any) -> Optional[str]: ...
    async def get_public_key_from_domain(self, *args: Any, **kwargs: Any) -> Optional[str]: ...

    # Network-wide catalogs
    async def get_available_tokens(self) -> List[Any]: ...
    async def get_featured_tokens(self) -> List[Any]: ...
