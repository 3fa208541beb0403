"""Cache categories and the scope each one is keyed by."""
from enum import Enum
from typing import Any

from .exceptions import UnknownCategoryError


class CacheCategory(Enum):
    """Closed set of cached account operations, one freshness policy each."""
    BALANCE = "balance"
    NFTS_ALL = "nfts_all"
    SINGLE_NFT = "single_nft"
    NFTS_GROUPED = "nfts_grouped"
    TRANSACTIONS = "transactions"
    AVAILABLE_TOKENS = "available_tokens"
    FEATURED_TOKENS = "featured_tokens"

    @classmethod
    def coerce(cls, value: Any) -> "CacheCategory":
        """Return the member for a member, value or name, or raise UnknownCategoryError."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
            if value.upper() in cls.__members__:
                return cls.__members__[value.upper()]
        raise UnknownCategoryError(f"Unknown cache category: {value!r}")

    @property
    def network_scoped(self) -> bool:
        return self in NETWORK_CATEGORIES


# Shared by every account on a network
NETWORK_CATEGORIES = frozenset({
    CacheCategory.AVAILABLE_TOKENS,
    CacheCategory.FEATURED_TOKENS,
})

ACCOUNT_CATEGORIES = frozenset(CacheCategory) - NETWORK_CATEGORIES
