"""Settings for the wallet cache, read from WALLET_CACHE_* environment variables."""
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..categories import CacheCategory


class CacheSettings(BaseSettings):
    """
    Freshness policy and housekeeping settings.

    TTLs are in seconds. ``0`` means always recompute and ``inf`` means keep
    the value for the lifetime of the process.
    """

    model_config = SettingsConfigDict(
        env_prefix="WALLET_CACHE_",
        case_sensitive=False,
        extra="ignore",
    )

    ttl_balance: float = Field(
        default=30,
        ge=0,
        description="Account balance TTL"
    )
    ttl_nfts_all: float = Field(
        default=300,
        ge=0,
        description="All owned collectibles TTL"
    )
    ttl_single_nft: float = Field(
        default=600,
        ge=0,
        description="Single collectible TTL"
    )
    ttl_nfts_grouped: float = Field(
        default=300,
        ge=0,
        description="Collectibles grouped by collection TTL"
    )
    ttl_transactions: float = Field(
        default=60,
        ge=0,
        description="Recent transaction history TTL"
    )
    ttl_available_tokens: float = Field(
        default=3600,
        ge=0,
        description="Network token catalog TTL"
    )
    ttl_featured_tokens: float = Field(
        default=3600,
        ge=0,
        description="Network featured tokens TTL"
    )

    max_size: Optional[int] = Field(
        default=10000,
        gt=0,
        description="Maximum number of ready entries, or None for unbounded"
    )
    reaper_interval: float = Field(
        default=300,
        gt=0,
        description="Seconds between background reaper passes"
    )
    reaper_grace: float = Field(
        default=2.0,
        ge=1.0,
        description="Entries older than ttl * grace are dropped by the reaper"
    )
    log_level: str = Field(
        default="INFO",
        description="Log level passed to configure_logging"
    )

    def ttl_for(self, category: CacheCategory) -> float:
        category = CacheCategory.coerce(category)
        return getattr(self, f"ttl_{category.value}")

    def ttl_policy(self) -> Dict[CacheCategory, float]:
        """Map every category to its TTL."""
        return {category: self.ttl_for(category) for category in CacheCategory}


def get_settings() -> CacheSettings:
    """Load settings from the environment."""
    return CacheSettings()
