import pytest

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wallet_cache.categories import CacheCategory
from wallet_cache.core import CacheStore
from wallet_cache.invalidation import CacheInvalidator, invalidates_cache
from wallet_cache.keys import account_key, network_key
from wallet_cache.proxy import CachingAccountProxy

from mock_account import FakeClock, MockAccount

TTLS = {category: 300 for category in CacheCategory}


@pytest.fixture
def store():
    return CacheStore(ttl_policy=TTLS, clock=FakeClock())

@pytest.fixture
def invalidator(store):
    return CacheInvalidator(store)

@pytest.fixture
def account():
    return MockAccount()


class Wallet:
    """Caller that performs transfers through a cached account."""

    def __init__(self, account, invalidator):
        self.account = account
        self.cache_invalidator = invalidator

    @invalidates_cache('transfer')
    async def send(self, destination, amount):
        return await self.account.create_transfer_transaction(destination, amount)

    @invalidates_cache('nft_trade')
    async def buy(self, mint):
        return {"bought": mint}


@pytest.mark.asyncio
async def test_transfer_invalidates_balance_and_history(store, invalidator, account):
    proxy = CachingAccountProxy(account, store=store)
    await proxy.get_balance()
    await proxy.get_recent_transactions()
    await proxy.get_all_nfts()

    assert invalidator.invalidate_account("solana", "ADDR1", "transfer") == 2

    assert account_key("solana", "ADDR1", CacheCategory.BALANCE) not in store
    assert account_key("solana", "ADDR1", CacheCategory.TRANSACTIONS) not in store
    assert account_key("solana", "ADDR1", CacheCategory.NFTS_ALL) in store

@pytest.mark.asyncio
async def test_nft_trade_drops_single_nft_entries(store, invalidator, account):
    proxy = CachingAccountProxy(account, store=store)
    await proxy.get_nft("mint-123")
    await proxy.get_nft("mint-456")
    await proxy.get_all_nfts_grouped()

    assert invalidator.invalidate_account("solana", "ADDR1", "nft_trade") == 3
    await proxy.get_nft("mint-123")
    assert account.calls["get_nft"] == 3

@pytest.mark.asyncio
async def test_other_accounts_untouched(store, invalidator):
    first = CachingAccountProxy(MockAccount(address="ADDR1"), store=store)
    second = CachingAccountProxy(MockAccount(address="ADDR2"), store=store)
    await first.get_balance()
    await second.get_balance()

    invalidator.invalidate_account("solana", "ADDR1", "transfer")
    assert account_key("solana", "ADDR2", CacheCategory.BALANCE) in store

@pytest.mark.asyncio
async def test_invalidate_network_catalogs(store, invalidator, account):
    proxy = CachingAccountProxy(account, store=store)
    await proxy.get_available_tokens()
    await proxy.get_featured_tokens()
    await proxy.get_balance()

    assert invalidator.invalidate_network("solana", CacheCategory.FEATURED_TOKENS) == 1
    assert network_key("solana", CacheCategory.AVAILABLE_TOKENS) in store
    assert invalidator.invalidate_network("solana") == 1
    assert account_key("solana", "ADDR1", CacheCategory.BALANCE) in store

    with pytest.raises(ValueError):
        invalidator.invalidate_network("solana", CacheCategory.BALANCE)

def test_unknown_event_rejected(invalidator):
    with pytest.raises(ValueError):
        invalidator.invalidate_account("solana", "ADDR1", "stake")

    with pytest.raises(ValueError):
        invalidates_cache('stake')

@pytest.mark.asyncio
async def test_decorator_invalidates_after_success(store, invalidator, account):
    proxy = CachingAccountProxy(account, store=store)
    wallet = Wallet(proxy, invalidator)

    await proxy.get_balance()
    assert await wallet.send("DEST", 5) == {"to": "DEST", "amount": 5}
    assert account_key("solana", "ADDR1", CacheCategory.BALANCE) not in store

    await proxy.get_all_nfts()
    await wallet.buy("mint-123")
    assert account_key("solana", "ADDR1", CacheCategory.NFTS_ALL) not in store

@pytest.mark.asyncio
async def test_decorator_keeps_cache_when_call_fails(store, invalidator, account):
    proxy = CachingAccountProxy(account, store=store)
    wallet = Wallet(proxy, invalidator)

    await proxy.get_balance()
    with pytest.raises(ValueError):
        await wallet.send("DEST", 0)
    assert account_key("solana", "ADDR1", CacheCategory.BALANCE) in store

@pytest.mark.asyncio
async def test_decorator_without_invalidator_is_noop(store, account):
    proxy = CachingAccountProxy(account, store=store)
    wallet = Wallet(proxy, None)

    await proxy.get_balance()
    await wallet.send("DEST", 5)
    assert account_key("solana", "ADDR1", CacheCategory.BALANCE) in store
