"""In-memory account and clock used by the cache tests."""
import asyncio
from collections import Counter
from types import SimpleNamespace


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockAccount:
    """Account whose reads return configurable values and count their calls."""

    def __init__(self, network_id="solana", address="ADDR1", balance=10.5):
        self.network = SimpleNamespace(id=network_id)
        self.index = 0
        self.path = "m/44'/501'/0'/0'"
        self.key_pair = object()
        self.public_key = address
        self.address = address
        self.balance = balance
        self.nfts = {"mint-123": {"mint": "mint-123"}, "mint-456": {"mint": "mint-456"}}
        self.available_tokens = ["SOL", "USDC"]
        self.featured_tokens = ["BONK"]
        self.transactions = [{"id": "tx1"}]
        self.calls = Counter()
        self.delay = 0

    def get_receive_address(self):
        return self.address

    async def _track(self, name):
        self.calls[name] += 1
        if self.delay:
            await asyncio.sleep(self.delay)

    async def get_balance(self, *args, **kwargs):
        await self._track("get_balance")
        return self.balance

    async def get_all_nfts(self):
        await self._track("get_all_nfts")
        return list(self.nfts.values())

    async def get_nft(self, mint, *args, **kwargs):
        await self._track("get_nft")
        return self.nfts[mint]

    async def get_all_nfts_grouped(self):
        await self._track("get_all_nfts_grouped")
        return {"collection": list(self.nfts.values())}

    async def get_recent_transactions(self, *args, **kwargs):
        await self._track("get_recent_transactions")
        return list(self.transactions)

    async def get_available_tokens(self):
        await self._track("get_available_tokens")
        return list(self.available_tokens)

    async def get_featured_tokens(self):
        await self._track("get_featured_tokens")
        return list(self.featured_tokens)

    async def get_nfts_bids(self, mint):
        await self._track("get_nfts_bids")
        return [{"mint": mint, "price": 1}]

    async def create_transfer_transaction(self, destination, amount):
        await self._track("create_transfer_transaction")
        if amount <= 0:
            raise ValueError("amount must be positive")
        return {"to": destination, "amount": amount}
