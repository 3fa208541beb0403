#!/usr/bin/env python
"""
Example script demonstrating the wallet cache.

Wraps a slow in-memory account with CachingAccountProxy and shows cached
balance reads, concurrent reads collapsing onto one lookup, the network-wide
token catalog shared by two accounts, and invalidation after a transfer.
"""
import asyncio
import time
from decimal import Decimal
from types import SimpleNamespace

import structlog

from wallet_cache import CacheInvalidator, CacheReaper, CachingAccountProxy, get_store
from wallet_cache.config import configure_logging, get_settings, log_error
from wallet_cache.monitoring import get_monitor

logger = structlog.get_logger()


class DemoAccount:
    """Account simulating network latency on every read."""

    def __init__(self, address: str, balance: Decimal, latency: float = 0.3):
        self.network = SimpleNamespace(id="devnet")
        self.index = 0
        self.path = "m/44'/501'/0'/0'"
        self.key_pair = None
        self.public_key = address
        self.address = address
        self.balance = balance
        self.latency = latency

    def get_receive_address(self):
        return self.address

    async def get_balance(self):
        await asyncio.sleep(self.latency)
        return self.balance

    async def get_available_tokens(self):
        await asyncio.sleep(self.latency)
        return ["SOL", "USDC", "BONK"]

    async def create_transfer_transaction(self, destination, amount):
        if amount > self.balance:
            raise ValueError("insufficient funds")
        self.balance -= amount
        return {"from": self.address, "to": destination, "amount": str(amount)}


async def timed(label, coro):
    start_time = time.time()
    result = await coro
    logger.info(label, result=str(result), elapsed=f"{time.time() - start_time:.6f}s")
    return result


async def run():
    store = get_store()
    alice = CachingAccountProxy(DemoAccount("ALICE", Decimal("10.5")), store=store)
    bob = CachingAccountProxy(DemoAccount("BOB", Decimal("3")), store=store)
    invalidator = CacheInvalidator(store)

    # First call - should be a cache miss
    await timed("Balance (miss)", alice.get_balance())
    # Second call - should be a cache hit
    await timed("Balance (hit)", alice.get_balance())

    # Concurrent reads share one lookup
    start_time = time.time()
    balances = await asyncio.gather(*(bob.get_balance() for _ in range(10)))
    logger.info("Concurrent balance reads", count=len(balances),
                elapsed=f"{time.time() - start_time:.6f}s")

    # Token catalog is cached once per network
    await timed("Tokens via alice (miss)", alice.get_available_tokens())
    await timed("Tokens via bob (hit)", bob.get_available_tokens())

    # Transfers go straight to the account; the caller drops the stale balance
    transfer = await alice.create_transfer_transaction("BOB", Decimal("2.5"))
    invalidator.invalidate_account(alice.network.id, alice.get_receive_address(), "transfer")
    logger.info("Transfer created", **transfer)
    await timed("Balance after transfer (miss)", alice.get_balance())

    try:
        await alice.create_transfer_transaction("BOB", Decimal("100"))
    except ValueError as exc:
        log_error(logger, exc, {"operation": "create_transfer_transaction"})

    logger.info("Cache statistics", **store.get_stats())
    get_monitor().log_metrics(store)


def main():
    """Run the wallet cache example."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting wallet cache example")

    with CacheReaper(get_store(), interval=settings.reaper_interval, grace=settings.reaper_grace):
        asyncio.run(run())

    logger.info("Wallet cache example completed")

if __name__ == "__main__":
    main()
