import pytest

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wallet_cache.categories import CacheCategory
from wallet_cache.exceptions import InvalidKeyError, UnknownCategoryError
from wallet_cache.keys import (
    account_key,
    argument_fingerprint,
    compose_key,
    network_key,
    scope_matches,
    with_fingerprint
)


def test_account_key_is_deterministic():
    key1 = account_key("solana", "ADDR1", CacheCategory.BALANCE)
    key2 = account_key("solana", "ADDR1", CacheCategory.BALANCE)
    assert key1 == key2
    assert "ADDR1" in key1
    assert "balance" in key1

def test_keys_differ_by_identity_and_category():
    keys = {
        account_key("solana", "ADDR1", CacheCategory.BALANCE),
        account_key("solana", "ADDR2", CacheCategory.BALANCE),
        account_key("ethereum", "ADDR1", CacheCategory.BALANCE),
        account_key("solana", "ADDR1", CacheCategory.NFTS_ALL),
        network_key("solana", CacheCategory.AVAILABLE_TOKENS),
        network_key("solana", CacheCategory.FEATURED_TOKENS),
    }
    assert len(keys) == 6

def test_segments_cannot_alias():
    """Delimiters inside identity parts never make two keys collide."""
    assert compose_key(["a", "b/c"]) != compose_key(["a/b", "c"])
    assert compose_key(["a", "b-c"]) != compose_key(["a-b", "c"])
    assert account_key("net-1", "addr", "balance") != account_key("net", "1-addr", "balance")

def test_argument_fingerprint_avoids_join_collisions():
    assert argument_fingerprint(["a", "b-c"]) != argument_fingerprint(["a-b", "c"])
    assert argument_fingerprint(["ab", ""]) != argument_fingerprint(["a", "b"])
    assert argument_fingerprint([1]) != argument_fingerprint(["1"])
    assert argument_fingerprint([]) != argument_fingerprint([""])

def test_argument_fingerprint_is_stable_for_kwargs_order():
    fp1 = argument_fingerprint(["mint"], {"a": 1, "b": {"y": 2, "x": 1}})
    fp2 = argument_fingerprint(["mint"], {"b": {"x": 1, "y": 2}, "a": 1})
    assert fp1 == fp2
    assert argument_fingerprint([], {"a": 1}) != argument_fingerprint([1])

def test_argument_fingerprint_handles_unserializable_values():
    class Pubkey:
        def __repr__(self):
            return "Pubkey(abc)"

    assert argument_fingerprint([Pubkey()]) == argument_fingerprint([Pubkey()])

    class Other:
        def __repr__(self):
            return "Pubkey(abc)"

    assert argument_fingerprint([Pubkey()]) != argument_fingerprint([Other()])

def test_argument_fingerprint_keeps_nested_key_types():
    assert argument_fingerprint([{1: "a"}]) != argument_fingerprint([{"1": "a"}])
    assert argument_fingerprint([{True: "a"}]) != argument_fingerprint([{1: "a"}])
    assert argument_fingerprint([], {"q": {1.0: "a"}}) != argument_fingerprint([], {"q": {1: "a"}})

def test_argument_fingerprint_keeps_nested_sequence_types():
    assert argument_fingerprint([[(1, 2)]]) != argument_fingerprint([[[1, 2]]])
    assert argument_fingerprint([{1, 2}]) != argument_fingerprint([frozenset({1, 2})])
    assert argument_fingerprint([b"ab"]) != argument_fingerprint(["ab"])
    assert argument_fingerprint([[["a"], "b"]]) != argument_fingerprint([[["a", "b"]]])
    assert argument_fingerprint([{"x": None}]) != argument_fingerprint([{"x": "None"}])

def test_argument_fingerprint_accepts_mixed_key_types():
    fp1 = argument_fingerprint([{1: "a", "b": 2, None: (3,)}])
    fp2 = argument_fingerprint([{"b": 2, None: (3,), 1: "a"}])
    assert fp1 == fp2
    assert argument_fingerprint([{1, "1"}]) == argument_fingerprint([{"1", 1}])

def test_fingerprinted_keys_stay_in_scope():
    base = account_key("solana", "ADDR1", CacheCategory.SINGLE_NFT)
    key1 = with_fingerprint(base, ["mint-123"])
    key2 = with_fingerprint(base, ["mint-456"])

    assert key1 != key2
    assert scope_matches(base, key1)
    assert scope_matches(base, key2)
    assert scope_matches(base, base)
    assert not scope_matches(base, account_key("solana", "ADDR12", CacheCategory.SINGLE_NFT))

def test_invalid_parts_rejected():
    with pytest.raises(InvalidKeyError):
        compose_key([])
    with pytest.raises(InvalidKeyError):
        account_key("solana", "", CacheCategory.BALANCE)
    with pytest.raises(InvalidKeyError):
        network_key(None, CacheCategory.AVAILABLE_TOKENS)
    with pytest.raises(UnknownCategoryError):
        network_key("solana", "prices")
