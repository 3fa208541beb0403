"""
Cache key composition for account and network scoped lookups.

Keys are built from netstring-style segments (``<length>:<text>``) so that
distinct identity tuples can never produce the same key, whatever characters
the network id or address contain. Parameterized lookups append a SHA-256
fingerprint of their arguments after a ``#`` separator, which keeps every
fingerprinted key inside the scope of the key it was derived from.
"""
import hashlib
from typing import Any, Dict, Iterable, Optional, Sequence

from .categories import CacheCategory
from .exceptions import InvalidKeyError

SEGMENT_SEPARATOR = "/"
FINGERPRINT_SEPARATOR = "#"


def _segment(value: Any) -> str:
    text = str(value)
    return f"{len(text)}:{text}"


def compose_key(parts: Iterable[Any]) -> str:
    """
    Join identity parts into a single cache key.

    Args:
        parts: Identity components, in order

    Returns:
        The composed key

    Raises:
        InvalidKeyError: If no parts are given or a part is empty
    """
    segments = []
    for part in parts:
        if isinstance(part, CacheCategory):
            part = part.value
        if part is None or str(part) == "":
            raise InvalidKeyError("Cache key parts must not be empty")
        segments.append(_segment(part))
    if not segments:
        raise InvalidKeyError("Cache key needs at least one part")
    return SEGMENT_SEPARATOR.join(segments)


def account_key(network_id: Any, address: Any, category: CacheCategory) -> str:
    """Key for a lookup scoped to one account on one network."""
    return compose_key((network_id, address, CacheCategory.coerce(category)))


def network_key(network_id: Any, category: CacheCategory) -> str:
    """Key for a lookup shared by every account on a network."""
    return compose_key((network_id, CacheCategory.coerce(category)))


def _encode(value: Any) -> str:
    """
    Type-tagged, length-prefixed encoding of an argument value.

    Builtin containers are encoded recursively; dict items and set members
    are ordered by their encoding, so equal values always encode the same way
    and values of different types never do. Anything else, subclasses of the
    builtins included, is encoded by qualified type name and ``repr`` and so
    needs a stable ``repr`` that identifies its value.
    """
    kind = type(value)
    if value is None:
        return "n"
    if kind is bool:
        return "b1" if value else "b0"
    if kind is int:
        return "i" + _segment(repr(value))
    if kind is float:
        return "f" + _segment(repr(value))
    if kind is str:
        return "s" + _segment(value)
    if kind is bytes:
        return "y" + _segment(value.hex())
    if kind is bytearray:
        return "a" + _segment(value.hex())
    if kind is tuple:
        return "t" + _segment("".join(_encode(item) for item in value))
    if kind is list:
        return "l" + _segment("".join(_encode(item) for item in value))
    if kind is set or kind is frozenset:
        tag = "e" if kind is set else "z"
        return tag + _segment("".join(sorted(_encode(item) for item in value)))
    if kind is dict:
        items = sorted(_segment(_encode(k)) + _encode(v) for k, v in value.items())
        return "d" + _segment("".join(items))
    return "o" + _segment(f"{kind.__module__}.{kind.__qualname__}") + _segment(repr(value))


def argument_fingerprint(args: Sequence[Any] = (), kwargs: Optional[Dict[str, Any]] = None) -> str:
    """
    Collision-resistant fingerprint of a call's arguments.

    Every positional and keyword argument is encoded with its type and length
    before hashing, so ``("a", "b-c")`` and ``("a-b", "c")`` differ.
    """
    pieces = [_segment(len(args))]
    pieces.extend(_segment(_encode(arg)) for arg in args)
    for name, value in sorted((kwargs or {}).items()):
        pieces.append(_segment(name))
        pieces.append(_segment(_encode(value)))
    return hashlib.sha256("".join(pieces).encode("utf-8", "surrogatepass")).hexdigest()


def with_fingerprint(key: str, args: Sequence[Any] = (), kwargs: Optional[Dict[str, Any]] = None) -> str:
    """Scope ``key`` down to one argument tuple."""
    return f"{key}{FINGERPRINT_SEPARATOR}{argument_fingerprint(args, kwargs)}"


def scope_matches(scope_key: str, key: str) -> bool:
    """True for ``scope_key`` itself and every fingerprinted key derived from it."""
    return key == scope_key or key.startswith(scope_key + FINGERPRINT_SEPARATOR)
