"""Exceptions raised by the wallet cache."""


class CacheError(Exception):
    """Base class for cache errors."""
    pass


class InvalidKeyError(CacheError, ValueError):
    """Raised when a cache key is empty or not a string."""
    pass


class UnknownCategoryError(InvalidKeyError):
    """Raised when a category is not one of the known cache categories."""
    pass
