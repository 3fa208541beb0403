"""Configuration for the wallet cache."""

from .settings import CacheSettings, get_settings
from .logging import configure_logging, log_error

__all__ = [
    'CacheSettings',
    'get_settings',
    'configure_logging',
    'log_error'
]
