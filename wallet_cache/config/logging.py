import logging.config
from typing import Any, Dict, Optional

import structlog

from .settings import get_settings

# Logger that every wallet_cache module logs under
CACHE_LOGGER = "wallet_cache"


def configure_logging(log_level: Optional[str] = None, cache_log_level: Optional[str] = None) -> None:
    """
    Configure structured JSON logging for the cache and its callers.

    Args:
        log_level: Root log level, defaults to ``WALLET_CACHE_LOG_LEVEL``
        cache_log_level: Level for the ``wallet_cache`` loggers, defaults to
            the root level. Hits and misses are logged at DEBUG.
    """
    level = (log_level or get_settings().log_level).upper()
    cache_level = (cache_log_level or level).upper()

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": structlog.processors.JSONRenderer(),
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "loggers": {
            "": {
                "handlers": ["default"],
                "level": level,
            },
            CACHE_LOGGER: {
                "level": cache_level,
                "propagate": True,
            },
        }
    })

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

def log_error(logger: Any, error: Exception, context: Dict[str, Any] = None) -> None:
    """Log a cache or account failure with its type and message."""
    logger.error(
        "error_occurred",
        error_type=type(error).__name__,
        error_message=str(error),
        **(context or {}),
    )
