"""Core errors and logging for httpcg."""

from httpcg.core.errors import (
    CookieStoreInitializationError,
    HTTP2ConfigurationError,
    HTTPClientBuilderError,
)
from httpcg.core.logging import get_logger, setup_logging


__all__ = [
    "CookieStoreInitializationError",
    "HTTP2ConfigurationError",
    "HTTPClientBuilderError",
    "get_logger",
    "setup_logging",
]
