"""Builder for httpx clients with tuned transport settings."""

from httpcg.builder import HTTPClientBuilder, new_builder
from httpcg.capabilities import configure_http2, new_cookie_jar
from httpcg.client import AsyncHTTPClient, HTTPClient
from httpcg.config import HTTPClientSettings, builder_from_settings
from httpcg.core import (
    CookieStoreInitializationError,
    HTTP2ConfigurationError,
    HTTPClientBuilderError,
    get_logger,
    setup_logging,
)
from httpcg.proxy import no_proxy, proxy_from_environment
from httpcg.transport import (
    AsyncTransport,
    DialerSettings,
    Transport,
    TransportSettings,
)


__all__ = [
    "AsyncHTTPClient",
    "AsyncTransport",
    "CookieStoreInitializationError",
    "DialerSettings",
    "HTTP2ConfigurationError",
    "HTTPClient",
    "HTTPClientBuilder",
    "HTTPClientBuilderError",
    "HTTPClientSettings",
    "Transport",
    "TransportSettings",
    "builder_from_settings",
    "configure_http2",
    "get_logger",
    "new_builder",
    "new_cookie_jar",
    "no_proxy",
    "proxy_from_environment",
    "setup_logging",
]
