"""Fluent builder producing httpx clients with tuned transport settings."""

from datetime import timedelta
from http.cookiejar import CookieJar

import httpx
from pydantic import BaseModel, ConfigDict, Field

from httpcg.capabilities import (
    CookieJarFactory,
    HTTP2Configurer,
    configure_http2,
    new_cookie_jar,
)
from httpcg.client import AsyncHTTPClient, HTTPClient
from httpcg.core.errors import (
    CookieStoreInitializationError,
    HTTP2ConfigurationError,
)
from httpcg.core.logging import get_logger
from httpcg.proxy import ProxyResolver, proxy_from_environment
from httpcg.transport import AsyncTransport, DialerSettings, Transport, TransportSettings


logger = get_logger(__name__)


Duration = float | timedelta


def _seconds(value: Duration) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class HTTPClientBuilder(BaseModel):
    """Immutable configuration for building an HTTP client.

    Every ``with_*`` method returns a new builder and leaves the receiver
    untouched, so a base builder can be shared and specialised freely::

        base = new_builder().with_connection_timeout(2)
        client = base.with_http2().with_cookies().build()

    No option is validated; the caller owns the sanity of the values.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    connection_timeout: float = Field(
        default=5.0, description="Max seconds to establish a TCP connection"
    )
    keep_alive: float = Field(
        default=30.0,
        description="TCP keep-alive interval in seconds, 0 uses the 15s "
        "default and a negative value disables keep-alive",
    )
    expect_continue_timeout: float = Field(
        default=1.0, description="Seconds to wait for a 100 Continue response"
    )
    idle_conn_timeout: float = Field(
        default=90.0, description="Seconds an idle pooled connection is kept"
    )
    max_idle_connections: int = Field(
        default=100, description="Idle pooled connections allowed in total"
    )
    max_host_idle_connections: int = Field(
        default=10,
        description="Idle pooled connections allowed per host, "
        "expected to be <= max_idle_connections",
    )
    response_header_timeout: float = Field(
        default=5.0, description="Seconds to wait for response headers"
    )
    tls_handshake_timeout: float = Field(
        default=5.0, description="Max seconds to complete a TLS handshake"
    )
    proxy: ProxyResolver | None = Field(
        default=proxy_from_environment,
        description="Maps a request to its proxy URL, None sends it direct",
    )
    http2: bool = Field(default=False, description="Negotiate HTTP/2")
    store_cookies: bool = Field(
        default=False, description="Attach an in-memory cookie jar"
    )
    http2_configurer: HTTP2Configurer = Field(
        default=configure_http2, description="Enables HTTP/2 on transport settings"
    )
    cookie_jar_factory: CookieJarFactory = Field(
        default=new_cookie_jar, description="Creates the cookie store"
    )

    def _with(self, **changes: object) -> "HTTPClientBuilder":
        return self.model_copy(update=changes)

    def with_max_idle_connections(self, total: int, per_host: int) -> "HTTPClientBuilder":
        """Set how many connections may sit idle in total and per host.

        ``total`` should always be bigger than ``per_host``.
        """
        return self._with(max_idle_connections=total, max_host_idle_connections=per_host)

    def with_connection_timeout(self, timeout: Duration) -> "HTTPClientBuilder":
        """Set the max time to wait until the TCP connection is established."""
        return self._with(connection_timeout=_seconds(timeout))

    def with_tls_handshake_timeout(self, timeout: Duration) -> "HTTPClientBuilder":
        """Set the max time to wait until the TLS handshake completes."""
        return self._with(tls_handshake_timeout=_seconds(timeout))

    def with_expect_continue_timeout(self, timeout: Duration) -> "HTTPClientBuilder":
        return self._with(expect_continue_timeout=_seconds(timeout))

    def with_keep_alive(self, interval: Duration) -> "HTTPClientBuilder":
        return self._with(keep_alive=_seconds(interval))

    def with_idle_conn_timeout(self, timeout: Duration) -> "HTTPClientBuilder":
        return self._with(idle_conn_timeout=_seconds(timeout))

    def with_response_header_timeout(self, timeout: Duration) -> "HTTPClientBuilder":
        return self._with(response_header_timeout=_seconds(timeout))

    def with_http2(self) -> "HTTPClientBuilder":
        return self._with(http2=True)

    def with_cookies(self) -> "HTTPClientBuilder":
        return self._with(store_cookies=True)

    def with_proxy(self, resolver: ProxyResolver | None) -> "HTTPClientBuilder":
        """Replace the proxy resolver; None disables proxying."""
        return self._with(proxy=resolver)

    def with_http2_configurer(self, configurer: HTTP2Configurer) -> "HTTPClientBuilder":
        return self._with(http2_configurer=configurer)

    def with_cookie_jar_factory(self, factory: CookieJarFactory) -> "HTTPClientBuilder":
        return self._with(cookie_jar_factory=factory)

    def transport_settings(self) -> TransportSettings:
        """Assemble transport settings from the accumulated options."""
        return TransportSettings(
            dialer=DialerSettings(
                timeout=self.connection_timeout,
                keep_alive=self.keep_alive,
            ),
            proxy=self.proxy,
            response_header_timeout=self.response_header_timeout,
            tls_handshake_timeout=self.tls_handshake_timeout,
            expect_continue_timeout=self.expect_continue_timeout,
            idle_conn_timeout=self.idle_conn_timeout,
            max_idle_connections=self.max_idle_connections,
            max_host_idle_connections=self.max_host_idle_connections,
        )

    def _apply_http2(self, settings: TransportSettings) -> TransportSettings:
        try:
            settings = self.http2_configurer(settings)
        except HTTP2ConfigurationError:
            raise
        except Exception as e:
            raise HTTP2ConfigurationError(
                f"Failed to enable HTTP/2 on transport: {e}", cause=e
            ) from e
        logger.debug("http2_enabled")
        return settings

    def _create_cookie_jar(self) -> CookieJar:
        factory_name = getattr(self.cookie_jar_factory, "__name__", None)
        try:
            jar = self.cookie_jar_factory()
        except CookieStoreInitializationError:
            raise
        except Exception as e:
            raise CookieStoreInitializationError(
                f"Failed to initialize cookie store: {e}",
                factory_name=factory_name,
                cause=e,
            ) from e

        if isinstance(jar, httpx.Cookies):
            jar = jar.jar
        if not isinstance(jar, CookieJar):
            raise CookieStoreInitializationError(
                f"Cookie jar factory returned {type(jar).__name__}, "
                "expected httpx.Cookies or http.cookiejar.CookieJar",
                factory_name=factory_name,
            )
        logger.debug("cookie_jar_attached", factory=factory_name)
        return jar

    def _prepare(self) -> tuple[TransportSettings, CookieJar | None]:
        settings = self.transport_settings()
        if self.max_host_idle_connections > self.max_idle_connections:
            logger.warning(
                "max_host_idle_exceeds_total",
                max_idle_connections=self.max_idle_connections,
                max_host_idle_connections=self.max_host_idle_connections,
            )

        if self.http2:
            settings = self._apply_http2(settings)

        cookie_jar = self._create_cookie_jar() if self.store_cookies else None
        return settings, cookie_jar

    def build(self) -> HTTPClient:
        """Build a sync client from the builder settings.

        Returns:
            A new client owning its own connection pools; the caller closes it

        Raises:
            HTTP2ConfigurationError: If HTTP/2 could not be enabled
            CookieStoreInitializationError: If the cookie store failed to initialize
        """
        settings, cookie_jar = self._prepare()
        client = HTTPClient(Transport(settings), cookie_jar=cookie_jar)
        logger.debug(
            "http_client_built",
            http2=settings.http2,
            cookies=cookie_jar is not None,
        )
        return client

    def build_async(self) -> AsyncHTTPClient:
        """Build an async client from the builder settings.

        Same steps and errors as :meth:`build`.
        """
        settings, cookie_jar = self._prepare()
        client = AsyncHTTPClient(AsyncTransport(settings), cookie_jar=cookie_jar)
        logger.debug(
            "http_client_built",
            http2=settings.http2,
            cookies=cookie_jar is not None,
            async_client=True,
        )
        return client


def new_builder() -> HTTPClientBuilder:
    """Return a new builder holding the default settings."""
    return HTTPClientBuilder()
