"""Transport settings and the proxy-routing transports built from them."""

import socket
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field

from httpcg.core.logging import get_logger


logger = get_logger(__name__)


PoolT = TypeVar("PoolT", httpx.HTTPTransport, httpx.AsyncHTTPTransport)

# Interval used when keep-alive is left at zero
DEFAULT_KEEP_ALIVE = 15
# Largest TCP_KEEPIDLE/TCP_KEEPINTVL value Linux accepts
MAX_KEEP_ALIVE = 32767


class DialerSettings(BaseModel):
    """TCP dialer configuration."""

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(description="Max time to establish a TCP connection")
    keep_alive: float = Field(
        description="Keep-alive interval in seconds, 0 uses the 15s "
        "default and a negative value disables keep-alive"
    )

    def socket_options(self) -> list[tuple[int, int, int]] | None:
        """Translate the keep-alive interval into socket options.

        Returns:
            Socket options for the pool, or None when keep-alive is disabled
        """
        if self.keep_alive < 0:
            return None

        if self.keep_alive == 0:
            interval = DEFAULT_KEEP_ALIVE
        else:
            interval = min(max(1, int(self.keep_alive)), MAX_KEEP_ALIVE)
        options = [(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)]
        if hasattr(socket, "TCP_KEEPIDLE"):
            options.append((socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, interval))
        elif hasattr(socket, "TCP_KEEPALIVE"):
            # macOS names the idle option differently
            options.append((socket.IPPROTO_TCP, socket.TCP_KEEPALIVE, interval))
        if hasattr(socket, "TCP_KEEPINTVL"):
            options.append((socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, interval))
        return options


class TransportSettings(BaseModel):
    """Resolved transport configuration produced by the builder.

    Every pool the transport opens, direct or proxied, is created from the
    same settings. ``tls_handshake_timeout`` and ``expect_continue_timeout``
    are carried for callers and custom transports; httpcore bounds the TLS
    handshake with the connect timeout and never sends ``Expect: 100-continue``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    dialer: DialerSettings
    proxy: Callable[[httpx.Request], httpx.URL | None] | None = None
    response_header_timeout: float
    tls_handshake_timeout: float
    expect_continue_timeout: float
    idle_conn_timeout: float
    max_idle_connections: int
    max_host_idle_connections: int
    http2: bool = False

    def limits(self) -> httpx.Limits:
        """Pool limits for every connection pool."""
        return httpx.Limits(
            max_connections=None,
            max_keepalive_connections=self.max_idle_connections,
            keepalive_expiry=self.idle_conn_timeout,
        )

    def timeout(self) -> httpx.Timeout:
        """Default request timeouts for the client.

        ``read`` carries the response header timeout; the transport lifts it
        once headers arrive so slow bodies are not cut off.
        """
        return httpx.Timeout(
            connect=self.dialer.timeout,
            read=self.response_header_timeout,
            write=None,
            pool=self.dialer.timeout,
        )


class _PoolRouter(Generic[PoolT]):
    """Maps each request to a lazily created pool keyed by its proxy URL."""

    def __init__(self, settings: TransportSettings) -> None:
        self.settings = settings
        self._lock = threading.Lock()
        self._pools: dict[str | None, PoolT] = {None: self._create_pool(None)}

    def _create_pool(self, proxy: httpx.URL | None) -> PoolT:
        raise NotImplementedError()

    @property
    def pools(self) -> dict[str | None, PoolT]:
        """Snapshot of the open pools, keyed by proxy URL (None is direct)."""
        with self._lock:
            return dict(self._pools)

    def _pool_kwargs(self, proxy: httpx.URL | None) -> dict[str, object]:
        return {
            "http2": self.settings.http2,
            "limits": self.settings.limits(),
            "proxy": proxy,
            "socket_options": self.settings.dialer.socket_options(),
        }

    def _pool_for(self, request: httpx.Request) -> PoolT:
        proxy = self.settings.proxy(request) if self.settings.proxy else None
        key = str(proxy) if proxy is not None else None

        with self._lock:
            pool = self._pools.get(key)
            if pool is None:
                pool = self._create_pool(proxy)
                self._pools[key] = pool
                logger.debug(
                    "proxy_pool_created",
                    proxy_host=proxy.host if proxy is not None else None,
                    pool_count=len(self._pools),
                )
        return pool

    @staticmethod
    def _own_timeouts(request: httpx.Request) -> dict[str, float | None]:
        """Give the request a private timeout dict that httpcore reads from."""
        timeouts = dict(request.extensions.get("timeout", {}))
        request.extensions["timeout"] = timeouts
        return timeouts

    def _drain_pools(self) -> list[PoolT]:
        with self._lock:
            pools = list(self._pools.values())
            self._pools.clear()
        return pools


class Transport(_PoolRouter[httpx.HTTPTransport], httpx.BaseTransport):
    """Sync transport routing requests through per-proxy connection pools."""

    def _create_pool(self, proxy: httpx.URL | None) -> httpx.HTTPTransport:
        return httpx.HTTPTransport(**self._pool_kwargs(proxy))  # type: ignore[arg-type]

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        timeouts = self._own_timeouts(request)
        response = self._pool_for(request).handle_request(request)
        # The read timeout bounds the wait for headers only, not body reads
        timeouts["read"] = None
        return response

    def close(self) -> None:
        pools = self._drain_pools()
        for pool in pools:
            pool.close()
        logger.debug("transport_closed", pool_count=len(pools))


class AsyncTransport(_PoolRouter[httpx.AsyncHTTPTransport], httpx.AsyncBaseTransport):
    """Async transport routing requests through per-proxy connection pools."""

    def _create_pool(self, proxy: httpx.URL | None) -> httpx.AsyncHTTPTransport:
        return httpx.AsyncHTTPTransport(**self._pool_kwargs(proxy))  # type: ignore[arg-type]

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        timeouts = self._own_timeouts(request)
        response = await self._pool_for(request).handle_async_request(request)
        timeouts["read"] = None
        return response

    async def aclose(self) -> None:
        pools = self._drain_pools()
        for pool in pools:
            await pool.aclose()
        logger.debug("transport_closed", pool_count=len(pools))
