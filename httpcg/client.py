"""httpx clients composed of a routing transport and an optional cookie jar."""

from http.cookiejar import CookieJar, DefaultCookiePolicy

import httpx

from httpcg.transport import AsyncTransport, Transport


def _cookie_kwargs(cookie_jar: CookieJar | None) -> dict[str, object]:
    if cookie_jar is not None:
        # A raw CookieJar is adopted by httpx as-is, an httpx.Cookies is copied
        return {"cookies": cookie_jar}
    # httpx always keeps a jar; an empty allow-list makes it store nothing
    return {"cookies": CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))}


class _CookieJarMixin:
    """Exposes the live cookie jar of clients built with cookie storage."""

    cookies: httpx.Cookies
    _stores_cookies: bool

    @property
    def cookie_jar(self) -> CookieJar | None:
        """The jar backing ``cookies``, or None when cookies are discarded."""
        if not self._stores_cookies:
            return None
        return self.cookies.jar


class HTTPClient(_CookieJarMixin, httpx.Client):
    """Sync client built by ``HTTPClientBuilder.build``."""

    def __init__(self, transport: Transport, cookie_jar: CookieJar | None = None):
        """Initialize the client.

        Args:
            transport: Routing transport holding the connection pools
            cookie_jar: Cookie store, or None to discard response cookies
        """
        super().__init__(
            transport=transport,
            timeout=transport.settings.timeout(),
            follow_redirects=True,
            trust_env=False,
            **_cookie_kwargs(cookie_jar),  # type: ignore[arg-type]
        )
        self.transport = transport
        self._stores_cookies = cookie_jar is not None


class AsyncHTTPClient(_CookieJarMixin, httpx.AsyncClient):
    """Async client built by ``HTTPClientBuilder.build_async``."""

    def __init__(
        self, transport: AsyncTransport, cookie_jar: CookieJar | None = None
    ):
        super().__init__(
            transport=transport,
            timeout=transport.settings.timeout(),
            follow_redirects=True,
            trust_env=False,
            **_cookie_kwargs(cookie_jar),  # type: ignore[arg-type]
        )
        self.transport = transport
        self._stores_cookies = cookie_jar is not None
