"""Default HTTP/2 and cookie store capabilities used by the builder."""

import importlib.util
from collections.abc import Callable
from http.cookiejar import CookieJar

import httpx

from httpcg.core.errors import HTTP2ConfigurationError
from httpcg.transport import TransportSettings


HTTP2Configurer = Callable[[TransportSettings], TransportSettings]
CookieJarFactory = Callable[[], httpx.Cookies | CookieJar]


def configure_http2(settings: TransportSettings) -> TransportSettings:
    """Enable HTTP/2 negotiation on transport settings.

    Args:
        settings: Transport settings to upgrade

    Returns:
        A copy of the settings with HTTP/2 enabled

    Raises:
        HTTP2ConfigurationError: If the ``h2`` package is not installed
    """
    if importlib.util.find_spec("h2") is None:
        raise HTTP2ConfigurationError(
            "HTTP/2 support requires the 'h2' package; install httpx[http2]"
        )
    return settings.model_copy(update={"http2": True})


def new_cookie_jar() -> httpx.Cookies:
    """Create an empty in-memory cookie jar."""
    return httpx.Cookies()
