"""Environment-driven proxy selection for outgoing requests."""

import ipaddress
from collections.abc import Callable
from urllib.request import getproxies_environment, proxy_bypass_environment

import httpx


ProxyResolver = Callable[[httpx.Request], httpx.URL | None]


def _is_loopback(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def proxy_from_environment(request: httpx.Request) -> httpx.URL | None:
    """Return the proxy URL for a request based on the environment.

    Reads HTTP_PROXY, HTTPS_PROXY and NO_PROXY (and their lowercase forms).
    The variable matching the request scheme wins; requests to loopback
    hosts and hosts matched by NO_PROXY go direct.

    Args:
        request: The outgoing request

    Returns:
        Proxy URL, or None when the request should not be proxied
    """
    proxies = getproxies_environment()
    proxy = proxies.get(request.url.scheme)
    if not proxy:
        return None

    host = request.url.host
    if _is_loopback(host):
        return None

    target = f"{host}:{request.url.port}" if request.url.port else host
    if proxy_bypass_environment(target, proxies):
        return None

    # Bare host:port values are treated as plain HTTP proxies
    if "://" not in proxy:
        proxy = f"http://{proxy}"
    return httpx.URL(proxy)


def no_proxy(request: httpx.Request) -> httpx.URL | None:
    """Resolver that sends every request direct."""
    return None
