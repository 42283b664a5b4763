"""Tests for environment-driven proxy resolution."""

import httpx
import pytest

from httpcg import no_proxy, proxy_from_environment


def _request(url: str) -> httpx.Request:
    return httpx.Request("GET", url)


@pytest.mark.unit
def test_no_proxy_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    assert proxy_from_environment(_request("https://example.com")) is None


@pytest.mark.unit
def test_scheme_selects_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTP_PROXY", "http://plain.proxy:8080")
    monkeypatch.setenv("HTTPS_PROXY", "http://secure.proxy:8443")

    assert proxy_from_environment(_request("http://example.com")) == httpx.URL(
        "http://plain.proxy:8080"
    )
    assert proxy_from_environment(_request("https://example.com")) == httpx.URL(
        "http://secure.proxy:8443"
    )


@pytest.mark.unit
def test_lowercase_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("https_proxy", "http://lower.proxy:3128")

    assert proxy_from_environment(_request("https://example.com")) == httpx.URL(
        "http://lower.proxy:3128"
    )


@pytest.mark.unit
def test_bare_host_port_defaults_to_http(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTPS_PROXY", "proxy.local:3128")

    proxy = proxy_from_environment(_request("https://example.com"))

    assert proxy == httpx.URL("http://proxy.local:3128")


@pytest.mark.unit
@pytest.mark.parametrize(
    "url",
    ["https://localhost/health", "https://127.0.0.1:8443/", "https://[::1]/"],
)
def test_loopback_goes_direct(monkeypatch: pytest.MonkeyPatch, url: str) -> None:
    monkeypatch.setenv("HTTPS_PROXY", "http://proxy.local:3128")

    assert proxy_from_environment(_request(url)) is None


@pytest.mark.unit
def test_no_proxy_bypass(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTPS_PROXY", "http://proxy.local:3128")
    monkeypatch.setenv("NO_PROXY", "internal.example.com,.corp")

    assert proxy_from_environment(_request("https://internal.example.com/")) is None
    assert proxy_from_environment(_request("https://build.corp/")) is None
    assert proxy_from_environment(_request("https://example.com/")) is not None


@pytest.mark.unit
def test_no_proxy_wildcard(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTPS_PROXY", "http://proxy.local:3128")
    monkeypatch.setenv("NO_PROXY", "*")

    assert proxy_from_environment(_request("https://example.com/")) is None


@pytest.mark.unit
def test_no_proxy_resolver() -> None:
    assert no_proxy(_request("https://example.com")) is None
