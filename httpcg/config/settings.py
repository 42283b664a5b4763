"""Environment-driven settings for the HTTP client builder."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from httpcg.builder import HTTPClientBuilder, new_builder
from httpcg.core.logging import get_logger


logger = get_logger(__name__)


__all__ = ["HTTPClientSettings", "builder_from_settings"]


class HTTPClientSettings(BaseSettings):
    """
    HTTP client settings loaded from the environment.

    Variables use the ``HTTPCG__`` prefix, e.g. ``HTTPCG__CONNECTION_TIMEOUT=2.5``.
    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_prefix="HTTPCG__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    connection_timeout: float = Field(
        default=5.0, description="Max seconds to establish a TCP connection"
    )
    keep_alive: float = Field(
        default=30.0, description="TCP keep-alive interval in seconds"
    )
    expect_continue_timeout: float = Field(
        default=1.0, description="Seconds to wait for a 100 Continue response"
    )
    idle_conn_timeout: float = Field(
        default=90.0, description="Seconds an idle pooled connection is kept"
    )
    max_idle_connections: int = Field(
        default=100, ge=0, description="Idle pooled connections allowed in total"
    )
    max_host_idle_connections: int = Field(
        default=10, ge=0, description="Idle pooled connections allowed per host"
    )
    response_header_timeout: float = Field(
        default=5.0, description="Seconds to wait for response headers"
    )
    tls_handshake_timeout: float = Field(
        default=5.0, description="Max seconds to complete a TLS handshake"
    )
    http2: bool = Field(default=False, description="Negotiate HTTP/2")
    cookies: bool = Field(default=False, description="Attach an in-memory cookie jar")


def builder_from_settings(
    settings: HTTPClientSettings | None = None,
) -> HTTPClientBuilder:
    """Create a builder from settings.

    Args:
        settings: Settings to apply, read from the environment when omitted

    Returns:
        Builder holding the configured values
    """
    if settings is None:
        settings = HTTPClientSettings()

    builder = (
        new_builder()
        .with_connection_timeout(settings.connection_timeout)
        .with_keep_alive(settings.keep_alive)
        .with_expect_continue_timeout(settings.expect_continue_timeout)
        .with_idle_conn_timeout(settings.idle_conn_timeout)
        .with_max_idle_connections(
            settings.max_idle_connections, settings.max_host_idle_connections
        )
        .with_response_header_timeout(settings.response_header_timeout)
        .with_tls_handshake_timeout(settings.tls_handshake_timeout)
    )
    if settings.http2:
        builder = builder.with_http2()
    if settings.cookies:
        builder = builder.with_cookies()

    logger.debug("builder_loaded_from_settings", http2=settings.http2, cookies=settings.cookies)
    return builder
