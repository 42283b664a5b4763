"""Core error types for the HTTP client builder."""


class HTTPClientBuilderError(Exception):
    """Base exception for all client builder errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize with a message and optional cause.

        Args:
            message: The error message
            cause: The underlying exception that caused this error
        """
        super().__init__(message)
        self.cause = cause
        if cause:
            # Use Python's exception chaining
            self.__cause__ = cause


class HTTP2ConfigurationError(HTTPClientBuilderError):
    """Error raised when HTTP/2 support cannot be enabled on the transport."""


class CookieStoreInitializationError(HTTPClientBuilderError):
    """Error raised when the cookie store cannot be constructed."""

    def __init__(
        self,
        message: str,
        factory_name: str | None = None,
        cause: Exception | None = None,
    ):
        """Initialize with a message, factory name, and cause.

        Args:
            message: The error message
            factory_name: Name of the cookie jar factory that failed
            cause: The underlying exception
        """
        super().__init__(message, cause)
        self.factory_name = factory_name
