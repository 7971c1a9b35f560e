"""Custom exceptions for walrus-client.

This module defines the closed set of typed exceptions raised by every
client operation. Callers can catch ``WalrusError`` to handle all of them,
or a specific subclass to branch on the failure category.
"""

from typing import Optional


class WalrusError(RuntimeError):
    """Base class for all walrus-client errors."""
    pass


class HttpRequestError(WalrusError):
    """Transport-level failure (connection refused, DNS, TLS, I/O)."""
    pass


class InvalidUrlError(WalrusError):
    """A base URL or a URL built from path segments failed to parse."""

    def __init__(self, value: str, reason: str, slot: Optional[str] = None):
        self.value = value
        self.reason = reason
        self.slot = slot
        label = f"Invalid {slot} URL" if slot else "Invalid URL"
        super().__init__(f"{label} '{value}': {reason}")


class ApiError(WalrusError):
    """Service responded with a non-success HTTP status."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"API error: {status} - {message}")


class ParseError(WalrusError):
    """Response body could not be decoded, or a request body could not be encoded."""
    pass


class InvalidParameterError(WalrusError):
    """Caller-supplied parameter failed validation."""
    pass


class UnknownError(WalrusError):
    """Failure not covered by any other category."""
    pass


# Configuration Errors
class ConfigError(WalrusError):
    """Configuration file could not be read or is malformed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(
            f"Invalid configuration in {path}: {reason}\n"
            f"Fix or remove the file, or set WALRUS_AGGREGATOR_URL and "
            f"WALRUS_PUBLISHER_URL instead."
        )
