"""Endpoint resolver and HTTP transport for the Walrus API."""

from typing import Any, Mapping, Optional
import logging
import urllib.parse

import requests

from .errors import ApiError, HttpRequestError, InvalidParameterError, InvalidUrlError

logger = logging.getLogger(__name__)

VALID_SCHEMES = ("http", "https")


def _validate_base_url(value: str, slot: str) -> str:
    """Validate an absolute base URL and normalize it to end with '/'.

    Args:
        value: URL supplied by the caller
        slot: Which endpoint this is ("aggregator" or "publisher")

    Returns:
        Normalized URL

    Raises:
        InvalidUrlError: If the URL is not an absolute http(s) URL
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidUrlError(str(value), "empty URL", slot=slot)

    try:
        parsed = urllib.parse.urlsplit(value.strip())
        # Accessing port validates it
        parsed.port
    except ValueError as e:
        raise InvalidUrlError(value, str(e), slot=slot) from e

    if not parsed.scheme:
        raise InvalidUrlError(value, "relative URL without a base", slot=slot)
    if parsed.scheme.lower() not in VALID_SCHEMES:
        raise InvalidUrlError(value, f"unsupported scheme '{parsed.scheme}'", slot=slot)
    if not parsed.hostname:
        raise InvalidUrlError(value, "empty host", slot=slot)
    if parsed.query or parsed.fragment:
        raise InvalidUrlError(value, "base URL cannot have query or fragment", slot=slot)

    path = parsed.path if parsed.path.endswith("/") else parsed.path + "/"
    return urllib.parse.urlunsplit((parsed.scheme.lower(), parsed.netloc, path, "", ""))


def _quote_segment(segment: Any) -> str:
    """Percent-encode a single path segment, including '/'.

    Raises:
        InvalidParameterError: If the segment is '.' or '..'
    """
    quoted = urllib.parse.quote(str(segment), safe="")
    if quoted in (".", ".."):
        # requests unquotes %2E back to "." when preparing the URL
        raise InvalidParameterError(f"Path segment cannot be '{quoted}'")
    return quoted


def _format_param(value: Any) -> str:
    """Render a query parameter value the way the service expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error_message(response: requests.Response) -> str:
    """Best available diagnostic for a failed response."""
    try:
        text = response.text.strip()
    except (UnicodeDecodeError, LookupError):
        text = ""
    if text:
        return text
    return response.reason or f"HTTP {response.status_code}"


class WalrusClient:
    """Holds the aggregator/publisher endpoints and a shared HTTP session.

    The client is immutable after construction. BlobClient and QuiltClient
    keep a reference to it rather than copying its URLs or session, so one
    instance serves every operation (and the session pools connections).
    """

    def __init__(
        self,
        aggregator_url: str,
        publisher_url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        """Validate endpoints and set up the transport.

        No network I/O happens here.

        Args:
            aggregator_url: Absolute base URL of the read endpoint
            publisher_url: Absolute base URL of the write endpoint
            session: Optional requests session to reuse
            timeout: Optional per-request timeout in seconds (None = transport default)

        Raises:
            InvalidUrlError: If either URL is not a valid absolute URL
        """
        self._aggregator_url = _validate_base_url(aggregator_url, "aggregator")
        self._publisher_url = _validate_base_url(publisher_url, "publisher")
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    @property
    def aggregator_url(self) -> str:
        return self._aggregator_url

    @property
    def publisher_url(self) -> str:
        return self._publisher_url

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    def __repr__(self) -> str:
        return (
            f"WalrusClient(aggregator_url={self._aggregator_url!r}, "
            f"publisher_url={self._publisher_url!r})"
        )

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> "WalrusClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ============= URL building =============

    def _build_url(self, base: str, segments, params: Optional[Mapping[str, Any]]) -> str:
        path = "/".join(_quote_segment(s) for s in segments)
        query_pairs = [
            (key, _format_param(value))
            for key, value in (params or {}).items()
            if value is not None
        ]
        url = urllib.parse.urljoin(base, path)
        if query_pairs:
            url = f"{url}?{urllib.parse.urlencode(query_pairs)}"

        parsed = urllib.parse.urlsplit(url)
        if not parsed.scheme or not parsed.hostname:
            raise InvalidUrlError(url, "failed to build URL")
        return url

    def publisher_endpoint(self, *segments: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Build a publisher URL from path segments and optional query params.

        Segments are percent-encoded. Params whose value is None are omitted;
        if none remain, the URL carries no query string at all.
        """
        return self._build_url(self._publisher_url, segments, params)

    def aggregator_endpoint(self, *segments: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Build an aggregator URL from path segments and optional query params."""
        return self._build_url(self._aggregator_url, segments, params)

    # ============= Transport =============

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Send one request and map failures to WalrusError subclasses.

        Exactly one request is sent; nothing is retried.

        Returns:
            Response with a 2xx status

        Raises:
            InvalidUrlError: If requests rejects the URL
            HttpRequestError: On transport failure
            ApiError: On any non-2xx status
        """
        if self._timeout is not None:
            kwargs.setdefault("timeout", self._timeout)

        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(method, url, **kwargs)
        except (requests.exceptions.InvalidURL,
                requests.exceptions.MissingSchema,
                requests.exceptions.InvalidSchema) as e:
            raise InvalidUrlError(url, str(e)) from e
        except requests.exceptions.RequestException as e:
            raise HttpRequestError(f"HTTP request failed: {e}") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        if not 200 <= response.status_code < 300:
            raise ApiError(response.status_code, _error_message(response))
        return response

    def read_bytes(self, url: str) -> bytes:
        """GET a URL and return the raw body unmodified."""
        response = self.request("GET", url)
        try:
            data = response.content
        except requests.exceptions.RequestException as e:
            raise HttpRequestError(f"Failed to read response body: {e}") from e
        logger.debug("Read %d bytes from %s", len(data), url)
        return data
