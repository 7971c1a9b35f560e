"""Tests for the error taxonomy."""

import pytest

from walrus_client.errors import (
    ApiError,
    ConfigError,
    HttpRequestError,
    InvalidParameterError,
    InvalidUrlError,
    ParseError,
    UnknownError,
    WalrusError,
)


@pytest.mark.parametrize("error", [
    HttpRequestError("connection refused"),
    InvalidUrlError("nope", "relative URL without a base"),
    ApiError(500, "boom"),
    ParseError("bad json"),
    InvalidParameterError("conflicting flags"),
    UnknownError("???"),
    ConfigError("/tmp/config.yaml", "bad yaml"),
])
def test_all_errors_are_walrus_errors(error):
    assert isinstance(error, WalrusError)
    assert isinstance(error, RuntimeError)


def test_api_error_fields():
    error = ApiError(404, "blob not found")

    assert error.status == 404
    assert error.message == "blob not found"
    assert str(error) == "API error: 404 - blob not found"


def test_invalid_url_names_slot():
    error = InvalidUrlError("ftp://x", "unsupported scheme 'ftp'", slot="publisher")

    assert error.value == "ftp://x"
    assert error.reason == "unsupported scheme 'ftp'"
    assert str(error).startswith("Invalid publisher URL 'ftp://x'")


def test_invalid_url_without_slot():
    assert str(InvalidUrlError("x", "failed to build URL")) == "Invalid URL 'x': failed to build URL"
