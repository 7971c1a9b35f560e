"""Tests for blob store/read operations against the stub service."""

import io

import pytest

from walrus_client.blob import BlobClient
from walrus_client.errors import ApiError, InvalidParameterError, ParseError
from walrus_client.models import AlreadyCertifiedResult, NewlyCreatedResult

from tests.stub_service import already_certified_body, newly_created_body


@pytest.fixture
def blobs(client):
    return BlobClient(client)


class TestStoreAndRead:
    """Round trips through the stub service."""

    def test_round_trip_small_payload(self, blobs):
        result = blobs.store_blob(b"hello")

        assert isinstance(result, NewlyCreatedResult)
        assert blobs.read_blob_by_id(result.blob_id) == b"hello"

    def test_round_trip_empty_payload(self, blobs, service):
        result = blobs.store_blob(b"")

        assert service.last_request.body in (None, b"")
        assert blobs.read_blob_by_id(result.blob_id) == b""

    def test_round_trip_binary_payload(self, blobs):
        payload = bytes(range(256)) * 4

        result = blobs.store_blob(payload)

        assert blobs.read_blob_by_id(result.blob_id) == payload

    def test_store_from_file_object(self, blobs):
        result = blobs.store_blob(io.BytesIO(b"streamed"))

        assert blobs.read_blob_by_id(result.blob_id) == b"streamed"

    def test_store_bytearray(self, blobs):
        result = blobs.store_blob(bytearray(b"mutable"))

        assert blobs.read_blob_by_id(result.blob_id) == b"mutable"

    def test_read_by_object_id(self, blobs):
        result = blobs.store_blob(b"by object")

        object_id = result.newly_created.blob_object.id

        assert blobs.read_blob_by_object_id(object_id) == b"by object"

    def test_restore_is_already_certified(self, blobs):
        """Storing identical bytes twice answers alreadyCertified with the same blob id."""
        first = blobs.store_blob(b"same bytes", epochs=2)
        second = blobs.store_blob(b"same bytes", epochs=2)

        assert isinstance(first, NewlyCreatedResult)
        assert isinstance(second, AlreadyCertifiedResult)
        assert second.already_certified.blob_id == first.newly_created.blob_object.blob_id
        assert second.already_certified.end_epoch == first.newly_created.blob_object.storage.end_epoch

    def test_read_missing_blob(self, blobs):
        with pytest.raises(ApiError) as exc_info:
            blobs.read_blob_by_id("doesnotexist")

        assert exc_info.value.status == 404


class TestStoreRequest:
    """Shape of the outgoing store request."""

    def test_put_to_publisher_without_query(self, blobs, service):
        blobs.store_blob(b"hello")

        request = service.last_request
        assert request.method == "PUT"
        assert request.url == "http://publisher.test/v1/blobs"
        assert request.body == b"hello"

    def test_optional_params_in_query(self, blobs, service):
        blobs.store_blob(b"hello", epochs=5, deletable=True, permanent=False, send_object_to="0xabc")

        assert service.last_request.url == (
            "http://publisher.test/v1/blobs"
            "?epochs=5&deletable=true&permanent=false&send_object_to=0xabc"
        )

    def test_only_epochs(self, blobs, service):
        blobs.store_blob(b"hello", epochs=3)

        assert service.last_request.url == "http://publisher.test/v1/blobs?epochs=3"

    def test_read_urls(self, blobs, service):
        service.respond_with(200, b"x", times=2)

        blobs.read_blob_by_id("id with/slash")
        assert service.last_request.method == "GET"
        assert service.last_request.url == "http://aggregator.test/v1/blobs/id%20with%2Fslash"

        blobs.read_blob_by_object_id("0x42")
        assert service.last_request.url == "http://aggregator.test/v1/blobs/by-object-id/0x42"


class TestStoreFailures:
    """Status and body failures are typed errors."""

    @pytest.mark.parametrize("status", [400, 404, 413, 500, 503])
    def test_error_status_never_parsed(self, blobs, service, status):
        """Even a valid-looking JSON body is not accepted on an error status."""
        service.respond_with(status, newly_created_body(b"x", "blobA", "0x1234567890ab"))

        with pytest.raises(ApiError) as exc_info:
            blobs.store_blob(b"x")

        assert exc_info.value.status == status

    def test_non_json_success_body(self, blobs, service):
        service.respond_with(200, b"<html>gateway</html>")

        with pytest.raises(ParseError) as exc_info:
            blobs.store_blob(b"x")

        assert "BlobStoreResult" in str(exc_info.value)

    def test_wrong_shape_success_body(self, blobs, service):
        service.respond_with(200, {"status": "ok"})

        with pytest.raises(ParseError):
            blobs.store_blob(b"x")

    def test_both_variants_in_success_body(self, blobs, service):
        body = {**newly_created_body(b"x", "blobA", "0x1234567890ab"), **already_certified_body("blobA", 40)}
        service.respond_with(200, body)

        with pytest.raises(ParseError):
            blobs.store_blob(b"x")

    def test_read_returns_body_unmodified(self, blobs, service):
        """Read bodies are returned as-is, even when they look like JSON."""
        service.respond_with(200, b'{"not": "parsed"}')

        assert blobs.read_blob_by_id("any") == b'{"not": "parsed"}'

    def test_deeply_nested_success_body(self, blobs, service):
        """JSON nested past the interpreter's recursion limit is still a ParseError."""
        service.respond_with(200, b"[" * 100000)

        with pytest.raises(ParseError, match="BlobStoreResult"):
            blobs.store_blob(b"x")

    @pytest.mark.parametrize("blob_id", [".", ".."])
    def test_dot_segment_id_rejected_before_sending(self, blobs, service, blob_id):
        with pytest.raises(InvalidParameterError):
            blobs.read_blob_by_id(blob_id)

        assert service.requests == []

    def test_dotted_id_sent_verbatim(self, blobs, service):
        service.respond_with(200, b"x")

        blobs.read_blob_by_id("...")

        assert service.last_request.url == "http://aggregator.test/v1/blobs/..."
