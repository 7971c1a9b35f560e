"""Blob store/read operations."""

from typing import IO, Optional, Union
import json
import logging

from .client import WalrusClient
from .errors import ParseError
from .models import BlobStoreResult, parse_blob_store_result

logger = logging.getLogger(__name__)

BlobData = Union[bytes, bytearray, memoryview, IO[bytes]]


def store_params(
    epochs: Optional[int] = None,
    deletable: Optional[bool] = None,
    permanent: Optional[bool] = None,
    send_object_to: Optional[str] = None,
) -> dict:
    """Query parameters shared by blob and quilt stores (None = omitted)."""
    return {
        "epochs": epochs,
        "deletable": deletable,
        "permanent": permanent,
        "send_object_to": send_object_to,
    }


def decode_json(body: bytes, what: str):
    """Decode a JSON response body, mapping failures to ParseError."""
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError, RecursionError) as e:
        raise ParseError(f"Failed to parse {what}: {e}") from e


class BlobClient:
    """Store and read single blobs through a WalrusClient."""

    def __init__(self, client: WalrusClient):
        self.client = client

    def store_blob(
        self,
        data: BlobData,
        epochs: Optional[int] = None,
        deletable: Optional[bool] = None,
        permanent: Optional[bool] = None,
        send_object_to: Optional[str] = None,
    ) -> BlobStoreResult:
        """Store a payload as a blob on the publisher.

        Args:
            data: Raw payload (bytes or a binary file object)
            epochs: Number of storage epochs
            deletable: Store as a deletable blob
            permanent: Store as a permanent blob
            send_object_to: Address that receives the blob object

        Returns:
            NewlyCreatedResult or AlreadyCertifiedResult

        Raises:
            HttpRequestError: Transport failure
            ApiError: Non-success status
            ParseError: Body is not a valid BlobStoreResult
        """
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)

        url = self.client.publisher_endpoint(
            "v1", "blobs",
            params=store_params(epochs, deletable, permanent, send_object_to),
        )
        response = self.client.request("PUT", url, data=data)
        result = parse_blob_store_result(decode_json(response.content, "BlobStoreResult"))

        if result.is_newly_created:
            logger.debug("Stored new blob %s", result.blob_id)
        else:
            logger.debug("Blob %s already certified", result.blob_id)
        return result

    def read_blob_by_id(self, blob_id: str) -> bytes:
        """Read a blob by its content-derived blob id."""
        url = self.client.aggregator_endpoint("v1", "blobs", blob_id)
        return self.client.read_bytes(url)

    def read_blob_by_object_id(self, object_id: str) -> bytes:
        """Read a blob by its on-chain object id."""
        url = self.client.aggregator_endpoint("v1", "blobs", "by-object-id", object_id)
        return self.client.read_bytes(url)
