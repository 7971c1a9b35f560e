"""Quilt store/read operations.

A quilt bundles several named payloads into one stored blob. Each member
is sent as its own multipart part keyed by its identifier, and can be read
back individually by patch id or by (quilt id, identifier).
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
import logging

from .blob import decode_json, store_params
from .client import WalrusClient
from .errors import InvalidParameterError
from .models import (
    QuiltMetadata,
    QuiltStoreResponse,
    metadata_to_json,
    parse_quilt_store_response,
    validate_metadata,
)

logger = logging.getLogger(__name__)

METADATA_PART = "_metadata"
OCTET_STREAM = "application/octet-stream"

QuiltFile = Tuple[str, bytes]
MultipartPart = Tuple[str, Tuple[Optional[str], bytes, str]]


def build_quilt_parts(
    files: Sequence[QuiltFile],
    metadata: Optional[Sequence[Union[QuiltMetadata, Dict[str, Any]]]] = None,
) -> List[MultipartPart]:
    """Build multipart parts for a quilt store request.

    Pure function: no I/O. Parts keep input order, one per file keyed by its
    identifier, followed by a ``_metadata`` JSON part when metadata is given.
    The result is in the shape ``requests`` accepts for ``files=``.

    Args:
        files: (identifier, payload) pairs
        metadata: Optional tags per member

    Returns:
        List of (field_name, (filename, content, content_type))

    Raises:
        InvalidParameterError: Empty or duplicate identifiers, or metadata
            naming a file that is not in the quilt
        ParseError: Metadata could not be serialized
    """
    parts: List[MultipartPart] = []
    seen = set()
    for identifier, payload in files:
        if not identifier:
            raise InvalidParameterError("Quilt file identifier cannot be empty")
        if identifier == METADATA_PART:
            raise InvalidParameterError(f"'{METADATA_PART}' is reserved and cannot be a file identifier")
        if identifier in seen:
            raise InvalidParameterError(f"Duplicate quilt file identifier: {identifier}")
        seen.add(identifier)
        parts.append((identifier, (identifier, bytes(payload), OCTET_STREAM)))

    if metadata is not None:
        entries = validate_metadata(list(metadata))
        for entry in entries:
            if entry.identifier not in seen:
                raise InvalidParameterError(
                    f"Metadata identifier '{entry.identifier}' does not match any quilt file"
                )
        parts.append((METADATA_PART, (None, metadata_to_json(entries).encode("utf-8"), "application/json")))

    return parts


class QuiltClient:
    """Store quilts and read their members through a WalrusClient."""

    def __init__(self, client: WalrusClient):
        self.client = client

    def store_quilt(
        self,
        files: Sequence[QuiltFile],
        metadata: Optional[Sequence[Union[QuiltMetadata, Dict[str, Any]]]] = None,
        epochs: Optional[int] = None,
        deletable: Optional[bool] = None,
        permanent: Optional[bool] = None,
        send_object_to: Optional[str] = None,
    ) -> QuiltStoreResponse:
        """Store several named payloads as one quilt.

        Parts are built before any network I/O, so invalid metadata fails
        without contacting the publisher.

        Returns:
            QuiltStoreResponse with one StoredQuiltBlob per file

        Raises:
            InvalidParameterError: Bad identifiers
            HttpRequestError: Transport failure
            ApiError: Non-success status
            ParseError: Metadata serialization or response parsing failed
        """
        parts = build_quilt_parts(files, metadata)
        url = self.client.publisher_endpoint(
            "v1", "quilts",
            params=store_params(epochs, deletable, permanent, send_object_to),
        )
        response = self.client.request("PUT", url, files=parts)
        result = parse_quilt_store_response(decode_json(response.content, "QuiltStoreResponse"))

        logger.debug(
            "Stored quilt %s with %d members",
            result.quilt_id, len(result.stored_quilt_blobs),
        )
        return result

    def read_quilt_blob_by_patch_id(self, patch_id: str) -> bytes:
        """Read one quilt member by its patch id."""
        url = self.client.aggregator_endpoint("v1", "blobs", "by-quilt-patch-id", patch_id)
        return self.client.read_bytes(url)

    def read_quilt_blob_by_quilt_id_and_identifier(self, quilt_id: str, identifier: str) -> bytes:
        """Read one quilt member by quilt id and member identifier."""
        url = self.client.aggregator_endpoint("v1", "blobs", "by-quilt-id", quilt_id, identifier)
        return self.client.read_bytes(url)
