"""Response and request models for the Walrus HTTP API.

The service speaks lowerCamelCase JSON (``registeredEpoch``, ``blobId``);
models here use snake_case attributes with camelCase aliases so the same
classes can validate responses and serialize requests.

Store Outcomes:
---------------
A store request ends in one of two ways:

1. Newly created: the payload was registered and certified in this call
   (``{"newlyCreated": {...}}``)
2. Already certified: an identical payload was stored before, nothing new
   was registered (``{"alreadyCertified": {...}}``)

``BlobStoreResult`` is a union of the two wrapper models below. Each
wrapper forbids extra keys, so a body carrying both outcomes (or neither)
fails validation instead of being silently accepted.
"""

import json
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from .errors import ParseError


class WalrusModel(BaseModel):
    """Base model with camelCase wire names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ============= Blob Objects =============

class StorageInfo(WalrusModel):
    """Storage reservation backing a blob."""

    id: str
    start_epoch: int
    end_epoch: int
    storage_size: int


class BlobObject(WalrusModel):
    """On-chain object describing a registered blob."""

    id: str                            # object id, usable with by-object-id reads
    registered_epoch: int
    blob_id: str                       # content-derived id, usable with blob reads
    size: int
    encoding_type: str
    certified_epoch: Optional[int] = None
    storage: StorageInfo
    deletable: bool


class RegisterFromScratch(WalrusModel):
    encoded_length: int
    epochs_ahead: int


class ResourceOperation(WalrusModel):
    """How storage was acquired for a newly created blob."""

    register_from_scratch: Optional[RegisterFromScratch] = None


class NewlyCreated(WalrusModel):
    blob_object: BlobObject
    resource_operation: ResourceOperation
    cost: int


class Event(WalrusModel):
    """Certification event reference."""

    tx_digest: str
    event_seq: str


class AlreadyCertified(WalrusModel):
    blob_id: str
    event: Event
    end_epoch: int


# ============= Store Results =============

class NewlyCreatedResult(WalrusModel):
    """Store outcome: the payload was newly registered."""

    model_config = ConfigDict(extra="forbid")

    newly_created: NewlyCreated

    @property
    def blob_id(self) -> str:
        return self.newly_created.blob_object.blob_id

    @property
    def is_newly_created(self) -> bool:
        return True


class AlreadyCertifiedResult(WalrusModel):
    """Store outcome: an identical payload was already certified."""

    model_config = ConfigDict(extra="forbid")

    already_certified: AlreadyCertified

    @property
    def blob_id(self) -> str:
        return self.already_certified.blob_id

    @property
    def is_newly_created(self) -> bool:
        return False


BlobStoreResult = Union[NewlyCreatedResult, AlreadyCertifiedResult]

_blob_store_result_adapter: TypeAdapter = TypeAdapter(BlobStoreResult)


def parse_blob_store_result(data: Any) -> BlobStoreResult:
    """Validate a decoded JSON object into one of the two store outcomes.

    Args:
        data: Decoded JSON (usually a dict)

    Returns:
        NewlyCreatedResult or AlreadyCertifiedResult

    Raises:
        ParseError: If the object matches neither outcome or both
    """
    try:
        return _blob_store_result_adapter.validate_python(data)
    except ValidationError as e:
        raise ParseError(f"Failed to parse BlobStoreResult: {e}") from e


# ============= Quilts =============

class StoredQuiltBlob(WalrusModel):
    """One member of a stored quilt."""

    identifier: str
    quilt_patch_id: str


class QuiltStoreResponse(WalrusModel):
    """Result of storing a quilt."""

    blob_store_result: BlobStoreResult
    stored_quilt_blobs: List[StoredQuiltBlob]

    @property
    def quilt_id(self) -> str:
        """Blob id of the quilt as a whole."""
        return self.blob_store_result.blob_id

    def patch_id_for(self, identifier: str) -> str:
        """Look up a member's patch id by identifier.

        Members are matched by identifier, not by position, because the
        service does not guarantee reply ordering.

        Raises:
            KeyError: If no member has this identifier
        """
        for blob in self.stored_quilt_blobs:
            if blob.identifier == identifier:
                return blob.quilt_patch_id
        raise KeyError(identifier)


class QuiltMetadata(BaseModel):
    """Tags attached to one quilt member, sent alongside the files."""

    identifier: str
    tags: Dict[str, str] = Field(default_factory=dict)


def validate_metadata(metadata: List[Union[QuiltMetadata, Dict[str, Any]]]) -> List[QuiltMetadata]:
    """Coerce metadata entries (models or plain dicts) to QuiltMetadata.

    Raises:
        ParseError: If any entry does not have the expected shape
    """
    try:
        return [QuiltMetadata.model_validate(m) for m in metadata]
    except ValidationError as e:
        raise ParseError(f"Failed to serialize metadata: {e}") from e


def metadata_to_json(metadata: List[Union[QuiltMetadata, Dict[str, Any]]]) -> str:
    """Serialize quilt metadata to the ``_metadata`` JSON array.

    Entries may be QuiltMetadata instances or plain dicts of the same shape.

    Raises:
        ParseError: If any entry cannot be validated or serialized
    """
    entries = validate_metadata(metadata)
    try:
        return json.dumps([m.model_dump(mode="json") for m in entries])
    except (TypeError, ValueError) as e:
        raise ParseError(f"Failed to serialize metadata: {e}") from e


_quilt_response_adapter: TypeAdapter = TypeAdapter(QuiltStoreResponse)


def parse_quilt_store_response(data: Any) -> QuiltStoreResponse:
    """Validate a decoded JSON object into a QuiltStoreResponse.

    Raises:
        ParseError: If the object does not match the expected shape
    """
    try:
        return _quilt_response_adapter.validate_python(data)
    except ValidationError as e:
        raise ParseError(f"Failed to parse QuiltStoreResponse: {e}") from e
