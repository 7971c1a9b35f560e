"""walrus-client: blob and quilt client for the Walrus storage HTTP API."""

from .blob import BlobClient
from .client import WalrusClient
from .errors import (
    ApiError,
    HttpRequestError,
    InvalidParameterError,
    InvalidUrlError,
    ParseError,
    UnknownError,
    WalrusError,
)
from .models import (
    AlreadyCertified,
    AlreadyCertifiedResult,
    BlobObject,
    BlobStoreResult,
    NewlyCreated,
    NewlyCreatedResult,
    QuiltMetadata,
    QuiltStoreResponse,
    StoredQuiltBlob,
)
from .quilt import QuiltClient, build_quilt_parts

__all__ = [
    "WalrusClient",
    "BlobClient",
    "QuiltClient",
    "build_quilt_parts",
    "BlobStoreResult",
    "NewlyCreatedResult",
    "AlreadyCertifiedResult",
    "NewlyCreated",
    "AlreadyCertified",
    "BlobObject",
    "QuiltMetadata",
    "QuiltStoreResponse",
    "StoredQuiltBlob",
    "WalrusError",
    "HttpRequestError",
    "InvalidUrlError",
    "ApiError",
    "ParseError",
    "InvalidParameterError",
    "UnknownError",
]
