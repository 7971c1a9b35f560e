"""Stable file-level API for walrus-client.

This module wraps the byte-level client operations with the file handling
an application needs: read a local file and store it, or read a blob and
write it to disk. The core clients never touch the filesystem; everything
path-related lives here.

Example:
    >>> from walrus_client.api import upload_file, download_blob
    >>> blob_id = upload_file("report.pdf")
    >>> download_blob(blob_id, "downloads/")
    PosixPath('downloads/<blob_id>')
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union
import logging
import os
import tempfile

from .blob import BlobClient
from .client import WalrusClient
from .config import load_config
from .errors import InvalidParameterError
from .models import QuiltMetadata, QuiltStoreResponse
from .quilt import QuiltClient

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@contextmanager
def _client_scope(client: Optional[WalrusClient]) -> Iterator[WalrusClient]:
    """Yield the caller's client, or one built from load_config() and closed afterwards."""
    if client is not None:
        yield client
        return
    with load_config().make_client() as owned:
        yield owned


def atomic_write(data: bytes, final_path: Path) -> None:
    """Write bytes to final_path atomically.

    Data lands in a temp file in the same directory and is renamed into
    place, so a failed write never leaves a truncated file behind.
    """
    final_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmppath = tempfile.mkstemp(
        prefix=f".{final_path.name}.partial-",
        dir=final_path.parent
    )

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmppath, final_path)
    except Exception:
        try:
            os.unlink(tmppath)
        except OSError:
            pass
        raise


def _target_path(dest: PathLike, default_name: str) -> Path:
    dest = Path(dest)
    if dest.is_dir():
        return dest / default_name
    return dest


def upload_file(
    path: PathLike,
    client: Optional[WalrusClient] = None,
    epochs: Optional[int] = 1,
    deletable: Optional[bool] = None,
    permanent: Optional[bool] = None,
    send_object_to: Optional[str] = None,
) -> str:
    """Store a local file as a blob and return its blob id.

    The blob id is returned for both store outcomes (newly created and
    already certified).

    Args:
        path: File to upload
        client: WalrusClient to use (default: built from load_config())
        epochs: Storage epochs

    Returns:
        Blob id of the stored content

    Raises:
        FileNotFoundError: If path does not exist
        WalrusError: On any store failure
    """
    path = Path(path)
    data = path.read_bytes()
    with _client_scope(client) as walrus:
        result = BlobClient(walrus).store_blob(
            data,
            epochs=epochs,
            deletable=deletable,
            permanent=permanent,
            send_object_to=send_object_to,
        )
    logger.info("Uploaded %s (%d bytes) as blob %s", path.name, len(data), result.blob_id)
    return result.blob_id


def download_blob(
    blob_id: str,
    dest: PathLike,
    client: Optional[WalrusClient] = None,
) -> Path:
    """Read a blob and write it to dest.

    If dest is an existing directory the file is named after the blob id.

    Returns:
        Path the content was written to
    """
    with _client_scope(client) as walrus:
        data = BlobClient(walrus).read_blob_by_id(blob_id)
    target = _target_path(dest, blob_id)
    atomic_write(data, target)
    logger.info("Downloaded blob %s to %s", blob_id, target)
    return target


def upload_files_as_quilt(
    paths: Sequence[PathLike],
    client: Optional[WalrusClient] = None,
    metadata: Optional[List[Union[QuiltMetadata, Dict[str, Any]]]] = None,
    epochs: Optional[int] = 1,
    deletable: Optional[bool] = None,
    permanent: Optional[bool] = None,
    send_object_to: Optional[str] = None,
) -> QuiltStoreResponse:
    """Store several local files as one quilt, identified by file name.

    Raises:
        InvalidParameterError: If two paths share a file name
        WalrusError: On any store failure
    """
    files = []
    names = set()
    for p in paths:
        p = Path(p)
        if p.name in names:
            raise InvalidParameterError(
                f"Duplicate file name in quilt: {p.name}. "
                f"Quilt members are identified by file name."
            )
        names.add(p.name)
        files.append((p.name, p.read_bytes()))

    with _client_scope(client) as walrus:
        response = QuiltClient(walrus).store_quilt(
            files,
            metadata=metadata,
            epochs=epochs,
            deletable=deletable,
            permanent=permanent,
            send_object_to=send_object_to,
        )

    if len(response.stored_quilt_blobs) != len(files):
        logger.warning(
            "Quilt %s returned %d members for %d submitted files",
            response.quilt_id, len(response.stored_quilt_blobs), len(files),
        )
    return response


def download_quilt_blob(
    patch_id: str,
    dest: PathLike,
    client: Optional[WalrusClient] = None,
) -> Path:
    """Read one quilt member by patch id and write it to dest."""
    with _client_scope(client) as walrus:
        data = QuiltClient(walrus).read_quilt_blob_by_patch_id(patch_id)
    target = _target_path(dest, patch_id)
    atomic_write(data, target)
    logger.info("Downloaded quilt patch %s to %s", patch_id, target)
    return target
