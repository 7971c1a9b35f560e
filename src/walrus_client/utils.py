"""Utility functions for walrus-client."""

from .models import AlreadyCertifiedResult, BlobStoreResult


def humanize_size(size: float) -> str:
    """Convert bytes to human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def describe_store_result(result: BlobStoreResult) -> str:
    """One-line summary of a store outcome for CLI output."""
    if isinstance(result, AlreadyCertifiedResult):
        info = result.already_certified
        return f"already certified (until epoch {info.end_epoch})"

    info = result.newly_created
    storage = info.blob_object.storage
    return (
        f"newly created ({humanize_size(info.blob_object.size)}, "
        f"epochs {storage.start_epoch}-{storage.end_epoch}, cost {info.cost})"
    )
