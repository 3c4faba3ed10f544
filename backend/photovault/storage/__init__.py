"""Blob storage backends and the FastAPI dependency that provides one."""

from functools import lru_cache

from ..core.config import settings
from .blob_store import (
    BlobDeletionReport,
    BlobStore,
    S3BlobStore,
    UploadTarget,
    blob_key_from_path,
    delete_blobs,
)


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    """Shared, stateless S3 client built from settings on first use."""
    return S3BlobStore(
        bucket_name=settings.s3_bucket_name,
        region=settings.s3_region,
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
        endpoint_url=settings.s3_endpoint_url,
        presign_expires=settings.presigned_url_expire_seconds,
    )


__all__ = [
    "BlobDeletionReport",
    "BlobStore",
    "S3BlobStore",
    "UploadTarget",
    "blob_key_from_path",
    "delete_blobs",
    "get_blob_store",
]
