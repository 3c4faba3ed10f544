"""Object storage for photo bytes.

The relational store keeps metadata; the bytes live in an S3-compatible
bucket addressed by key. Clients upload straight to the bucket through a
presigned PUT URL and then register the photo with its ``image_path``.

Deleting a key that is already gone is not an error for callers of
``delete_blobs``: a previous partial failure may have removed it already.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import BlobNotFoundError, BlobStoreError

logger = logging.getLogger(__name__)

# Error codes S3 and S3-compatible stores use for an absent object.
_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


@dataclass(frozen=True)
class UploadTarget:
    presigned_url: str
    public_url: str
    key: str


class BlobStore(ABC):
    """Key/value store holding raw image bytes."""

    @abstractmethod
    def generate_upload_url(self, filename: str) -> UploadTarget:
        """Reserve a fresh key for *filename* and return where to PUT it."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete *key*.

        Raises:
            BlobNotFoundError: No object exists under *key*.
            BlobStoreError: Any other failure (permissions, network, throttling).
        """


def blob_key_from_path(image_path: str) -> str:
    """Derive the object key from a stored ``image_path``.

    Photos store either the bare key or the public URL of the object; the
    key is the last path segment either way.
    """
    key = image_path.rstrip("/").rsplit("/", 1)[-1]
    if not key:
        raise ValueError(f"Invalid image path: {image_path!r}")
    return key


@dataclass
class BlobDeletionReport:
    """Outcome of a best-effort batch delete."""
    deleted: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def delete_blobs(store: BlobStore, image_paths: Iterable[str]) -> BlobDeletionReport:
    """Delete every object behind *image_paths*, collecting failures instead of stopping.

    Missing objects count as deleted. Every other failure is recorded in
    ``report.failed`` keyed by object key.
    """
    report = BlobDeletionReport()
    for image_path in image_paths:
        try:
            key = blob_key_from_path(image_path)
        except ValueError as e:
            report.failed[image_path] = str(e)
            continue

        try:
            store.delete(key)
        except BlobNotFoundError:
            logger.info("Stored object already absent", extra={"key": key})
            report.missing.append(key)
        except BlobStoreError as e:
            logger.error("Failed to delete stored object", extra={"key": key, "reason": e.reason})
            report.failed[key] = e.reason
        else:
            report.deleted.append(key)
    return report


class S3BlobStore(BlobStore):
    """S3-compatible implementation (AWS S3, MinIO)."""

    def __init__(
        self,
        bucket_name: str,
        region: str,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        presign_expires: int = 300,
        client=None,
    ):
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url
        self.presign_expires = presign_expires

        if client is None:
            client_kwargs = {
                "region_name": region,
                "aws_access_key_id": access_key_id,
                "aws_secret_access_key": secret_access_key,
                "config": Config(signature_version="s3v4"),
            }
            if endpoint_url:
                client_kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("s3", **client_kwargs)
        self.client = client

    def public_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    def generate_upload_url(self, filename: str) -> UploadTarget:
        safe_name = filename.replace("/", "_").strip() or "upload"
        key = f"{uuid.uuid4()}-{safe_name}"
        try:
            url = self.client.generate_presigned_url(
                "put_object",
                Params={"Bucket": self.bucket_name, "Key": key},
                ExpiresIn=self.presign_expires,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to presign upload", extra={"key": key})
            raise BlobStoreError(key, str(e)) from e

        logger.debug("Presigned upload URL generated", extra={"key": key})
        return UploadTarget(presigned_url=url, public_url=self.public_url(key), key=key)

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            if code in _MISSING_KEY_CODES:
                raise BlobNotFoundError(key) from e
            raise BlobStoreError(key, code) from e
        except BotoCoreError as e:
            raise BlobStoreError(key, type(e).__name__) from e
        logger.info("Deleted stored object", extra={"key": key})
