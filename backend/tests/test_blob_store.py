"""Tests for the S3 blob store adapter and the batch delete helper.

The boto3 client is a MagicMock; errors are real botocore exceptions so the
code-based classification is exercised as it would be against S3.
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from photovault.exceptions import BlobNotFoundError, BlobStoreError
from photovault.storage.blob_store import S3BlobStore, blob_key_from_path, delete_blobs


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "DeleteObject")


@pytest.fixture()
def s3_client():
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://signed.example.com/put"
    return client


@pytest.fixture()
def store(s3_client):
    return S3BlobStore(bucket_name="photos", region="us-west-2", client=s3_client)


class TestBlobKeyFromPath:

    def test_bare_key(self):
        assert blob_key_from_path("abc-cat.png") == "abc-cat.png"

    def test_public_url(self):
        assert blob_key_from_path("https://photos.s3.us-west-2.amazonaws.com/abc-cat.png") == "abc-cat.png"

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            blob_key_from_path("")


class TestS3BlobStore:

    def test_upload_url_uses_fresh_key(self, store, s3_client):
        first = store.generate_upload_url("cat.png")
        second = store.generate_upload_url("cat.png")

        assert first.key != second.key
        assert first.key.endswith("-cat.png")
        assert first.presigned_url == "https://signed.example.com/put"
        assert first.public_url == f"https://photos.s3.us-west-2.amazonaws.com/{first.key}"

        _, kwargs = s3_client.generate_presigned_url.call_args
        assert kwargs["Params"]["Bucket"] == "photos"
        assert kwargs["ExpiresIn"] == 300

    def test_public_url_with_custom_endpoint(self, s3_client):
        store = S3BlobStore(
            bucket_name="photos", region="us-east-1", endpoint_url="http://minio:9000/", client=s3_client
        )
        assert store.public_url("k.png") == "http://minio:9000/photos/k.png"

    def test_delete_calls_client(self, store, s3_client):
        store.delete("k.png")
        s3_client.delete_object.assert_called_once_with(Bucket="photos", Key="k.png")

    @pytest.mark.parametrize("code", ["NoSuchKey", "404", "NotFound"])
    def test_missing_key_codes(self, store, s3_client, code):
        s3_client.delete_object.side_effect = _client_error(code)
        with pytest.raises(BlobNotFoundError):
            store.delete("k.png")

    def test_other_client_error_is_store_error(self, store, s3_client):
        s3_client.delete_object.side_effect = _client_error("AccessDenied")
        with pytest.raises(BlobStoreError) as exc_info:
            store.delete("k.png")
        assert exc_info.value.reason == "AccessDenied"
        assert exc_info.value.key == "k.png"

    def test_network_error_is_store_error(self, store, s3_client):
        s3_client.delete_object.side_effect = EndpointConnectionError(endpoint_url="https://s3")
        with pytest.raises(BlobStoreError):
            store.delete("k.png")


class TestDeleteBlobs:

    def test_collects_each_outcome(self, store, s3_client):
        def _delete(Bucket, Key):
            if Key == "gone.png":
                raise _client_error("NoSuchKey")
            if Key == "locked.png":
                raise _client_error("AccessDenied")

        s3_client.delete_object.side_effect = _delete

        report = delete_blobs(store, ["ok.png", "https://host/photos/gone.png", "locked.png"])

        assert report.deleted == ["ok.png"]
        assert report.missing == ["gone.png"]
        assert report.failed == {"locked.png": "AccessDenied"}
        assert not report.ok

    def test_all_missing_is_ok(self, store, s3_client):
        s3_client.delete_object.side_effect = _client_error("NoSuchKey")
        assert delete_blobs(store, ["a.png", "b.png"]).ok
