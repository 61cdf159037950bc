"""Unit tests for the S3 remote blob store."""

from __future__ import annotations

from dataclasses import replace
from io import BytesIO

import pytest
from botocore.exceptions import ResponseStreamingError

from core.config import BlobConfig
from core.errors import BlobConfigError, BlobIOError, BlobNotFoundError, BlobTransportError
from core.s3_uri import S3Location
from store.dataset_index import DatasetIndex
from store.s3_blob_store import S3BlobStore, create_s3_blob_store
from tests.blob_fakes import FakeS3Client, client_error, sha1_hex


def _store() -> tuple[S3BlobStore, FakeS3Client]:
    client = FakeS3Client()
    return S3BlobStore(client, S3Location(bucket="bucket", prefix="team")), client


def test_put_uploads_under_prefixed_key() -> None:
    """Blob keys are written below the bucket prefix."""
    store, client = _store()

    store.put("/blob/abc", BytesIO(b"payload"))

    assert client.objects[("bucket", "team/blob/abc")] == b"payload"


def test_get_returns_uploaded_content() -> None:
    """Remote round-trip returns identical bytes."""
    store, _ = _store()
    store.put("/blob/abc", BytesIO(b"payload"))

    stream = store.get("/blob/abc")

    assert stream.read() == b"payload"


def test_get_maps_missing_key_to_not_found() -> None:
    """NoSuchKey responses become not-found errors."""
    store, _ = _store()

    with pytest.raises(BlobNotFoundError):
        store.get("/blob/missing")


def test_get_maps_other_client_errors_to_transport_error() -> None:
    """Access errors propagate as transport errors with the cause kept."""
    store, client = _store()
    client.fail_with = client_error("AccessDenied", "GetObject")

    with pytest.raises(BlobTransportError) as error_info:
        store.get("/blob/abc")

    assert error_info.value.__cause__ is client.fail_with


def test_put_maps_client_errors_to_transport_error() -> None:
    """Upload failures propagate as transport errors."""
    store, client = _store()
    client.fail_with = client_error("InternalError", "PutObject")

    with pytest.raises(BlobTransportError):
        store.put("/blob/abc", BytesIO(b"payload"))


def test_create_s3_blob_store_requires_remote_uri(tmp_path) -> None:
    """Remote store construction fails without a configured URI."""
    config = replace(BlobConfig.from_env(), dataset_root=tmp_path, remote_uri=None)

    with pytest.raises(BlobConfigError):
        create_s3_blob_store(config)


def test_create_s3_blob_store_uses_configured_location(monkeypatch, tmp_path) -> None:
    """Remote store is bound to the configured bucket and prefix."""
    config = replace(BlobConfig.from_env(), dataset_root=tmp_path, remote_uri="s3://bucket/data")
    monkeypatch.setattr("store.s3_blob_store.create_s3_client", lambda config: FakeS3Client())

    store = create_s3_blob_store(config)

    assert store.location == S3Location(bucket="bucket", prefix="data")


class _DroppingBody:
    """Response body that fails partway through a download."""

    def __init__(self) -> None:
        self.closed = False
        self._reads = 0

    def read(self, size: int = -1) -> bytes:
        self._reads += 1
        if self._reads > 1:
            raise ResponseStreamingError(error="connection dropped")
        return b"partial"

    def close(self) -> None:
        self.closed = True


class _DroppingS3Client(FakeS3Client):
    def __init__(self) -> None:
        super().__init__()
        self.body = _DroppingBody()

    def get_object(self, Bucket: str, Key: str) -> dict[str, object]:
        return {"Body": self.body}


class _UnreadableStream(BytesIO):
    def read(self, size: int | None = -1) -> bytes:
        raise OSError(5, "Input/output error")


def test_get_maps_mid_stream_failures_to_transport_error(tmp_path) -> None:
    """A dropped download surfaces as a transport error and leaves no file."""
    client = _DroppingS3Client()
    store = S3BlobStore(client, S3Location(bucket="bucket", prefix=""))
    target = tmp_path / "data.bin"
    blob_hash = sha1_hex(b"complete")

    with pytest.raises(BlobTransportError) as error_info:
        DatasetIndex(store, name="remote").get_blob(blob_hash, target)

    assert isinstance(error_info.value.__cause__, ResponseStreamingError)
    assert client.body.closed
    assert list(tmp_path.iterdir()) == []


def test_show_maps_mid_stream_failures_to_transport_error() -> None:
    """Streaming a blob to a writer reports dropped connections as blob errors."""
    store = S3BlobStore(_DroppingS3Client(), S3Location(bucket="bucket", prefix=""))

    with pytest.raises(BlobTransportError):
        DatasetIndex(store, name="remote").show_blob(sha1_hex(b"complete"), BytesIO())


def test_put_maps_local_read_failures_to_io_error() -> None:
    """Unreadable local content raises an IO error like the local store does."""
    store, client = _store()

    with pytest.raises(BlobIOError) as error_info:
        store.put("/blob/abc", _UnreadableStream())

    assert isinstance(error_info.value.__cause__, OSError)
    assert client.objects == {}
