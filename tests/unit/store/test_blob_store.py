"""Unit tests for the local filesystem blob store."""

from __future__ import annotations

from io import BytesIO

import pytest

from core.errors import BlobIOError, BlobNotFoundError, BlobValidationError
from store.blob_store import LocalBlobStore


class _FailingStream:
    def __init__(self) -> None:
        self._sent = False

    def read(self, size: int = -1) -> bytes:
        if self._sent:
            raise OSError("connection reset")
        self._sent = True
        return b"partial"


def test_put_get_roundtrip(tmp_path) -> None:
    """Stored bytes come back unchanged."""
    store = LocalBlobStore(tmp_path)
    store.put("/blob/abc", BytesIO(b"hello world"))

    with store.get("/blob/abc") as stream:
        assert stream.read() == b"hello world"


def test_put_places_blob_under_key_path(tmp_path) -> None:
    """Blob keys map onto {root}/blob/{hash}."""
    store = LocalBlobStore(tmp_path)

    store.put("/blob/abc", BytesIO(b"layout"))

    assert (tmp_path / "blob" / "abc").read_bytes() == b"layout"


def test_put_twice_is_idempotent(tmp_path) -> None:
    """Repeating a put leaves the same observable state."""
    store = LocalBlobStore(tmp_path)
    store.put("/blob/abc", BytesIO(b"same"))
    store.put("/blob/abc", BytesIO(b"same"))

    assert sorted(path.name for path in (tmp_path / "blob").iterdir()) == ["abc"]


def test_failed_put_leaves_no_visible_key(tmp_path) -> None:
    """A stream failing mid-write must not publish a torn blob."""
    store = LocalBlobStore(tmp_path)

    with pytest.raises(BlobIOError):
        store.put("/blob/torn", _FailingStream())  # type: ignore[arg-type]

    with pytest.raises(BlobNotFoundError):
        store.get("/blob/torn")
    assert list((tmp_path / "blob").iterdir()) == []


def test_get_missing_raises(tmp_path) -> None:
    """Missing keys raise a not-found error."""
    store = LocalBlobStore(tmp_path)

    with pytest.raises(BlobNotFoundError):
        store.get("/blob/missing")


@pytest.mark.parametrize("key", ["", "/", "/blob/../escape", "../outside"])
def test_invalid_keys_are_rejected(tmp_path, key: str) -> None:
    """Keys that are empty or escape the root are rejected."""
    store = LocalBlobStore(tmp_path)

    with pytest.raises(BlobValidationError):
        store.put(key, BytesIO(b"x"))
