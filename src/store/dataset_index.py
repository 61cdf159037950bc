"""Blob-level operations bound to one blob store backend.

This module maps content hashes onto store keys and moves bytes
between local files and the selected local or remote store.
"""

from __future__ import annotations

from contextlib import closing
from pathlib import Path
import shutil
from typing import BinaryIO

from core.config import BlobConfig
from core.constants import BLOB_KEY_PREFIX, LOCAL_TARGET, REMOTE_TARGET, SUPPORTED_TARGETS
from core.errors import BlobConfigError, BlobIOError
from core.hashing import compute_hash
from core.logging_config import get_logger
from core.types import BlobCheckResult, StoreTarget
from store.blob_store import BlobStore, LocalBlobStore
from store.file_io import atomic_write_stream
from store.s3_blob_store import create_s3_blob_store

_LOGGER = get_logger(__name__)


def blob_key(blob_hash: str) -> str:
    """Return the store key for a blob hash."""
    return f"{BLOB_KEY_PREFIX}{blob_hash}"


class DatasetIndex:
    """Blob operations scoped to a single blob store.

    Hashes passed here are trusted: callers validate them and resolve
    paths through the manifest before calling in.
    """

    def __init__(self, store: BlobStore, name: str = LOCAL_TARGET) -> None:
        """Bind an index to a blob store.

        Args:
            store: Backend implementing put/get.
            name: Label used in log events, e.g. ``local`` or ``remote``.
        """
        self._store = store
        self._name = name

    @property
    def name(self) -> str:
        """Return the backend label."""
        return self._name

    @property
    def store(self) -> BlobStore:
        """Return the bound blob store."""
        return self._store

    def put_blob(self, blob_hash: str, local_path: Path) -> None:
        """Upload a local file as the blob named by ``blob_hash``.

        The file's contents are not re-hashed; the caller must pass a
        path already known to hold ``blob_hash``.

        Args:
            blob_hash: Content hash naming the blob.
            local_path: File to read.

        Raises:
            BlobIOError: If the file cannot be opened or read.
            BlobTransportError: If a remote store rejects the upload.
        """
        try:
            handle = local_path.open("rb")
        except OSError as error:
            raise BlobIOError(
                f"Failed to open {local_path} for upload: {error.strerror or error}. "
                "Check the file exists and is readable.",
                blob_hash=blob_hash,
                path=local_path,
            ) from error
        with handle:
            self._store.put(blob_key(blob_hash), handle)
        _LOGGER.debug("blob_put", store=self._name, blob_hash=blob_hash, path=str(local_path))

    def get_blob(self, blob_hash: str, local_path: Path, verify: bool = False) -> None:
        """Download the blob named by ``blob_hash`` into a local file.

        Args:
            blob_hash: Content hash naming the blob.
            local_path: File to create or replace.
            verify: Re-hash downloaded bytes and refuse a mismatch.

        Raises:
            BlobNotFoundError: If the store has no such blob.
            BlobIOError: If the local file cannot be written.
            BlobIntegrityError: If ``verify`` is set and content mismatches.
        """
        expected_hash = blob_hash if verify else None
        with closing(self._store.get(blob_key(blob_hash))) as stream:
            atomic_write_stream(local_path, stream, expected_hash=expected_hash)
        _LOGGER.debug(
            "blob_get",
            store=self._name,
            blob_hash=blob_hash,
            path=str(local_path),
            verified=verify,
        )

    def check_blob(self, blob_hash: str) -> BlobCheckResult:
        """Re-hash stored content and compare it with its key.

        Args:
            blob_hash: Content hash naming the blob.

        Returns:
            Requested and actual hash pair.

        Raises:
            BlobNotFoundError: If the store has no such blob.
        """
        with closing(self._store.get(blob_key(blob_hash))) as stream:
            actual_hash = compute_hash(stream)
        result = BlobCheckResult(blob_hash=blob_hash, actual_hash=actual_hash)
        if not result.ok:
            _LOGGER.warning(
                "blob_check_mismatch",
                store=self._name,
                blob_hash=blob_hash,
                actual_hash=actual_hash,
            )
        return result

    def show_blob(self, blob_hash: str, output: BinaryIO) -> None:
        """Stream stored blob content to a binary writer.

        Args:
            blob_hash: Content hash naming the blob.
            output: Writable binary stream.

        Raises:
            BlobNotFoundError: If the store has no such blob.
        """
        with closing(self._store.get(blob_key(blob_hash))) as stream:
            shutil.copyfileobj(stream, output)


def open_dataset_index(config: BlobConfig, target: StoreTarget) -> DatasetIndex:
    """Build a dataset index for the requested backend.

    Args:
        config: Runtime configuration.
        target: ``local`` for the filesystem store, ``remote`` for S3.

    Returns:
        Dataset index bound to the selected store.

    Raises:
        BlobConfigError: If the target is unknown or not configured.
    """
    if target == LOCAL_TARGET:
        return DatasetIndex(LocalBlobStore(config.local_store_root), name=LOCAL_TARGET)
    if target == REMOTE_TARGET:
        return DatasetIndex(create_s3_blob_store(config), name=REMOTE_TARGET)
    raise BlobConfigError(
        f"Unsupported blob store target '{target}'. Choose one of {SUPPORTED_TARGETS}."
    )
