"""Blob store interface and local filesystem implementation.

A blob store is a key/value capability with exactly two operations.
Backends differ only in where bytes live, never in semantics.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import BinaryIO, Protocol

from core.errors import BlobIOError, BlobNotFoundError, BlobValidationError
from core.logging_config import get_logger
from store.file_io import atomic_write_stream

_LOGGER = get_logger(__name__)


class BlobStore(Protocol):
    """Key/value storage contract shared by local and remote backends."""

    def put(self, key: str, content: BinaryIO) -> None:
        """Consume ``content`` and persist it under ``key``.

        The key must not become visible to ``get`` until fully written.
        """
        ...

    def get(self, key: str) -> BinaryIO:
        """Return a stream over content stored under ``key``.

        The caller owns and closes the stream. Missing keys raise
        ``BlobNotFoundError``.
        """
        ...


class LocalBlobStore:
    """Filesystem-backed blob store.

    Layout: ``{root}/{key without leading slash}``, so blob keys land
    at ``{root}/blob/{hash}``.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        """Return the store root directory."""
        return self._root

    def put(self, key: str, content: BinaryIO) -> None:
        path = self._key_path(key)
        atomic_write_stream(path, content)
        _LOGGER.debug("local_store_put", key=key, path=str(path))

    def get(self, key: str) -> BinaryIO:
        path = self._key_path(key)
        try:
            return path.open("rb")
        except FileNotFoundError as error:
            raise BlobNotFoundError(
                f"Key {key} not found in local blob store at {self._root}. "
                "Fetch it from the remote store first.",
                path=path,
            ) from error
        except OSError as error:
            raise BlobIOError(
                f"Failed to open {path} from local blob store: {error.strerror or error}. "
                "Check store directory permissions.",
                path=path,
            ) from error

    def _key_path(self, key: str) -> Path:
        """Map a store key onto a file below the store root.

        Args:
            key: Slash-separated store key.

        Returns:
            File path for the key.

        Raises:
            BlobValidationError: If the key is empty or escapes the root.
        """
        parts = PurePosixPath(key.lstrip("/")).parts
        if not parts or any(part in ("..", ".") for part in parts):
            raise BlobValidationError(
                f"Invalid store key {key!r}: keys must be non-empty relative paths "
                "without '.' or '..' segments."
            )
        return self._root.joinpath(*parts)
