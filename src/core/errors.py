"""Datablob exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each error can carry the blob hash and local path it was raised for,
so batch callers can report the exact failing item.
"""

from __future__ import annotations

from pathlib import Path


class BlobError(Exception):
    """Base exception for all datablob failures.

    Attributes:
        blob_hash: Hash being processed when the error happened, if any.
        path: Local path being processed when the error happened, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        blob_hash: str | None = None,
        path: Path | str | None = None,
    ) -> None:
        super().__init__(message)
        self.blob_hash = blob_hash
        self.path = path


class BlobConfigError(BlobError):
    """Raised for invalid runtime configuration."""


class BlobValidationError(BlobError):
    """Raised for malformed hashes, keys, handles, or manifest files."""


class BlobNotFoundError(BlobError):
    """Raised when a hash is unknown to the manifest or a store."""


class BlobIOError(BlobError):
    """Raised for local file open, read, or write failures."""


class BlobStoreError(BlobError):
    """Raised for blob store and cache persistence failures."""


class BlobTransportError(BlobError):
    """Raised when a remote blob store call fails."""


class BlobIntegrityError(BlobError):
    """Raised when fetched content does not match its requested hash."""
