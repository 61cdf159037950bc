"""Public SDK surface for datablob.

This module provides a stable import path for library users.
It re-exports the primary client and typed models.
"""

from __future__ import annotations

from core.config import BlobConfig
from core.errors import (
    BlobConfigError,
    BlobError,
    BlobIntegrityError,
    BlobIOError,
    BlobNotFoundError,
    BlobStoreError,
    BlobTransportError,
    BlobValidationError,
)
from core.handle import DatasetHandle, parse_dataset_handle
from core.hashing import compute_hash, deduplicate, is_valid_hash, short_hash
from core.types import BlobCheckResult, BlobTransfer, BlobTransferRequest
from dataset.manifest import Manifest
from store.blob_sdk import BlobClient
from store.blob_store import BlobStore, LocalBlobStore
from store.dataset_index import DatasetIndex, blob_key
from store.s3_blob_store import S3BlobStore
from transfer.blob_transfer import BlobTransferEngine

__all__ = [
    "BlobCheckResult",
    "BlobClient",
    "BlobConfig",
    "BlobConfigError",
    "BlobError",
    "BlobIOError",
    "BlobIntegrityError",
    "BlobNotFoundError",
    "BlobStore",
    "BlobStoreError",
    "BlobTransfer",
    "BlobTransferEngine",
    "BlobTransferRequest",
    "BlobTransportError",
    "BlobValidationError",
    "DatasetHandle",
    "DatasetIndex",
    "LocalBlobStore",
    "Manifest",
    "S3BlobStore",
    "blob_key",
    "compute_hash",
    "deduplicate",
    "is_valid_hash",
    "parse_dataset_handle",
    "short_hash",
]
