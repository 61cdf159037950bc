"""Python SDK for blob operations.

This module exposes high-level APIs for blob put/get, integrity
checks, and manifest inspection over a configured dataset root.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import BinaryIO

from core.config import BlobConfig
from core.handle import DatasetHandle, parse_dataset_handle
from core.hashing import validate_hashes
from core.types import (
    BlobCheckResult,
    BlobTransfer,
    BlobTransferRequest,
    StoreTarget,
    TransferReporter,
)
from dataset.datafile import read_datafile_handle
from dataset.hash_cache import HashCache
from dataset.manifest import Manifest
from dataset.manifest_file import write_manifest_file
from store.dataset_index import DatasetIndex, open_dataset_index
from transfer.blob_transfer import BlobTransferEngine, expand_requested_hashes


class BlobClient:
    """Primary SDK entry point for blob workflows."""

    def __init__(self, config: BlobConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or BlobConfig.from_env()

    @property
    def config(self) -> BlobConfig:
        """Return the runtime configuration."""
        return self._config

    def put(
        self,
        request: BlobTransferRequest,
        reporter: TransferReporter | None = None,
    ) -> list[BlobTransfer]:
        """Upload requested blobs from dataset files.

        Args:
            request: Batch request.
            reporter: Optional per-transfer callback.

        Returns:
            Completed transfers.

        Raises:
            BlobValidationError: If any requested hash is malformed.
            BlobNotFoundError: If a hash is unknown to the manifest.
        """
        manifest = self.manifest(request.use_manifest_file)
        engine = BlobTransferEngine(self.index(request.target), manifest, reporter)
        hashes = expand_requested_hashes(request.hashes, manifest, request.include_all)
        return engine.put(hashes)

    def get(
        self,
        request: BlobTransferRequest,
        reporter: TransferReporter | None = None,
    ) -> list[BlobTransfer]:
        """Download requested blobs into dataset files.

        Args:
            request: Batch request.
            reporter: Optional per-transfer callback.

        Returns:
            Completed transfers, local copies included.

        Raises:
            BlobValidationError: If any requested hash is malformed.
            BlobNotFoundError: If a hash is unknown to the manifest or store.
        """
        manifest = self.manifest(request.use_manifest_file)
        engine = BlobTransferEngine(self.index(request.target), manifest, reporter)
        hashes = expand_requested_hashes(request.hashes, manifest, request.include_all)
        verify = request.verify or self._config.verify_on_get
        return engine.get(hashes, verify=verify)

    def check(self, hashes: list[str], target: StoreTarget = "local") -> list[BlobCheckResult]:
        """Re-hash stored blobs and compare them with their names.

        Args:
            hashes: Hashes to check.
            target: Store to read from.

        Returns:
            One result per unique hash, in request order.
        """
        index = self.index(target)
        unique_hashes = dict.fromkeys(validate_hashes(hashes))
        return [index.check_blob(blob_hash) for blob_hash in unique_hashes]

    def show(self, blob_hash: str, output: BinaryIO, target: StoreTarget = "local") -> None:
        """Stream one stored blob to a binary writer.

        Args:
            blob_hash: Hash to show.
            output: Writable binary stream.
            target: Store to read from.
        """
        (normalized,) = validate_hashes([blob_hash])
        self.index(target).show_blob(normalized, output)

    def manifest(self, use_manifest_file: bool = False) -> Manifest:
        """Build a manifest over the configured dataset root.

        Args:
            use_manifest_file: Read the persisted Manifest file instead of
                scanning the working tree.

        Returns:
            Manifest for this invocation.
        """
        dataset_root = self._config.dataset_root
        if use_manifest_file:
            return Manifest.from_manifest_file(dataset_root)
        hash_cache = HashCache.for_dataset(dataset_root) if self._config.use_hash_cache else None
        return Manifest.from_filesystem(dataset_root, hash_cache)

    def write_manifest(self) -> Path:
        """Scan the working tree and persist the Manifest file.

        Returns:
            Written Manifest file path.
        """
        entries = self.manifest().entries()
        return write_manifest_file(self._config.dataset_root, entries)

    def index(self, target: StoreTarget) -> DatasetIndex:
        """Open the dataset index for a store target."""
        return open_dataset_index(self._config, target)

    def handle(self, value: str | None = None) -> DatasetHandle:
        """Parse a dataset handle, or read it from the dataset Datafile.

        Args:
            value: Handle string; the Datafile is consulted when omitted.

        Returns:
            Parsed dataset handle.
        """
        if value is None:
            return read_datafile_handle(self._config.dataset_root)
        return parse_dataset_handle(value)

    def with_dataset_root(self, dataset_root: str) -> "BlobClient":
        """Clone the client with a different dataset root.

        Args:
            dataset_root: New dataset root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(dataset_root).expanduser().resolve()
        return BlobClient(replace(self._config, dataset_root=resolved_root))
