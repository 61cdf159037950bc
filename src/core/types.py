"""Shared typed models.

This module defines immutable data models used by the store,
transfer, SDK, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal

TransferAction = Literal["put", "get", "copy"]
StoreTarget = Literal["local", "remote"]


@dataclass(frozen=True)
class BlobTransfer:
    """One completed blob operation against a local path.

    Attributes:
        blob_hash: Content hash of the blob.
        path: Local path read from (put) or written to (get, copy).
        action: ``put`` and ``get`` hit the store; ``copy`` is local only.
        source: Local path copied from, set for ``copy`` only.
    """

    blob_hash: str
    path: Path
    action: TransferAction
    source: Path | None = None


@dataclass(frozen=True)
class BlobCheckResult:
    """Outcome of re-hashing a stored blob.

    Attributes:
        blob_hash: Requested hash.
        actual_hash: Hash of the stored content.
    """

    blob_hash: str
    actual_hash: str

    @property
    def ok(self) -> bool:
        """Return whether stored content matches its key."""
        return self.blob_hash == self.actual_hash


@dataclass(frozen=True)
class BlobTransferRequest:
    """Batch transfer request used by the SDK and CLI.

    Attributes:
        hashes: Explicitly requested hashes, possibly repeated.
        include_all: Append every hash tracked by the manifest.
        target: Which blob store backend to use.
        use_manifest_file: Resolve paths from the persisted Manifest file.
        verify: Re-hash fetched content before replacing local files.
    """

    hashes: tuple[str, ...] = ()
    include_all: bool = False
    target: StoreTarget = "remote"
    use_manifest_file: bool = False
    verify: bool = False


TransferReporter = Callable[[BlobTransfer], None]
