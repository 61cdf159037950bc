"""Batch blob put/get orchestration.

This module validates, de-duplicates, and resolves a batch of hashes,
then moves each blob at most once between dataset files and a store.
Batches run sequentially and stop at the first failure; blobs already
transferred stay transferred.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Callable, Iterable, Sequence, TypeVar

from core.errors import BlobError, BlobValidationError
from core.hashing import short_hash, validate_hashes
from core.logging_config import get_logger
from core.types import BlobTransfer, TransferReporter
from dataset.manifest import Manifest
from store.dataset_index import DatasetIndex
from store.file_io import copy_file

_LOGGER = get_logger(__name__)

_T = TypeVar("_T")
_BlobAction = Callable[[str, list[Path]], list[BlobTransfer]]


class BlobTransferEngine:
    """Runs put/get batches for one dataset against one store."""

    def __init__(
        self,
        index: DatasetIndex,
        manifest: Manifest,
        reporter: TransferReporter | None = None,
    ) -> None:
        """Create a transfer engine.

        Args:
            index: Dataset index bound to the target store.
            manifest: Manifest resolving hashes to local paths.
            reporter: Optional callback invoked after each transfer.
        """
        self._index = index
        self._manifest = manifest
        self._reporter = reporter

    def put(self, hashes: Sequence[str]) -> list[BlobTransfer]:
        """Upload each requested blob from its first tracked path.

        Args:
            hashes: Requested hashes; repeats are uploaded once.

        Returns:
            Completed transfers in processing order.

        Raises:
            BlobValidationError: If the batch is empty or has a bad hash.
            BlobNotFoundError: If a hash is unknown to the manifest.
            BlobError: For the first failing upload, with hash and path set.
        """
        return self._run_batch(hashes, self._put_one)

    def get(self, hashes: Sequence[str], verify: bool = False) -> list[BlobTransfer]:
        """Download each requested blob once and fan it out locally.

        The first tracked path is fetched from the store; every other
        path sharing the hash is copied from that local file.

        Args:
            hashes: Requested hashes; repeats are downloaded once.
            verify: Re-hash fetched bytes before replacing local files.

        Returns:
            Completed transfers in processing order, copies included.

        Raises:
            BlobValidationError: If the batch is empty or has a bad hash.
            BlobNotFoundError: If a hash is unknown to the manifest or store.
            BlobError: For the first failing download or copy.
        """

        def get_one(blob_hash: str, paths: list[Path]) -> list[BlobTransfer]:
            return self._get_one(blob_hash, paths, verify)

        return self._run_batch(hashes, get_one)

    def _run_batch(self, hashes: Sequence[str], action: _BlobAction) -> list[BlobTransfer]:
        """Validate the whole batch, then process unique hashes in order.

        Args:
            hashes: Requested hashes.
            action: Per-hash transfer function.

        Returns:
            Completed transfers.
        """
        if not hashes:
            raise BlobValidationError(
                "At least one <hash> argument is required. "
                "Pass hashes explicitly or use --all."
            )
        requested = validate_hashes(hashes)
        completed: list[BlobTransfer] = []
        done: set[str] = set()
        for blob_hash in requested:
            if blob_hash in done:
                continue
            paths = self._manifest.paths_for_hash(blob_hash)
            completed.extend(_with_context(blob_hash, paths[0], partial(action, blob_hash, paths)))
            done.add(blob_hash)
        _LOGGER.info(
            "blob_batch_completed",
            store=self._index.name,
            requested=len(requested),
            unique=len(done),
            transfers=len(completed),
        )
        return completed

    def _put_one(self, blob_hash: str, paths: list[Path]) -> list[BlobTransfer]:
        self._index.put_blob(blob_hash, paths[0])
        return [self._report(BlobTransfer(blob_hash=blob_hash, path=paths[0], action="put"))]

    def _get_one(self, blob_hash: str, paths: list[Path], verify: bool) -> list[BlobTransfer]:
        source = paths[0]
        self._index.get_blob(blob_hash, source, verify=verify)
        transfers = [self._report(BlobTransfer(blob_hash=blob_hash, path=source, action="get"))]
        for path in paths[1:]:
            _with_context(blob_hash, path, partial(copy_file, source, path))
            _LOGGER.debug(
                "blob_copied",
                blob_hash=short_hash(blob_hash),
                source=str(source),
                path=str(path),
            )
            transfers.append(
                self._report(
                    BlobTransfer(blob_hash=blob_hash, path=path, action="copy", source=source)
                )
            )
        return transfers

    def _report(self, transfer: BlobTransfer) -> BlobTransfer:
        if self._reporter is not None:
            self._reporter(transfer)
        return transfer


def expand_requested_hashes(
    hashes: Iterable[str],
    manifest: Manifest,
    include_all: bool,
) -> list[str]:
    """Append every manifest hash to an explicit request when asked.

    Args:
        hashes: Explicitly requested hashes.
        manifest: Manifest providing tracked hashes.
        include_all: Whether to add all tracked hashes.

    Returns:
        Requested hashes followed by sorted manifest hashes.
    """
    requested = list(hashes)
    if include_all:
        requested.extend(sorted(manifest.all_hashes()))
    return requested


def _with_context(blob_hash: str, path: Path, operation: Callable[[], _T]) -> _T:
    """Run an operation, tagging escaping blob errors with hash and path.

    Args:
        blob_hash: Hash being processed.
        path: Local path being processed.
        operation: Zero-argument callable.

    Returns:
        The operation's result.
    """
    try:
        return operation()
    except BlobError as error:
        if error.blob_hash is None:
            error.blob_hash = blob_hash
        if error.path is None:
            error.path = path
        raise
