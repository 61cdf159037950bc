"""Filesystem scan of tracked dataset files.

This module walks a dataset root and hashes every tracked file.
It is the default manifest source and never persists results itself.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from core.constants import MANIFEST_FILE_NAME
from core.errors import BlobNotFoundError
from core.hashing import compute_file_hash
from core.logging_config import get_logger
from dataset.hash_cache import HashCache

_LOGGER = get_logger(__name__)


def iter_tracked_files(dataset_root: Path) -> Iterator[Path]:
    """Yield tracked files below a dataset root in sorted order.

    Hidden directories (including the ``.datablob`` metadata directory),
    hidden files, and the Manifest file are not tracked.

    Args:
        dataset_root: Dataset directory.

    Yields:
        Absolute file paths.

    Raises:
        BlobNotFoundError: If the dataset root is not a directory.
    """
    if not dataset_root.is_dir():
        raise BlobNotFoundError(
            f"Dataset root {dataset_root} does not exist or is not a directory. "
            "Pass --dataset-root or set DATABLOB_DATASET_ROOT.",
            path=dataset_root,
        )
    for file_path in sorted(dataset_root.rglob("*")):
        relative_parts = file_path.relative_to(dataset_root).parts
        if any(part.startswith(".") for part in relative_parts):
            continue
        if relative_parts == (MANIFEST_FILE_NAME,):
            continue
        if file_path.is_file():
            yield file_path


def scan_file_hashes(dataset_root: Path, hash_cache: HashCache | None = None) -> dict[str, str]:
    """Hash every tracked file below a dataset root.

    Args:
        dataset_root: Dataset directory.
        hash_cache: Optional cache consulted before hashing.

    Returns:
        Ordered mapping of relative POSIX path to content hash.
    """
    entries: dict[str, str] = {}
    for file_path in iter_tracked_files(dataset_root):
        relative_path = file_path.relative_to(dataset_root).as_posix()
        if hash_cache is None:
            entries[relative_path] = compute_file_hash(file_path)
        else:
            entries[relative_path] = hash_cache.file_hash(relative_path, file_path)
    if hash_cache is not None:
        hash_cache.retain(set(entries))
        hash_cache.save()
        _LOGGER.debug(
            "hash_cache_used",
            hits=hash_cache.hits,
            misses=hash_cache.misses,
            cache_path=str(hash_cache.path),
        )
    _LOGGER.debug("manifest_scanned", dataset_root=str(dataset_root), file_count=len(entries))
    return entries
