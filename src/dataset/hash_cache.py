"""Persisted file hash cache.

This module remembers file hashes keyed by path, size, and mtime.
A cached hash is only reused when both size and mtime match exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any

from core.constants import HASH_CACHE_FILE_NAME, METADATA_DIR_NAME
from core.errors import BlobStoreError
from core.hashing import compute_file_hash, is_valid_hash
from store.file_io import atomic_write_text


@dataclass(frozen=True)
class HashCacheEntry:
    """Cached hash of one file state."""

    size: int
    mtime_ns: int
    blob_hash: str


class HashCache:
    """JSON-backed (path, size, mtime) -> hash cache for one dataset root."""

    def __init__(self, cache_path: Path) -> None:
        self._cache_path = cache_path
        self._entries: dict[str, HashCacheEntry] = {}
        self._dirty = False
        self.hits = 0
        self.misses = 0

    @classmethod
    def for_dataset(cls, dataset_root: Path) -> "HashCache":
        """Load the cache stored under a dataset's metadata directory."""
        cache = cls(dataset_root / METADATA_DIR_NAME / HASH_CACHE_FILE_NAME)
        cache.load()
        return cache

    @property
    def path(self) -> Path:
        """Return the cache file location."""
        return self._cache_path

    def load(self) -> None:
        """Read cached entries from disk, if the cache file exists.

        Raises:
            BlobStoreError: If the cache file is not valid JSON.
        """
        if not self._cache_path.exists():
            return
        try:
            payload = json.loads(self._cache_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as error:
            raise BlobStoreError(
                f"Failed to parse hash cache at {self._cache_path}: {error.msg}. "
                "Delete the cache file to rebuild it."
            ) from error
        self._entries = _entries_from_payload(self._cache_path, payload)

    def file_hash(self, relative_path: str, path: Path) -> str:
        """Return the hash of ``path``, reusing a matching cache entry.

        Args:
            relative_path: Cache key, relative to the dataset root.
            path: File location on disk.

        Returns:
            Current content hash.
        """
        stat = path.stat()
        cached = self._entries.get(relative_path)
        if cached and cached.size == stat.st_size and cached.mtime_ns == stat.st_mtime_ns:
            self.hits += 1
            return cached.blob_hash
        self.misses += 1
        blob_hash = compute_file_hash(path)
        self._entries[relative_path] = HashCacheEntry(
            size=stat.st_size,
            mtime_ns=stat.st_mtime_ns,
            blob_hash=blob_hash,
        )
        self._dirty = True
        return blob_hash

    def retain(self, relative_paths: set[str]) -> None:
        """Drop entries for files no longer tracked."""
        stale = set(self._entries) - relative_paths
        for relative_path in stale:
            del self._entries[relative_path]
        if stale:
            self._dirty = True

    def save(self) -> None:
        """Persist entries when anything changed since load."""
        if not self._dirty:
            return
        payload = {
            relative_path: {
                "size": entry.size,
                "mtime_ns": entry.mtime_ns,
                "hash": entry.blob_hash,
            }
            for relative_path, entry in sorted(self._entries.items())
        }
        atomic_write_text(self._cache_path, json.dumps(payload, indent=2) + "\n")
        self._dirty = False


def _entries_from_payload(cache_path: Path, payload: Any) -> dict[str, HashCacheEntry]:
    """Validate a decoded cache payload.

    Args:
        cache_path: Cache file path for error context.
        payload: Decoded JSON document.

    Returns:
        Parsed cache entries.

    Raises:
        BlobStoreError: If the payload shape is invalid.
    """
    if not isinstance(payload, dict):
        raise BlobStoreError(
            f"Failed to parse hash cache at {cache_path}: expected JSON object at top level. "
            "Delete the cache file to rebuild it."
        )
    entries: dict[str, HashCacheEntry] = {}
    for relative_path, item in payload.items():
        try:
            entry = HashCacheEntry(
                size=int(item["size"]),
                mtime_ns=int(item["mtime_ns"]),
                blob_hash=str(item["hash"]),
            )
        except (KeyError, TypeError, ValueError) as error:
            raise BlobStoreError(
                f"Invalid hash cache entry for '{relative_path}' in {cache_path}. "
                "Delete the cache file to rebuild it."
            ) from error
        if not is_valid_hash(entry.blob_hash):
            raise BlobStoreError(
                f"Invalid hash '{entry.blob_hash}' cached for '{relative_path}' in {cache_path}. "
                "Delete the cache file to rebuild it."
            )
        entries[relative_path] = entry
    return entries
