"""Unit tests for the persisted file hash cache."""

from __future__ import annotations

import os

import pytest

from core.errors import BlobStoreError
from dataset.file_scan import scan_file_hashes
from dataset.hash_cache import HashCache
from tests.blob_fakes import sha1_hex, write_files


def test_second_scan_reuses_cached_hashes(tmp_path) -> None:
    """Unchanged files are served from the cache on the next run."""
    write_files(tmp_path, {"a.txt": b"x", "b.txt": b"y"})
    scan_file_hashes(tmp_path, HashCache.for_dataset(tmp_path))

    cache = HashCache.for_dataset(tmp_path)
    entries = scan_file_hashes(tmp_path, cache)

    assert (cache.hits, cache.misses) == (2, 0)
    assert entries["a.txt"] == sha1_hex(b"x")


def test_changed_mtime_invalidates_entry(tmp_path) -> None:
    """A file whose mtime changed is re-hashed."""
    write_files(tmp_path, {"a.txt": b"x"})
    scan_file_hashes(tmp_path, HashCache.for_dataset(tmp_path))
    (tmp_path / "a.txt").write_bytes(b"z")
    stat = (tmp_path / "a.txt").stat()
    os.utime(tmp_path / "a.txt", ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))

    cache = HashCache.for_dataset(tmp_path)
    entries = scan_file_hashes(tmp_path, cache)

    assert cache.misses == 1 and entries["a.txt"] == sha1_hex(b"z")


def test_removed_files_are_dropped_from_cache(tmp_path) -> None:
    """Entries for deleted files do not survive the next save."""
    write_files(tmp_path, {"a.txt": b"x", "b.txt": b"y"})
    scan_file_hashes(tmp_path, HashCache.for_dataset(tmp_path))
    (tmp_path / "b.txt").unlink()

    scan_file_hashes(tmp_path, HashCache.for_dataset(tmp_path))
    cache = HashCache.for_dataset(tmp_path)
    scan_file_hashes(tmp_path, cache)

    assert '"b.txt"' not in cache.path.read_text(encoding="utf-8")


def test_cache_file_is_not_tracked(tmp_path) -> None:
    """The cache lives in the metadata directory, outside the manifest."""
    write_files(tmp_path, {"a.txt": b"x"})

    scan_file_hashes(tmp_path, HashCache.for_dataset(tmp_path))
    entries = scan_file_hashes(tmp_path, HashCache.for_dataset(tmp_path))

    assert list(entries) == ["a.txt"]


def test_corrupt_cache_raises_store_error(tmp_path) -> None:
    """Unparseable cache files raise instead of being trusted."""
    cache_path = tmp_path / ".datablob" / "hash_cache.json"
    cache_path.parent.mkdir()
    cache_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(BlobStoreError):
        HashCache.for_dataset(tmp_path)


def test_cache_rejects_invalid_cached_hash(tmp_path) -> None:
    """Cached entries must carry valid hashes."""
    cache_path = tmp_path / ".datablob" / "hash_cache.json"
    cache_path.parent.mkdir()
    cache_path.write_text('{"a.txt": {"size": 1, "mtime_ns": 1, "hash": "bad"}}', encoding="utf-8")

    with pytest.raises(BlobStoreError):
        HashCache.for_dataset(tmp_path)
