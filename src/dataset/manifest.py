"""Dataset manifest.

This module resolves between content hashes and tracked local paths.
Entries come from a pluggable source and are computed at most once
per manifest instance, so each invocation sees current file state.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Mapping

from core.errors import BlobNotFoundError
from core.hashing import short_hash
from dataset.file_scan import scan_file_hashes
from dataset.hash_cache import HashCache
from dataset.manifest_file import read_manifest_file

ManifestSource = Callable[[], Mapping[str, str]]


class Manifest:
    """Bidirectional hash <-> path view over a dataset root."""

    def __init__(self, dataset_root: Path, source: ManifestSource) -> None:
        """Create a manifest.

        Args:
            dataset_root: Directory that relative entry paths resolve against.
            source: Callable returning relative path -> hash in traversal order.
        """
        self._dataset_root = dataset_root
        self._source = source
        self._entries: dict[str, str] | None = None

    @classmethod
    def from_filesystem(cls, dataset_root: Path, hash_cache: HashCache | None = None) -> "Manifest":
        """Build a manifest that hashes the working tree on first use."""
        return cls(dataset_root, lambda: scan_file_hashes(dataset_root, hash_cache))

    @classmethod
    def from_manifest_file(cls, dataset_root: Path) -> "Manifest":
        """Build a manifest backed by the persisted Manifest file."""
        return cls(dataset_root, lambda: read_manifest_file(dataset_root))

    @property
    def dataset_root(self) -> Path:
        """Return the dataset root."""
        return self._dataset_root

    def entries(self) -> dict[str, str]:
        """Return relative path -> hash for every tracked file."""
        if self._entries is None:
            self._entries = dict(self._source())
        return dict(self._entries)

    def paths_for_hash(self, blob_hash: str) -> list[Path]:
        """Return every tracked path currently holding ``blob_hash``.

        Args:
            blob_hash: Lowercase content hash.

        Returns:
            Absolute paths in stable traversal order.

        Raises:
            BlobNotFoundError: If no tracked file has this hash.
        """
        paths = [
            self._dataset_root / relative_path
            for relative_path, entry_hash in self.entries().items()
            if entry_hash == blob_hash
        ]
        if not paths:
            raise BlobNotFoundError(
                f"No tracked file in {self._dataset_root} has hash {short_hash(blob_hash)} "
                f"({blob_hash}). Check the hash or regenerate the manifest.",
                blob_hash=blob_hash,
            )
        return paths

    def hash_for_path(self, path: Path) -> str:
        """Return the hash of a tracked file.

        Args:
            path: Absolute path or path relative to the dataset root.

        Returns:
            Content hash recorded for the path.

        Raises:
            BlobNotFoundError: If the path is not tracked.
        """
        full_path = path if path.is_absolute() else self._dataset_root / path
        try:
            relative_path = full_path.relative_to(self._dataset_root).as_posix()
        except ValueError:
            relative_path = None
        entries = self.entries()
        if relative_path is None or relative_path not in entries:
            raise BlobNotFoundError(
                f"Path {path} is not tracked in {self._dataset_root}. "
                "Only regular files inside the dataset root are tracked.",
                path=path,
            )
        return entries[relative_path]

    def all_hashes(self) -> set[str]:
        """Return the distinct hashes of all tracked files."""
        return set(self.entries().values())
