"""Persisted Manifest file IO.

The Manifest file is a YAML mapping of relative path to content hash
kept at the dataset root. It lets ``get`` restore files that are not
present in the working tree.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

import yaml

from core.constants import MANIFEST_FILE_NAME
from core.errors import BlobNotFoundError, BlobValidationError
from core.hashing import is_valid_hash
from store.file_io import atomic_write_text


def manifest_file_path(dataset_root: Path) -> Path:
    """Return the Manifest file location for a dataset root."""
    return dataset_root / MANIFEST_FILE_NAME


def read_manifest_file(dataset_root: Path) -> dict[str, str]:
    """Load and validate the persisted Manifest file.

    Args:
        dataset_root: Dataset directory holding the Manifest file.

    Returns:
        Mapping of relative POSIX path to lowercase hash, sorted by path.

    Raises:
        BlobNotFoundError: If the Manifest file does not exist.
        BlobValidationError: If the file is not a path -> hash mapping.
    """
    manifest_path = manifest_file_path(dataset_root)
    if not manifest_path.exists():
        raise BlobNotFoundError(
            f"Manifest file not found at {manifest_path}. "
            "Run 'datablob manifest --write' to create it.",
            path=manifest_path,
        )
    try:
        payload = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as error:
        raise BlobValidationError(
            f"Failed to parse Manifest file at {manifest_path}: {error}. "
            "Regenerate it with 'datablob manifest --write'.",
            path=manifest_path,
        ) from error
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise BlobValidationError(
            f"Failed to parse Manifest file at {manifest_path}: "
            "expected a mapping of path to hash at top level.",
            path=manifest_path,
        )
    return _validated_entries(manifest_path, payload)


def write_manifest_file(dataset_root: Path, entries: Mapping[str, str]) -> Path:
    """Persist a Manifest file atomically.

    Args:
        dataset_root: Dataset directory.
        entries: Mapping of relative POSIX path to hash.

    Returns:
        Written Manifest file path.
    """
    manifest_path = manifest_file_path(dataset_root)
    body = yaml.safe_dump(dict(sorted(entries.items())), default_flow_style=False)
    atomic_write_text(manifest_path, body)
    return manifest_path


def _validated_entries(manifest_path: Path, payload: dict[object, object]) -> dict[str, str]:
    """Check every Manifest entry is a relative path mapped to a hash.

    Args:
        manifest_path: Manifest file path for error context.
        payload: Decoded YAML mapping.

    Returns:
        Validated entries sorted by path.

    Raises:
        BlobValidationError: On the first invalid entry.
    """
    entries: dict[str, str] = {}
    for raw_path, raw_hash in payload.items():
        relative_path = str(raw_path)
        parts = Path(relative_path).parts
        if Path(relative_path).is_absolute() or ".." in parts:
            raise BlobValidationError(
                f"Invalid Manifest path '{relative_path}' in {manifest_path}: "
                "paths must be relative to the dataset root.",
                path=manifest_path,
            )
        if not is_valid_hash(raw_hash):
            raise BlobValidationError(
                f"Invalid hash {raw_hash!r} for '{relative_path}' in {manifest_path}. "
                "Regenerate it with 'datablob manifest --write'.",
                path=manifest_path,
            )
        entries[relative_path] = str(raw_hash).lower()
    return dict(sorted(entries.items()))
