"""Datafile handle lookup.

A dataset directory may carry a YAML ``Datafile`` whose ``dataset``
key names it. Only that key is read here, to check the dataset
reference is well-formed.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from core.constants import DATAFILE_NAME
from core.errors import BlobNotFoundError, BlobValidationError
from core.handle import DatasetHandle, parse_dataset_handle


def read_datafile_handle(dataset_root: Path) -> DatasetHandle:
    """Read and parse the dataset handle declared in a Datafile.

    Args:
        dataset_root: Dataset directory holding the Datafile.

    Returns:
        Parsed dataset handle.

    Raises:
        BlobNotFoundError: If the Datafile does not exist.
        BlobValidationError: If the file or its handle is malformed.
    """
    datafile_path = dataset_root / DATAFILE_NAME
    if not datafile_path.exists():
        raise BlobNotFoundError(
            f"Datafile not found at {datafile_path}. "
            "Pass a handle explicitly or create a Datafile with a 'dataset' key.",
            path=datafile_path,
        )
    try:
        payload = yaml.safe_load(datafile_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as error:
        raise BlobValidationError(
            f"Failed to parse Datafile at {datafile_path}: {error}. Fix the YAML syntax.",
            path=datafile_path,
        ) from error
    handle_value = payload.get("dataset") if isinstance(payload, dict) else None
    if not isinstance(handle_value, str):
        raise BlobValidationError(
            f"Invalid Datafile at {datafile_path}: expected string field 'dataset'. "
            "Add 'dataset: author/name' to the Datafile.",
            path=datafile_path,
        )
    return parse_dataset_handle(handle_value)
