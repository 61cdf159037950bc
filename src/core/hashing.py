"""Content hashing and hash-string utilities.

This module computes blob identifiers and validates hash arguments.
Every hash accepted anywhere in datablob passes through here.
"""

from __future__ import annotations

import hashlib
import string
from pathlib import Path
from typing import BinaryIO, Iterable

from core.constants import HASH_ALGORITHM, HASH_LENGTH, HASH_READ_CHUNK_SIZE, SHORT_HASH_LENGTH
from core.errors import BlobIOError, BlobValidationError

_HEX_DIGITS = frozenset(string.hexdigits)


def compute_hash(stream: BinaryIO) -> str:
    """Hash an entire binary stream.

    Args:
        stream: Readable binary stream, consumed to EOF.

    Returns:
        Lowercase hex SHA-1 digest.

    Raises:
        BlobIOError: If the stream cannot be fully read.
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    try:
        while True:
            chunk = stream.read(HASH_READ_CHUNK_SIZE)
            if not chunk:
                break
            hasher.update(chunk)
    except OSError as error:
        raise BlobIOError(
            f"Failed to read stream while hashing: {error}. "
            "Check the source file is readable and retry."
        ) from error
    return hasher.hexdigest()


def compute_file_hash(path: Path) -> str:
    """Hash the contents of a local file.

    Args:
        path: File to hash.

    Returns:
        Lowercase hex SHA-1 digest.

    Raises:
        BlobIOError: If the file cannot be opened or read.
    """
    try:
        with path.open("rb") as handle:
            return compute_hash(handle)
    except OSError as error:
        raise BlobIOError(
            f"Failed to open {path} for hashing: {error.strerror or error}. "
            "Check the file exists and is readable.",
            path=path,
        ) from error


def is_valid_hash(value: object) -> bool:
    """Return whether value is a 40-character hex string."""
    if not isinstance(value, str) or len(value) != HASH_LENGTH:
        return False
    return all(char in _HEX_DIGITS for char in value)


def short_hash(value: str) -> str:
    """Return the display prefix of a hash. Never use it as a key."""
    return value[:SHORT_HASH_LENGTH]


def deduplicate(values: Iterable[str]) -> list[str]:
    """Drop later duplicates while keeping first-seen order.

    Args:
        values: Input strings.

    Returns:
        Ordered unique strings.
    """
    unique_values: list[str] = []
    seen: set[str] = set()
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        unique_values.append(value)
    return unique_values


def validate_hashes(values: Iterable[str]) -> list[str]:
    """Validate a batch of hashes all-or-nothing.

    Args:
        values: Requested hash strings.

    Returns:
        Lowercased hashes in input order, duplicates retained.

    Raises:
        BlobValidationError: On the first malformed entry.
    """
    normalized: list[str] = []
    for value in values:
        if not is_valid_hash(value):
            raise BlobValidationError(
                f"Invalid <hash>: {value!r}. "
                f"Expected {HASH_LENGTH} hexadecimal characters (a SHA-1 digest).",
                blob_hash=str(value),
            )
        normalized.append(value.lower())
    return normalized
