"""Atomic local file writes.

Writers stream into a temp file beside the destination, fsync it,
and rename it into place so readers never observe a torn file.
"""

from __future__ import annotations

import hashlib
from io import BytesIO
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

from core.constants import HASH_ALGORITHM, HASH_READ_CHUNK_SIZE, TEMP_FILE_PREFIX
from core.errors import BlobIntegrityError, BlobIOError


def atomic_write_stream(
    path: Path,
    stream: BinaryIO,
    expected_hash: str | None = None,
) -> str:
    """Stream data into ``path`` atomically.

    Args:
        path: Destination file; parent directories are created.
        stream: Readable binary source, consumed to EOF.
        expected_hash: When given, the written bytes must hash to it.

    Returns:
        Hex digest of the written bytes.

    Raises:
        BlobIOError: If the temp file cannot be written or renamed.
        BlobIntegrityError: If ``expected_hash`` does not match.
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=TEMP_FILE_PREFIX, dir=str(path.parent))
    except OSError as error:
        raise BlobIOError(
            f"Failed to create a temp file next to {path}: {error.strerror or error}. "
            "Check the destination directory is writable.",
            path=path,
        ) from error
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            while True:
                chunk = stream.read(HASH_READ_CHUNK_SIZE)
                if not chunk:
                    break
                hasher.update(chunk)
                handle.write(chunk)
            handle.flush()
            os.fsync(handle.fileno())
        digest = hasher.hexdigest()
        if expected_hash is not None and digest != expected_hash:
            raise BlobIntegrityError(
                f"Content written for {path} hashes to {digest}, expected {expected_hash}. "
                "The source blob is corrupt; re-upload it from a good copy.",
                blob_hash=expected_hash,
                path=path,
            )
        os.replace(temp_path, path)
    except OSError as error:
        raise BlobIOError(
            f"Failed to write {path}: {error.strerror or error}. "
            "Check free disk space and directory permissions.",
            path=path,
        ) from error
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return digest


def atomic_write_text(path: Path, text: str) -> None:
    """Write UTF-8 text to ``path`` atomically."""
    atomic_write_bytes(path, text.encode("utf-8"))


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write bytes to ``path`` atomically."""
    atomic_write_stream(path, BytesIO(data))


def copy_file(source: Path, destination: Path) -> None:
    """Copy one local file to another in-process.

    Args:
        source: File to read.
        destination: File to create or replace.

    Raises:
        BlobIOError: If either side cannot be accessed.
    """
    try:
        handle = source.open("rb")
    except OSError as error:
        raise BlobIOError(
            f"Failed to open {source} for copying: {error.strerror or error}. "
            "Check the file exists and is readable.",
            path=source,
        ) from error
    with handle:
        atomic_write_stream(destination, handle)
