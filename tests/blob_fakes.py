"""Shared in-memory fakes for blob store tests."""

from __future__ import annotations

import hashlib
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

from botocore.exceptions import ClientError

from core.errors import BlobNotFoundError


class RecordingBlobStore:
    """In-memory blob store that records every call."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []

    def put(self, key: str, content: BinaryIO) -> None:
        self.calls.append(("put", key))
        self.objects[key] = content.read()

    def get(self, key: str) -> BinaryIO:
        self.calls.append(("get", key))
        if key not in self.objects:
            raise BlobNotFoundError(f"missing {key}")
        return BytesIO(self.objects[key])


class FakeS3Client:
    """Subset of the boto3 S3 client used by the remote blob store."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.fail_with: ClientError | None = None

    def upload_fileobj(self, fileobj: BinaryIO, bucket: str, key: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.objects[(bucket, key)] = fileobj.read()

    def get_object(self, Bucket: str, Key: str) -> dict[str, object]:
        if self.fail_with is not None:
            raise self.fail_with
        if (Bucket, Key) not in self.objects:
            raise client_error("NoSuchKey", "GetObject")
        return {"Body": BytesIO(self.objects[(Bucket, Key)])}


def client_error(code: str, operation: str) -> ClientError:
    """Build a botocore client error with the given AWS code."""
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


def sha1_hex(data: bytes) -> str:
    """Return the SHA-1 hex digest of bytes."""
    return hashlib.sha1(data).hexdigest()


def write_files(root: Path, files: dict[str, bytes]) -> None:
    """Create files below root from a relative path -> content mapping."""
    for relative_path, content in files.items():
        path = root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
