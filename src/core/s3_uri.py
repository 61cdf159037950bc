"""S3 URI parsing helpers.

This module centralizes remote blob store URI parsing.
It keeps URI validation behavior consistent across config and store.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import BlobConfigError


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 location model."""

    bucket: str
    prefix: str

    def object_key(self, key: str) -> str:
        """Join the location prefix with a store key."""
        relative_key = key.lstrip("/")
        if not self.prefix:
            return relative_key
        return f"{self.prefix}/{relative_key}"


def parse_s3_uri(uri: str) -> S3Location:
    """Parse and validate an S3 URI.

    Args:
        uri: URI in format ``s3://bucket`` or ``s3://bucket/prefix``.

    Returns:
        Parsed bucket and normalized prefix pair.

    Raises:
        BlobConfigError: If the URI is not an ``s3://`` URI with a bucket.
    """
    if not uri.startswith("s3://"):
        _raise_uri_error(uri)
    stripped_uri = uri.removeprefix("s3://")
    bucket, _, prefix = stripped_uri.partition("/")
    if not bucket:
        _raise_uri_error(uri)
    return S3Location(bucket=bucket, prefix=prefix.strip("/"))


def _raise_uri_error(uri: str) -> None:
    """Raise an invalid remote URI error.

    Args:
        uri: Invalid URI value.

    Raises:
        BlobConfigError: Always.
    """
    raise BlobConfigError(
        f"Invalid S3 URI '{uri}': expected s3://bucket[/prefix]. "
        "Set DATABLOB_REMOTE_URI or pass --remote-uri with a bucket name."
    )
