"""Runtime configuration model for datablob.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_DATASET_ROOT, DEFAULT_STORE_ROOT, FALSE_VALUES, TRUE_VALUES
from core.errors import BlobConfigError


@dataclass(frozen=True)
class BlobConfig:
    """Validated runtime configuration.

    Attributes:
        dataset_root: Directory holding the tracked dataset files.
        local_store_root: Root directory of the local blob store.
        remote_uri: Optional ``s3://bucket[/prefix]`` remote blob store.
        s3_region: Optional default AWS region for S3 operations.
        s3_profile: Optional AWS profile for boto3 session initialization.
        s3_endpoint_url: Optional S3-compatible endpoint override.
        use_hash_cache: Reuse cached file hashes keyed by size and mtime.
        verify_on_get: Re-hash fetched blobs before replacing local files.
    """

    dataset_root: Path
    local_store_root: Path
    remote_uri: str | None
    s3_region: str | None
    s3_profile: str | None
    s3_endpoint_url: str | None
    use_hash_cache: bool
    verify_on_get: bool

    @classmethod
    def from_env(cls) -> "BlobConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            BlobConfigError: If environment values are invalid.
        """
        dataset_root_value = os.getenv("DATABLOB_DATASET_ROOT", str(DEFAULT_DATASET_ROOT))
        store_root_value = os.getenv("DATABLOB_STORE_ROOT", str(DEFAULT_STORE_ROOT))
        return cls(
            dataset_root=Path(dataset_root_value).expanduser().resolve(),
            local_store_root=Path(store_root_value).expanduser().resolve(),
            remote_uri=os.getenv("DATABLOB_REMOTE_URI") or None,
            s3_region=os.getenv("DATABLOB_S3_REGION") or None,
            s3_profile=os.getenv("DATABLOB_S3_PROFILE") or None,
            s3_endpoint_url=os.getenv("DATABLOB_S3_ENDPOINT_URL") or None,
            use_hash_cache=_parse_bool("DATABLOB_HASH_CACHE", os.getenv("DATABLOB_HASH_CACHE", "")),
            verify_on_get=_parse_bool(
                "DATABLOB_VERIFY_ON_GET", os.getenv("DATABLOB_VERIFY_ON_GET", "")
            ),
        )


def _parse_bool(variable_name: str, raw_value: str) -> bool:
    """Parse a boolean environment value.

    Args:
        variable_name: Environment variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed boolean flag.

    Raises:
        BlobConfigError: If value is not a recognized boolean literal.
    """
    normalized = raw_value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise BlobConfigError(
        f"Invalid {variable_name} value: expected boolean, got '{raw_value}'. "
        f"Set {variable_name} to one of {TRUE_VALUES + FALSE_VALUES[:-1]}."
    )
