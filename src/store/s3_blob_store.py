"""S3-backed remote blob store.

This module encapsulates boto3 client creation and object transfer.
Blob keys are namespaced below the configured bucket prefix.
"""

from __future__ import annotations

from typing import Any, BinaryIO, cast

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.config import BlobConfig
from core.constants import S3_MISSING_KEY_CODES
from core.errors import BlobConfigError, BlobIOError, BlobNotFoundError, BlobTransportError
from core.logging_config import get_logger
from core.s3_uri import S3Location, parse_s3_uri

_LOGGER = get_logger(__name__)


class S3BlobStore:
    """Remote blob store backed by one S3 bucket prefix."""

    def __init__(self, s3_client: Any, location: S3Location) -> None:
        self._client = s3_client
        self._location = location

    @property
    def location(self) -> S3Location:
        """Return the bucket/prefix this store writes to."""
        return self._location

    def put(self, key: str, content: BinaryIO) -> None:
        object_key = self._location.object_key(key)
        try:
            self._client.upload_fileobj(content, self._location.bucket, object_key)
        except (BotoCoreError, ClientError) as error:
            raise BlobTransportError(
                f"Failed to upload {key} to s3://{self._location.bucket}/{object_key}: {error}. "
                "Check AWS credentials and network access, then retry."
            ) from error
        except OSError as error:
            raise BlobIOError(
                f"Failed to read local content for {key}: {error.strerror or error}. "
                "Check the source file is readable and retry."
            ) from error
        _LOGGER.debug("s3_store_put", bucket=self._location.bucket, object_key=object_key)

    def get(self, key: str) -> BinaryIO:
        object_key = self._location.object_key(key)
        try:
            response = self._client.get_object(Bucket=self._location.bucket, Key=object_key)
        except ClientError as error:
            if _error_code(error) in S3_MISSING_KEY_CODES:
                raise BlobNotFoundError(
                    f"Key {key} not found at s3://{self._location.bucket}/{object_key}. "
                    "Upload the blob with 'blob put' before fetching it."
                ) from error
            raise BlobTransportError(
                f"Failed to fetch {key} from s3://{self._location.bucket}/{object_key}: {error}. "
                "Check AWS credentials and network access, then retry."
            ) from error
        except BotoCoreError as error:
            raise BlobTransportError(
                f"Failed to fetch {key} from s3://{self._location.bucket}/{object_key}: {error}. "
                "Check network access to the S3 endpoint, then retry."
            ) from error
        return cast(BinaryIO, _S3BodyStream(response["Body"], key))


class _S3BodyStream:
    """Read-only view of a ``get_object`` body raising blob errors."""

    def __init__(self, body: Any, key: str) -> None:
        self._body = body
        self._key = key

    def read(self, size: int = -1) -> bytes:
        try:
            return self._body.read() if size < 0 else self._body.read(size)
        except BotoCoreError as error:
            raise BlobTransportError(
                f"Failed while downloading {self._key}: {error}. "
                "The connection dropped mid-transfer; retry the command."
            ) from error

    def close(self) -> None:
        self._body.close()


def create_s3_blob_store(config: BlobConfig) -> S3BlobStore:
    """Build the remote blob store described by config.

    Args:
        config: Runtime config holding the remote URI and session settings.

    Returns:
        Configured S3 blob store.

    Raises:
        BlobConfigError: If no remote URI is configured.
    """
    if not config.remote_uri:
        raise BlobConfigError(
            "No remote blob store configured. "
            "Set DATABLOB_REMOTE_URI or pass --remote-uri s3://bucket[/prefix], "
            "or use --local for the local blob store."
        )
    location = parse_s3_uri(config.remote_uri)
    return S3BlobStore(create_s3_client(config), location)


def create_s3_client(config: BlobConfig) -> Any:
    """Create boto3 S3 client.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.
    """
    session = boto3.session.Session(**_build_session_kwargs(config))
    client_kwargs: dict[str, str] = {}
    if config.s3_endpoint_url:
        client_kwargs["endpoint_url"] = config.s3_endpoint_url
    return session.client("s3", **client_kwargs)


def _build_session_kwargs(config: BlobConfig) -> dict[str, str]:
    """Build boto3 Session kwargs from config.

    Args:
        config: Runtime config.

    Returns:
        Session keyword arguments.
    """
    kwargs: dict[str, str] = {}
    if config.s3_profile:
        kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        kwargs["region_name"] = config.s3_region
    return kwargs


def _error_code(error: ClientError) -> str:
    """Return the AWS error code of a client error."""
    return str(error.response.get("Error", {}).get("Code", ""))
