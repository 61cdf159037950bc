"""Core constants used across datablob modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

HASH_ALGORITHM = "sha1"
HASH_LENGTH = 40
SHORT_HASH_LENGTH = 7
HASH_READ_CHUNK_SIZE = 64 * 1024
BLOB_KEY_PREFIX = "/blob/"
DEFAULT_DATASET_ROOT = Path(".")
DEFAULT_STORE_ROOT = Path("~/.datablob/blobstore")
METADATA_DIR_NAME = ".datablob"
HASH_CACHE_FILE_NAME = "hash_cache.json"
MANIFEST_FILE_NAME = "Manifest"
DATAFILE_NAME = "Datafile"
TEMP_FILE_PREFIX = ".tmp-"
LOCAL_TARGET = "local"
REMOTE_TARGET = "remote"
SUPPORTED_TARGETS = (LOCAL_TARGET, REMOTE_TARGET)
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off", "")
S3_MISSING_KEY_CODES = ("NoSuchKey", "404", "NotFound")
