"""Unit tests for dataset handle parsing."""

from __future__ import annotations

import pytest

from core.errors import BlobValidationError
from core.handle import DatasetHandle, is_valid_handle, parse_dataset_handle


def test_parse_dataset_handle_reads_author_and_name() -> None:
    """Minimal handles carry only author and name."""
    handle = parse_dataset_handle("alice/iris")

    assert handle == DatasetHandle(author="alice", name="iris")


def test_parse_dataset_handle_reads_format_and_tag() -> None:
    """Optional format and tag are split off the name."""
    handle = parse_dataset_handle("alice/iris.csv@1.0")

    assert (handle.format, handle.tag) == ("csv", "1.0")


def test_dataset_handle_renders_canonical_string() -> None:
    """Rendering a parsed handle gives back the input."""
    assert str(parse_dataset_handle("bob/mnist@v2")) == "bob/mnist@v2"
    assert parse_dataset_handle("bob/mnist.npz").path == "bob/mnist"


@pytest.mark.parametrize("value", ["alice", "/iris", "alice/", "alice/iris@", "a/b/c", "al ice/iris"])
def test_parse_dataset_handle_rejects_malformed_values(value: str) -> None:
    """Malformed handles raise a validation error."""
    with pytest.raises(BlobValidationError):
        parse_dataset_handle(value)

    assert is_valid_handle(value) is False
