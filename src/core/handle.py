"""Dataset handle parsing.

A handle names a dataset as ``author/name[.format][@tag]``.
It is a value type only used to check dataset references.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from core.errors import BlobValidationError

_HANDLE_PATTERN = re.compile(
    r"^(?P<author>[A-Za-z0-9_-]+)/(?P<name>[A-Za-z0-9_-]+)"
    r"(?:\.(?P<format>[A-Za-z0-9_.-]+))?"
    r"(?:@(?P<tag>[A-Za-z0-9_.-]+))?$"
)


@dataclass(frozen=True)
class DatasetHandle:
    """Parsed dataset handle.

    Attributes:
        author: Dataset owner.
        name: Dataset name.
        format: Optional format suffix, e.g. ``csv``.
        tag: Optional version tag.
    """

    author: str
    name: str
    format: str | None = None
    tag: str | None = None

    @property
    def path(self) -> str:
        """Return the ``author/name`` portion."""
        return f"{self.author}/{self.name}"

    def __str__(self) -> str:
        rendered = self.path
        if self.format:
            rendered += f".{self.format}"
        if self.tag:
            rendered += f"@{self.tag}"
        return rendered


def parse_dataset_handle(value: str) -> DatasetHandle:
    """Parse a dataset handle string.

    Args:
        value: Handle in ``author/name[.format][@tag]`` form.

    Returns:
        Parsed handle.

    Raises:
        BlobValidationError: If the string is not a well-formed handle.
    """
    match = _HANDLE_PATTERN.match(value.strip())
    if match is None:
        raise BlobValidationError(
            f"Invalid dataset handle '{value}': expected author/name[.format][@tag]. "
            "Use letters, digits, '_' or '-' for author and name."
        )
    return DatasetHandle(
        author=match.group("author"),
        name=match.group("name"),
        format=match.group("format"),
        tag=match.group("tag"),
    )


def is_valid_handle(value: str) -> bool:
    """Return whether value parses as a dataset handle."""
    try:
        parse_dataset_handle(value)
    except BlobValidationError:
        return False
    return True
