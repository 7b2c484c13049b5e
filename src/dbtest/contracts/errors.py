# src/dbtest/contracts/errors.py
"""Fatal errors raised while loading assertion files.

Everything here aborts the load: there is no partial index. A lookup for
an unknown case id is NOT an error and never raises (see
AssertLoader.get_assertion).
"""

from __future__ import annotations

from pathlib import Path


class AssertLoadError(Exception):
    """Base class for unrecoverable assertion loading failures."""


class AssertsRootNotFoundError(AssertLoadError, FileNotFoundError):
    """Raised when the asserts root directory cannot be resolved."""

    def __init__(self, message: str, *, searched: tuple[Path, ...] = ()) -> None:
        super().__init__(message)
        self.searched = searched


class AssertParseError(AssertLoadError):
    """Raised when an assertion file is unreadable or does not match the schema.

    Attributes:
        path: File that failed to parse.
        reason: What was wrong with it.
    """

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot parse assertion file {path}: {reason}")
        self.path = path
        self.reason = reason


class DuplicateAssertionError(AssertLoadError):
    """Raised when two entries share an id and duplicates are configured as errors."""

    def __init__(self, assert_id: str, first_path: Path | None, second_path: Path | None) -> None:
        super().__init__(f"Duplicate assertion id '{assert_id}' in {first_path} and {second_path}")
        self.assert_id = assert_id
        self.first_path = first_path
        self.second_path = second_path


class AssertsWalkError(AssertLoadError):
    """Raised when a directory under the asserts root cannot be listed.

    Attributes:
        directory: Directory that could not be read.
    """

    def __init__(self, directory: Path, cause: OSError) -> None:
        super().__init__(f"Cannot list assertion directory {directory}: {cause.strerror or cause}")
        self.directory = directory
