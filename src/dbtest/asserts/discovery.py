# src/dbtest/asserts/discovery.py
"""Find assertion files under a root directory."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from dbtest.contracts.errors import AssertsRootNotFoundError, AssertsWalkError

DEFAULT_PREFIX = "assert-"
DEFAULT_SUFFIX = ".xml"


def is_assert_file_name(name: str, *, prefix: str = DEFAULT_PREFIX, suffix: str = DEFAULT_SUFFIX) -> bool:
    """Whether a bare file name follows the ``<prefix>*<suffix>`` convention."""
    return name.startswith(prefix) and name.endswith(suffix)


def iter_assert_files(
    root: Path,
    *,
    prefix: str = DEFAULT_PREFIX,
    suffix: str = DEFAULT_SUFFIX,
) -> Iterator[Path]:
    """Walk ``root`` recursively and yield every assertion file.

    The root is checked immediately; the walk itself is lazy and the
    returned iterator can be consumed once. Within each directory, files
    are yielded in sorted order before descending into sorted
    subdirectories, so repeated walks of the same tree agree.

    Raises:
        AssertsRootNotFoundError: If ``root`` is missing or not a directory.
        AssertsWalkError: During iteration, if a directory cannot be listed.
    """
    if not root.is_dir():
        raise AssertsRootNotFoundError(f"Cannot find assertion root directory: {root}", searched=(root,))
    return _walk(root, prefix, suffix)


def _walk(root: Path, prefix: str, suffix: str) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        # os.walk descends in dirnames order when it is sorted in place
        dirnames.sort()
        directory = Path(dirpath)
        for name in sorted(filenames):
            if is_assert_file_name(name, prefix=prefix, suffix=suffix) and (directory / name).is_file():
                yield directory / name


def _raise_walk_error(error: OSError) -> None:
    # os.walk skips unreadable directories unless onerror raises
    raise AssertsWalkError(Path(error.filename), error) from error
