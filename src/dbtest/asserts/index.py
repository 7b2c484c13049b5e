# src/dbtest/asserts/index.py
"""Identifier-keyed index over every loaded assertion."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Literal

from dbtest.contracts.asserts import AssertDefinition, AssertKind
from dbtest.contracts.errors import DuplicateAssertionError
from dbtest.core.logging import get_logger

logger = get_logger(__name__)

DuplicatePolicy = Literal["last_wins", "error"]


class AssertionIndex(Mapping[str, AssertDefinition]):
    """Read-only mapping from case id to its assertion.

    Built once by ``build()`` and never modified afterwards, so concurrent
    readers need no locking.
    """

    def __init__(self, entries: Mapping[str, AssertDefinition] | None = None) -> None:
        self._entries: Mapping[str, AssertDefinition] = MappingProxyType(dict(entries or {}))

    @classmethod
    def build(
        cls,
        entries: Iterable[AssertDefinition],
        *,
        duplicate_ids: DuplicatePolicy = "last_wins",
    ) -> AssertionIndex:
        """Merge entries in iteration order.

        With ``last_wins`` a repeated id replaces the earlier entry and a
        warning is logged; with ``error`` it raises.

        Raises:
            DuplicateAssertionError: On a repeated id under the ``error`` policy.
        """
        merged: dict[str, AssertDefinition] = {}
        for entry in entries:
            previous = merged.get(entry.id)
            if previous is not None:
                if duplicate_ids == "error":
                    raise DuplicateAssertionError(entry.id, previous.path, entry.path)
                logger.warning(
                    "Duplicate assertion id, later entry wins",
                    assert_id=entry.id,
                    replaced_path=str(previous.path),
                    winning_path=str(entry.path),
                )
            merged[entry.id] = entry
        return cls(merged)

    def __getitem__(self, assert_id: str) -> AssertDefinition:
        return self._entries[assert_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def select(
        self,
        *,
        rule_type: str | None = None,
        database_type: str | None = None,
        kind: AssertKind | None = None,
    ) -> list[AssertDefinition]:
        """Entries matching every given filter, sorted by id.

        ``rule_type`` and ``database_type`` match single tokens of the
        effective comma-separated values.
        """
        selected = [
            entry
            for entry in self._entries.values()
            if (rule_type is None or rule_type in entry.rule_types)
            and (database_type is None or database_type in entry.database_types)
            and (kind is None or entry.kind == kind)
        ]
        return sorted(selected, key=lambda entry: entry.id)

    def count_by_kind(self) -> dict[AssertKind, int]:
        """Number of entries per statement kind (every kind present, zero included)."""
        counts = dict.fromkeys(AssertKind, 0)
        for entry in self._entries.values():
            counts[entry.kind] += 1
        return counts
