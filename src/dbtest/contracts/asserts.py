# src/dbtest/contracts/asserts.py
"""Assertion fixture models.

One assertion file decodes into an AssertsDocument: file-level defaults
plus three ordered lists of entries, one per SQL statement kind. Entries
are frozen; the loader never mutates a parsed entry, it stores a copy
carrying the origin path and the effective rule-type/database values.

Field aliases are the XML attribute names (kebab-case). Models accept
both the alias and the Python field name so factories and tests can
construct them directly.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field


def split_tokens(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated token list.

    Surrounding whitespace is stripped and empty tokens are dropped, so
    ``None``, ``""`` and ``" , "`` all yield an empty tuple.
    """
    if not raw:
        return ()
    return tuple(token for token in (part.strip() for part in raw.split(",")) if token)


class AssertKind(StrEnum):
    """Statement category of an assertion entry."""

    DQL = "dql"
    DML = "dml"
    DDL = "ddl"


class SQLParameter(BaseModel):
    """A positional SQL parameter, kept as authored."""

    model_config = {"frozen": True, "extra": "forbid"}

    value: str
    type: str = "String"


class AssertDefinition(BaseModel):
    """One assertion case.

    ``sharding_rule_type`` and ``database_config`` hold the raw
    comma-separated lists. Before loading they are the per-entry overrides
    (None when unset); after loading they are the effective values.
    ``path`` is assigned by the loader and is None on a freshly parsed entry.
    """

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    kind: ClassVar[AssertKind]

    id: str = Field(min_length=1)
    sql: str = ""
    sharding_rule_type: str | None = Field(default=None, alias="sharding-rule-type")
    database_config: str | None = Field(default=None, alias="database-config")
    expected_data_file: str | None = Field(default=None, alias="expected-data-file")
    parameters: tuple[SQLParameter, ...] = ()
    path: Path | None = None

    @property
    def rule_types(self) -> tuple[str, ...]:
        """Rule-type tokens of the current ``sharding_rule_type`` value."""
        return split_tokens(self.sharding_rule_type)

    @property
    def database_types(self) -> tuple[str, ...]:
        """Database tokens of the current ``database_config`` value."""
        return split_tokens(self.database_config)


class DQLAssert(AssertDefinition):
    """Query assertion: result set compared against an expected data file."""

    kind: ClassVar[AssertKind] = AssertKind.DQL


class DMLAssert(AssertDefinition):
    """Mutation assertion: update count and resulting table contents."""

    kind: ClassVar[AssertKind] = AssertKind.DML

    expected_update: int | None = Field(default=None, alias="expected-update")
    expected_sql: str | None = Field(default=None, alias="expected-sql")


class DDLAssert(AssertDefinition):
    """Schema assertion: table metadata after the statement runs."""

    kind: ClassVar[AssertKind] = AssertKind.DDL

    table: str | None = None
    init_sql: str | None = Field(default=None, alias="init-sql")
    clean_sql: str | None = Field(default=None, alias="clean-sql")


class AssertsDocument(BaseModel):
    """Decoded content of one assertion file. No defaults applied yet."""

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    sharding_rule_type: str | None = Field(default=None, alias="sharding-rule-type")
    database_config: str | None = Field(default=None, alias="database-config")
    dql: tuple[DQLAssert, ...] = ()
    dml: tuple[DMLAssert, ...] = ()
    ddl: tuple[DDLAssert, ...] = ()

    def entries(self) -> Iterator[AssertDefinition]:
        """Yield every entry: queries, then mutations, then schema changes."""
        yield from self.dql
        yield from self.dml
        yield from self.ddl

    @property
    def entry_count(self) -> int:
        return len(self.dql) + len(self.dml) + len(self.ddl)
