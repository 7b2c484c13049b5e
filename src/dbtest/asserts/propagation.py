# src/dbtest/asserts/propagation.py
"""Apply file-level defaults to the entries of one assertion document."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from dbtest.asserts.rule_types import RuleTypeRegistry
from dbtest.contracts.asserts import AssertDefinition, AssertsDocument


def apply_defaults(
    document: AssertsDocument,
    path: Path,
    registry: RuleTypeRegistry,
) -> list[AssertDefinition]:
    """Resolve the effective values of every entry in ``document``.

    - The document's default rule-type tokens are registered once, whether
      or not any entry falls back to them.
    - An entry without its own rule type inherits the document default; an
      entry with one keeps it and registers its tokens.
    - An entry without its own database config inherits the document
      default. There is no database registry.
    - Every entry records ``path`` as its origin.

    Parsed entries are left untouched; the resolved entries are copies,
    returned in ``document.entries()`` order.
    """
    registry.register(document.sharding_rule_type)

    result: list[AssertDefinition] = []
    for entry in document.entries():
        update: dict[str, Any] = {"path": path}
        if entry.sharding_rule_type:
            registry.register(entry.sharding_rule_type)
        else:
            update["sharding_rule_type"] = document.sharding_rule_type
        if not entry.database_config:
            update["database_config"] = document.database_config
        result.append(entry.model_copy(update=update))
    return result
