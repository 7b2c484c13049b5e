"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core or
asserts. Settings classes are NOT re-exported here - import them from
dbtest.core.config.

Import patterns:
    from dbtest.contracts import AssertDefinition, AssertKind
    from dbtest.contracts import AssertParseError
"""

from dbtest.contracts.asserts import (
    AssertDefinition,
    AssertKind,
    AssertsDocument,
    DDLAssert,
    DMLAssert,
    DQLAssert,
    SQLParameter,
)
from dbtest.contracts.errors import (
    AssertLoadError,
    AssertParseError,
    AssertsRootNotFoundError,
    AssertsWalkError,
    DuplicateAssertionError,
)

__all__ = [
    "AssertDefinition",
    "AssertKind",
    "AssertLoadError",
    "AssertParseError",
    "AssertsDocument",
    "AssertsRootNotFoundError",
    "AssertsWalkError",
    "DDLAssert",
    "DMLAssert",
    "DQLAssert",
    "DuplicateAssertionError",
    "SQLParameter",
]
