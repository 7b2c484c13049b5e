"""Assertion loading pipeline.

- discovery: find ``assert-*.xml`` files under a root
- parser: decode one file into an AssertsDocument
- propagation: apply file defaults, collect rule types
- index: merge entries into an id-keyed mapping
- loader: run the pipeline once and serve lookups
"""

from dbtest.asserts.discovery import iter_assert_files
from dbtest.asserts.index import AssertionIndex
from dbtest.asserts.loader import AssertLoader, get_loader, reset_loader, resolve_asserts_root
from dbtest.asserts.parser import parse_assert_file
from dbtest.asserts.propagation import apply_defaults
from dbtest.asserts.rule_types import RuleTypeRegistry

__all__ = [
    "AssertLoader",
    "AssertionIndex",
    "RuleTypeRegistry",
    "apply_defaults",
    "get_loader",
    "iter_assert_files",
    "parse_assert_file",
    "reset_loader",
    "resolve_asserts_root",
]
