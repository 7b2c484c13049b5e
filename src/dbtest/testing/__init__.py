"""Test infrastructure for dbtest.

Factories for assertion models with sensible defaults, plus a writer that
renders documents back to assertion XML so tests can build fixture trees
under ``tmp_path``.

Usage:
    from dbtest.testing import make_dql_assert, make_document, write_assert_file

    doc = make_document(make_dql_assert("select_1"), sharding_rule_type="db")
    path = write_assert_file(tmp_path / "asserts", "assert-select.xml", doc)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from xml.etree import ElementTree

from dbtest.asserts.parser import ENTRY_TAGS, PARAMETER_TAG, ROOT_TAG
from dbtest.contracts.asserts import (
    AssertDefinition,
    AssertKind,
    AssertsDocument,
    DDLAssert,
    DMLAssert,
    DQLAssert,
    SQLParameter,
)

# =============================================================================
# Entries
# =============================================================================


def make_parameters(*values: Any, type: str = "String") -> tuple[SQLParameter, ...]:
    """Build SQL parameters from plain values, all of one type."""
    return tuple(SQLParameter(value=str(value), type=type) for value in values)


def make_dql_assert(
    id: str = "select_1",
    *,
    sql: str = "SELECT * FROM t_order",
    sharding_rule_type: str | None = None,
    database_config: str | None = None,
    expected_data_file: str | None = None,
    parameters: tuple[SQLParameter, ...] = (),
    path: Path | None = None,
) -> DQLAssert:
    """Build a query assertion."""
    return DQLAssert(
        id=id,
        sql=sql,
        sharding_rule_type=sharding_rule_type,
        database_config=database_config,
        expected_data_file=expected_data_file,
        parameters=parameters,
        path=path,
    )


def make_dml_assert(
    id: str = "insert_1",
    *,
    sql: str = "INSERT INTO t_order VALUES (1, 10)",
    sharding_rule_type: str | None = None,
    database_config: str | None = None,
    expected_update: int | None = 1,
    expected_sql: str | None = None,
    expected_data_file: str | None = None,
) -> DMLAssert:
    """Build a mutation assertion."""
    return DMLAssert(
        id=id,
        sql=sql,
        sharding_rule_type=sharding_rule_type,
        database_config=database_config,
        expected_update=expected_update,
        expected_sql=expected_sql,
        expected_data_file=expected_data_file,
    )


def make_ddl_assert(
    id: str = "create_1",
    *,
    sql: str = "CREATE TABLE t_log (id INT)",
    sharding_rule_type: str | None = None,
    database_config: str | None = None,
    table: str | None = "t_log",
    init_sql: str | None = None,
    clean_sql: str | None = None,
) -> DDLAssert:
    """Build a schema assertion."""
    return DDLAssert(
        id=id,
        sql=sql,
        sharding_rule_type=sharding_rule_type,
        database_config=database_config,
        table=table,
        init_sql=init_sql,
        clean_sql=clean_sql,
    )


# =============================================================================
# Documents and files
# =============================================================================


def make_document(
    *entries: AssertDefinition,
    sharding_rule_type: str | None = None,
    database_config: str | None = None,
) -> AssertsDocument:
    """Build an AssertsDocument, filing each entry under its kind."""
    by_kind: dict[AssertKind, list[AssertDefinition]] = {kind: [] for kind in AssertKind}
    for entry in entries:
        by_kind[entry.kind].append(entry)
    return AssertsDocument(
        sharding_rule_type=sharding_rule_type,
        database_config=database_config,
        dql=tuple(by_kind[AssertKind.DQL]),
        dml=tuple(by_kind[AssertKind.DML]),
        ddl=tuple(by_kind[AssertKind.DDL]),
    )


def render_assert_xml(document: AssertsDocument) -> str:
    """Render a document as assertion XML (the inverse of parse_assert_file)."""
    root = ElementTree.Element(ROOT_TAG, _attributes(document.model_dump(by_alias=True, exclude_none=True)))
    tag_by_field = {field: tag for tag, field in ENTRY_TAGS.items()}
    for entry in document.entries():
        attributes = entry.model_dump(by_alias=True, exclude_none=True, exclude={"path", "parameters"})
        element = ElementTree.SubElement(root, tag_by_field[entry.kind.value], _attributes(attributes))
        for parameter in entry.parameters:
            ElementTree.SubElement(element, PARAMETER_TAG, {"value": parameter.value, "type": parameter.type})
    ElementTree.indent(root)
    return ElementTree.tostring(root, encoding="unicode")


def _attributes(values: dict[str, Any]) -> dict[str, str]:
    return {key: str(value) for key, value in values.items() if not isinstance(value, (list, tuple))}


def write_assert_file(
    directory: Path,
    name: str = "assert-select.xml",
    document: AssertsDocument | None = None,
) -> Path:
    """Write ``document`` as ``directory/name``, creating directories as needed."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(render_assert_xml(document or make_document(make_dql_assert())), encoding="utf-8")
    return path


__all__ = [
    "make_ddl_assert",
    "make_dml_assert",
    "make_document",
    "make_dql_assert",
    "make_parameters",
    "render_assert_xml",
    "write_assert_file",
]
