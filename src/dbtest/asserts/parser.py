# src/dbtest/asserts/parser.py
"""Decode one assertion XML file into an AssertsDocument.

Expected layout::

    <asserts sharding-rule-type="db,tbl" database-config="h2,mysql">
        <assertDQL id="select_1" sql="SELECT ..." expected-data-file="select_1.xml">
            <parameter value="10" type="int"/>
        </assertDQL>
        <assertDML id="insert_1" sql="INSERT ..." expected-update="1"/>
        <assertDDL id="create_1" sql="CREATE ..." table="t_order"/>
    </asserts>

The XML is only structured here. Defaults are applied later by
``dbtest.asserts.propagation``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from xml.etree import ElementTree

from pydantic import BaseModel, ValidationError

from dbtest.contracts.asserts import AssertDefinition, AssertsDocument, DDLAssert, DMLAssert, DQLAssert, SQLParameter
from dbtest.contracts.errors import AssertParseError

ROOT_TAG = "asserts"
PARAMETER_TAG = "parameter"

# Child element tag -> AssertsDocument field
ENTRY_TAGS: dict[str, str] = {
    "assertDQL": "dql",
    "assertDML": "dml",
    "assertDDL": "ddl",
}

_ENTRY_MODELS: dict[str, type[AssertDefinition]] = {
    "assertDQL": DQLAssert,
    "assertDML": DMLAssert,
    "assertDDL": DDLAssert,
}

# Set by the loader, never authored
_RESERVED_ATTRIBUTES = frozenset({"path"})


def _xml_attributes(model: type[BaseModel], *, exclude: frozenset[str] = frozenset()) -> frozenset[str]:
    """Attribute names a model accepts from XML: the alias where one is set."""
    return frozenset(info.alias or name for name, info in model.model_fields.items() if name not in exclude)


_ROOT_ATTRIBUTES = _xml_attributes(AssertsDocument, exclude=frozenset(ENTRY_TAGS.values()))
_ENTRY_ATTRIBUTES = {
    tag: _xml_attributes(model, exclude=_RESERVED_ATTRIBUTES | {"parameters"}) for tag, model in _ENTRY_MODELS.items()
}
_PARAMETER_ATTRIBUTES = _xml_attributes(SQLParameter)


def parse_assert_file(path: Path) -> AssertsDocument:
    """Read and decode one assertion file.

    Args:
        path: Assertion XML file.

    Returns:
        The decoded document, with entries exactly as authored.

    Raises:
        AssertParseError: If the file cannot be read, is not well-formed XML,
            or does not match the assertion schema.
    """
    try:
        with path.open("rb") as f:
            root = ElementTree.parse(f).getroot()
    except OSError as e:
        raise AssertParseError(path, f"cannot read file ({e})") from e
    except ElementTree.ParseError as e:
        raise AssertParseError(path, f"malformed XML ({e})") from e

    raw = _document_to_dict(path, root)
    try:
        return AssertsDocument.model_validate(raw)
    except ValidationError as e:
        details = "; ".join(f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}" for error in e.errors())
        raise AssertParseError(path, details) from e


def _document_to_dict(path: Path, root: ElementTree.Element) -> dict[str, Any]:
    if root.tag != ROOT_TAG:
        raise AssertParseError(path, f"root element must be <{ROOT_TAG}>, got <{root.tag}>")

    _check_attributes(path, root, _ROOT_ATTRIBUTES)
    raw: dict[str, Any] = dict(root.attrib)
    for field in ENTRY_TAGS.values():
        raw[field] = []

    for child in root:
        field = ENTRY_TAGS.get(child.tag)
        if field is None:
            raise AssertParseError(path, f"unexpected element <{child.tag}> under <{ROOT_TAG}>")
        raw[field].append(_entry_to_dict(path, child))
    return raw


def _entry_to_dict(path: Path, element: ElementTree.Element) -> dict[str, Any]:
    reserved = _RESERVED_ATTRIBUTES & element.attrib.keys()
    if reserved:
        raise AssertParseError(path, f"<{element.tag}> must not set {sorted(reserved)}")

    _check_attributes(path, element, _ENTRY_ATTRIBUTES[element.tag])
    entry: dict[str, Any] = dict(element.attrib)
    parameters = []
    for child in element:
        if child.tag != PARAMETER_TAG:
            raise AssertParseError(path, f"unexpected element <{child.tag}> under <{element.tag}>")
        _check_attributes(path, child, _PARAMETER_ATTRIBUTES)
        parameters.append(dict(child.attrib))
    if parameters:
        entry["parameters"] = parameters
    return entry


def _check_attributes(path: Path, element: ElementTree.Element, allowed: frozenset[str]) -> None:
    # Field names are not accepted in place of the hyphenated aliases
    unknown = element.attrib.keys() - allowed
    if unknown:
        raise AssertParseError(path, f"unknown attribute(s) {', '.join(sorted(unknown))} on <{element.tag}>")
