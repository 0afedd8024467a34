"""Rendering of table structures into Cairo source.

Every ``write_*`` function appends to a text sink and never mutates the
model. ``i_path`` is the path of the table interface module in the target
runtime; nothing below hard-codes it.

Output order for one table:

1. the columns module (member name -> column id constants),
2. one member impl per column,
3. the ``TableStructure`` impl,
4. the record identity impl (depends on the key type),
5. the ``RecordValues`` impl over the non-key columns.
"""

from __future__ import annotations

import io
from collections.abc import Iterable, Sequence
from typing import TextIO, assert_never

from tablegen.column import Column
from tablegen.literals import quote
from tablegen.parsing.struct_parser import Attribute
from tablegen.primary import Primary
from tablegen.structure import CustomKey, PrimaryKey, TableStructure
from tablegen.types import type_def_impl

__all__ = [
    "DEFAULT_PRIMARY_TYPE",
    "generate",
    "write_table",
    "write_column_mod",
    "write_member_impls",
    "write_structure_impl",
    "write_id_impls",
    "write_values_impl",
    "meta_data",
    "serialize_member_call",
]

DEFAULT_PRIMARY_TYPE = "felt252"

INDENT = "    "


def _attribute_items(attributes: Sequence[Attribute]) -> list[str]:
    items = [str(len(attributes))]
    for attribute in attributes:
        data = attribute.data()
        items.append(quote(attribute.path))
        items.append(str(len(data)))
        items.extend(data)
    return items


def meta_data(name: str, attributes: Sequence[Attribute]) -> str:
    """Render the ``{[...]}`` metadata block for a column or primary."""
    return "{[" + ", ".join([name, *_attribute_items(attributes)]) + "]}"


def serialize_member_call(column: Column, on_self: bool) -> str:
    """Render one ``serialize_member`` call for a column."""
    value = f"self.{column.member}" if on_self else column.member
    return f"{column.member_impl_name}::serialize_member({value}, ref data);"


def _lines(buf: TextIO, lines: Iterable[str], depth: int) -> None:
    for line in lines:
        buf.write(f"{INDENT * depth}{line}\n")


def write_column_mod(buf: TextIO, table: TableStructure) -> None:
    """Write the module of column id constants."""
    buf.write(f"pub mod {table.columns_mod_name} {{\n")
    _lines(buf, (f"pub const {c.member}: felt252 = {c.id};" for c in table.columns), 1)
    buf.write("}\n")


def write_member_impls(buf: TextIO, table: TableStructure, i_path: str) -> None:
    """Write one member impl per column."""
    for c in table.columns:
        buf.write(
            f"pub impl {c.member_impl_name} = "
            f"{i_path}::MemberImpl<{table.impl_name}, {c.id}, {c.ty}>;\n"
        )


def _column_def(column: Column, i_path: str) -> str:
    return (
        f"{i_path}::serialise_column::<{column.id}, {type_def_impl(column.type_def, i_path)}, "
        f"{meta_data(column.name, column.attributes)}, {column.ty}>(ref table_def, ref children);"
    )


def _primary_data(primary: Primary, i_path: str) -> str:
    return (
        f"{i_path}::serialize_primary::<{type_def_impl(primary.type_def, i_path)}, "
        f"{meta_data(primary.name, primary.attributes)}, {primary.ty}>(ref data);"
    )


def write_structure_impl(
    buf: TextIO,
    table: TableStructure,
    i_path: str,
    default_primary_type: str = DEFAULT_PRIMARY_TYPE,
) -> None:
    """Write the ``TableStructure`` impl."""
    key = table.key
    if isinstance(key, PrimaryKey):
        primary_type = key.primary.ty
        primary_call = _primary_data(key.primary, i_path)
    elif isinstance(key, CustomKey):
        primary_type = default_primary_type
        primary_call = f"{i_path}::serialize_default_primary(ref data);"
    else:
        assert_never(key)

    attributes = "{[" + ", ".join(_attribute_items(table.attributes)[1:]) + "]}"
    buf.write(f"pub impl {table.impl_name} of {i_path}::TableStructure {{\n")
    _lines(
        buf,
        [
            f"type Primary = {primary_type};",
            f"const ATTRIBUTE_COUNT: u32 = {len(table.attributes)};",
            f"const COLUMN_COUNT: u32 = {len(table.columns)};",
            "fn serialise_attributes(ref data: Array<felt252>) {",
        ],
        1,
    )
    _lines(buf, [f"{i_path}::serialise_data::<_, {attributes}>(ref data);"], 2)
    _lines(buf, ["}", "fn serialize_primary(ref data: Array<felt252>) {"], 1)
    _lines(buf, [primary_call], 2)
    _lines(
        buf,
        [
            "}",
            f"fn serialise_columns(ref table_def: Array<felt252>, ref children: {i_path}::ChildDefs) {{",
        ],
        1,
    )
    _lines(buf, (_column_def(c, i_path) for c in table.columns), 2)
    _lines(buf, ["}"], 1)
    buf.write("}\n")


def _write_primary_impl(buf: TextIO, table: TableStructure, primary: Primary, i_path: str) -> None:
    name = table.name
    buf.write(f"pub impl {name}RecordPrimary of {i_path}::RecordPrimary<{table.impl_name}, {name}> {{\n")
    _lines(buf, [f"fn record_id(self: @{name}) -> {table.impl_name}::Primary {{"], 1)
    _lines(buf, [f"self.{primary.member}.clone()"], 2)
    _lines(buf, ["}"], 1)
    buf.write("}\n")


def _write_single_key_impl(buf: TextIO, table: TableStructure, key: Column, i_path: str) -> None:
    name = table.name
    buf.write(f"pub impl {name}RecordKey of {i_path}::RecordKey<{table.impl_name}, {name}> {{\n")
    _lines(
        buf,
        [
            f"type Key = {key.ty};",
            f"fn record_key(self: @{name}) -> @{key.ty} {{",
        ],
        1,
    )
    _lines(buf, [f"self.{key.member}"], 2)
    _lines(buf, ["}", f"fn serialize_key(key: @{key.ty}, ref data: Array<felt252>) {{"], 1)
    _lines(buf, [f"{key.member_impl_name}::serialize_member(key, ref data);"], 2)
    _lines(buf, ["}"], 1)
    buf.write("}\n")


def _write_keyed_impl(
    buf: TextIO, table: TableStructure, keys: Sequence[Column], i_path: str
) -> None:
    name = table.name
    key_types = ", ".join(c.ty for c in keys)
    snapped_key_types = ", ".join(f"@{c.ty}" for c in keys)
    key_members = ", ".join(c.member for c in keys)
    self_key_members = ", ".join(f"self.{c.member}" for c in keys)

    buf.write(f"pub impl {name}RecordKey of {i_path}::RecordKey<{table.impl_name}, {name}> {{\n")
    _lines(
        buf,
        [
            f"type Key = ({key_types});",
            f"type SnappedKey = ({snapped_key_types});",
            f"fn record_key(self: @{name}) -> ({snapped_key_types}) {{",
        ],
        1,
    )
    _lines(buf, [f"({self_key_members})"], 2)
    _lines(
        buf,
        ["}", f"fn serialize_key(key: ({snapped_key_types}), ref data: Array<felt252>) {{"],
        1,
    )
    _lines(buf, [f"let ({key_members}) = key;"], 2)
    _lines(buf, (serialize_member_call(c, on_self=False) for c in keys), 2)
    _lines(buf, ["}"], 1)
    buf.write("}\n")


def write_id_impls(buf: TextIO, table: TableStructure, i_path: str) -> None:
    """Write the record identity impl for the table's key type."""
    key = table.key
    if isinstance(key, PrimaryKey):
        _write_primary_impl(buf, table, key.primary, i_path)
    elif isinstance(key, CustomKey):
        keys = table.columns[: key.size]
        if key.size == 0:
            return
        if key.size == 1:
            _write_single_key_impl(buf, table, keys[0], i_path)
        else:
            _write_keyed_impl(buf, table, keys, i_path)
    else:
        assert_never(key)


def write_values_impl(buf: TextIO, table: TableStructure, i_path: str) -> None:
    """Write the ``RecordValues`` impl; key columns are always skipped."""
    name = table.name
    buf.write(f"pub impl {name}RecordValues of {i_path}::RecordValues<{table.impl_name}, {name}> {{\n")
    _lines(buf, [f"fn serialize_values(self: @{name}, ref data: Array<felt252>) {{"], 1)
    _lines(buf, (serialize_member_call(c, on_self=True) for c in table.value_columns), 2)
    _lines(buf, ["}"], 1)
    buf.write("}\n")


def write_table(
    buf: TextIO,
    table: TableStructure,
    i_path: str,
    default_primary_type: str = DEFAULT_PRIMARY_TYPE,
) -> None:
    """Write every generated item for one table, in the fixed order."""
    write_column_mod(buf, table)
    write_member_impls(buf, table, i_path)
    write_structure_impl(buf, table, i_path, default_primary_type)
    write_id_impls(buf, table, i_path)
    write_values_impl(buf, table, i_path)


def generate(
    table: TableStructure,
    i_path: str,
    default_primary_type: str = DEFAULT_PRIMARY_TYPE,
) -> str:
    """Return the generated source for one table."""
    buf = io.StringIO()
    write_table(buf, table, i_path, default_primary_type)
    return buf.getvalue()
