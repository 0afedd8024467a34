"""Table structures: key validation, primary promotion and assembly."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Union

from tablegen.column import Column, build_column
from tablegen.errors import KeysNotFirstError, TableError
from tablegen.parsing.struct_parser import Attribute, StructSpec
from tablegen.primary import Primary
from tablegen.types import DEFAULT_PRIMARY_TYPES, is_primary_type

__all__ = [
    "PrimaryKey",
    "CustomKey",
    "KeyType",
    "TableStructure",
    "get_keys_index",
    "promote_primary",
    "structure_impl_name",
    "columns_mod_name",
    "build_table",
    "extract_table",
]


@dataclass(frozen=True)
class PrimaryKey:
    """The record is identified by one promoted primary field."""

    primary: Primary


@dataclass(frozen=True)
class CustomKey:
    """The record is identified by its first ``size`` columns."""

    size: int


KeyType = Union[PrimaryKey, CustomKey]


@dataclass(frozen=True)
class TableStructure:
    """Complete schema for one record type.

    Columns keep declaration order. Under ``CustomKey`` the key columns are
    exactly the leading ``size`` columns; under ``PrimaryKey`` the promoted
    member is not among the columns.
    """

    name: str
    key: KeyType
    columns: tuple[Column, ...]
    attributes: tuple[Attribute, ...]
    impl_name: str
    columns_mod_name: str

    @property
    def key_columns(self) -> tuple[Column, ...]:
        return tuple(c for c in self.columns if c.key)

    @property
    def value_columns(self) -> tuple[Column, ...]:
        return tuple(c for c in self.columns if not c.key)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready description of the table."""
        key: dict[str, Any]
        if isinstance(self.key, PrimaryKey):
            key = {"kind": "primary", "primary": self.key.primary.to_dict()}
        else:
            key = {"kind": "custom", "size": self.key.size}
        return {
            "name": self.name,
            "impl_name": self.impl_name,
            "columns_mod_name": self.columns_mod_name,
            "key": key,
            "columns": [c.to_dict() for c in self.columns],
            "attributes": [str(a) for a in self.attributes],
        }


def get_keys_index(columns: Sequence[Column]) -> int:
    """Return the number of leading key columns.

    Raises KeysNotFirstError if a key column follows a non-key column.
    """
    position = 0
    for i, column in enumerate(columns):
        if column.key:
            if position != i:
                raise KeysNotFirstError(
                    f"Key member at position {i} must come before all non-key members "
                    f"(expected position {position})",
                    field_name=column.member,
                )
            position += 1
    return position


def promote_primary(
    columns: Sequence[Column],
    keys_index: int,
    primary_types: frozenset[str] = DEFAULT_PRIMARY_TYPES,
) -> tuple[KeyType, list[Column]]:
    """Decide the key type and return it with the remaining columns.

    A single leading key column whose type is in ``primary_types`` is
    removed from the columns and promoted to the primary.
    """
    remaining = list(columns)
    if keys_index == 1 and is_primary_type(remaining[0].ty, primary_types):
        column = remaining.pop(0)
        try:
            primary = Primary.from_column(column)
        except TableError as exc:
            raise exc.locate(field_name=column.member)
        return PrimaryKey(primary), remaining
    return CustomKey(keys_index), remaining


def structure_impl_name(name: str) -> str:
    return f"{name}Structure"


def columns_mod_name(name: str) -> str:
    return f"{name}Column"


def build_table(name: str, key: KeyType, columns: Sequence[Column]) -> TableStructure:
    """Assemble a table structure and derive its generated names."""
    return TableStructure(
        name=name,
        key=key,
        columns=tuple(columns),
        # Struct-level attributes are reserved and not emitted yet.
        attributes=(),
        impl_name=structure_impl_name(name),
        columns_mod_name=columns_mod_name(name),
    )


def _member_lineno(struct: StructSpec, member_name: str | None) -> int | None:
    for member in struct.members:
        if member.name == member_name:
            return member.lineno
    return None


def extract_table(
    struct: StructSpec, primary_types: frozenset[str] = DEFAULT_PRIMARY_TYPES
) -> TableStructure:
    """Run extraction, key validation, promotion and assembly for a struct."""
    try:
        columns = [build_column(member, struct.name) for member in struct.members]
        keys_index = get_keys_index(columns)
        key, remaining = promote_primary(columns, keys_index, primary_types)
    except TableError as exc:
        lineno = _member_lineno(struct, exc.field_name)
        raise exc.locate(
            struct_name=struct.name,
            lineno=lineno if lineno is not None else struct.lineno,
        )
    return build_table(struct.name, key, remaining)
