"""Columns: one storage field of a table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tablegen.attributes import extract_column_attributes
from tablegen.errors import TableError
from tablegen.hashing import selector_from_name
from tablegen.literals import quote
from tablegen.parsing.struct_parser import Attribute, MemberSpec
from tablegen.types import TypeDescriptor, describe_type_def, resolve_type_def

__all__ = ["Column", "build_column", "member_impl_name"]


@dataclass(frozen=True)
class Column:
    """A struct member compiled into a table column.

    ``selector`` is always the hash of ``member``; ``id`` equals it unless
    an ``id`` override was given. ``name`` is a quoted string literal.
    """

    id: str
    key: bool
    name: str
    member: str
    selector: str
    attributes: tuple[Attribute, ...]
    ty: str
    type_def: TypeDescriptor
    member_impl_name: str

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready description of the column."""
        return {
            "member": self.member,
            "id": self.id,
            "selector": self.selector,
            "name": self.name,
            "key": self.key,
            "type": self.ty,
            "type_def": describe_type_def(self.type_def),
            "attributes": [str(a) for a in self.attributes],
        }


def member_impl_name(struct_name: str, member: str) -> str:
    """Name of the generated per-member binding."""
    return f"{struct_name}{member}"


def build_column(member: MemberSpec, struct_name: str) -> Column:
    """Build the column for one member of ``struct_name``."""
    try:
        parsed, attributes = extract_column_attributes(member.attributes)
        type_def = resolve_type_def(parsed.type_mod, member.ty)
    except TableError as exc:
        raise exc.locate(field_name=member.name, lineno=member.lineno)

    selector = selector_from_name(member.name)
    return Column(
        id=parsed.id if parsed.id is not None else selector,
        key=member.has_name_only_attribute("key"),
        name=parsed.name if parsed.name is not None else quote(member.name),
        member=member.name,
        selector=selector,
        attributes=attributes,
        ty=str(member.ty),
        type_def=type_def,
        member_impl_name=member_impl_name(struct_name, member.name),
    )
