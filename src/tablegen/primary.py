"""The primary: a column promoted to a record's whole identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tablegen.column import Column
from tablegen.parsing.struct_parser import Attribute
from tablegen.types import PrimaryTypeDescriptor, describe_type_def, to_primary_type_def

__all__ = ["Primary"]


@dataclass(frozen=True)
class Primary:
    """Identity field of a table keyed by a single primary-eligible column."""

    name: str
    member: str
    attributes: tuple[Attribute, ...]
    ty: str
    type_def: PrimaryTypeDescriptor

    @classmethod
    def from_column(cls, column: Column) -> Primary:
        """Convert a key column; fails if its type descriptor is not eligible."""
        return cls(
            name=column.name,
            member=column.member,
            attributes=column.attributes,
            ty=column.ty,
            type_def=to_primary_type_def(column.type_def),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready description of the primary."""
        return {
            "member": self.member,
            "name": self.name,
            "type": self.ty,
            "type_def": describe_type_def(self.type_def),
            "attributes": [str(a) for a in self.attributes],
        }
