"""Recognition of column directives in a member's attribute list."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from tablegen.errors import DuplicateAttributeError, TableError
from tablegen.literals import id_string_to_felt
from tablegen.parsing.struct_parser import Attribute
from tablegen.types import TypeModifier

__all__ = [
    "ColumnAttributes",
    "COLUMN_ATTRIBUTE_HANDLERS",
    "extract_column_attributes",
]


@dataclass
class ColumnAttributes:
    """Overrides collected from a member's attributes."""

    type_mod: TypeModifier = field(default_factory=TypeModifier)
    name: str | None = None
    id: str | None = None


def _parse_name(parsed: ColumnAttributes, attribute: Attribute) -> list[Attribute]:
    value = attribute.single_unnamed_arg()
    if parsed.name is not None:
        raise DuplicateAttributeError("'name' is given more than once")
    parsed.name = value
    return []


def _parse_id(parsed: ColumnAttributes, attribute: Attribute) -> list[Attribute]:
    value = id_string_to_felt(attribute.single_unnamed_arg())
    if parsed.id is not None:
        raise DuplicateAttributeError("'id' is given more than once")
    parsed.id = value
    return []


def _parse_index(parsed: ColumnAttributes, attribute: Attribute) -> list[Attribute]:
    # Reserved for index metadata: kept as a bare marker, arguments dropped.
    return [Attribute(path="index", lineno=attribute.lineno)]


COLUMN_ATTRIBUTE_HANDLERS: dict[
    str, Callable[[ColumnAttributes, Attribute], list[Attribute]]
] = {
    "name": _parse_name,
    "id": _parse_id,
    "index": _parse_index,
}


def extract_column_attributes(
    attributes: Iterable[Attribute],
) -> tuple[ColumnAttributes, tuple[Attribute, ...]]:
    """Split a member's attributes into overrides and residual attributes.

    Attributes are handled in order. Type-modifier directives fold into
    ``ColumnAttributes.type_mod``; ``name`` and ``id`` set overrides;
    ``index`` is normalised; everything else passes through unchanged.
    """
    parsed = ColumnAttributes()
    residual: list[Attribute] = []
    for attribute in attributes:
        try:
            if parsed.type_mod.extract(attribute):
                continue
            handler = COLUMN_ATTRIBUTE_HANDLERS.get(attribute.path)
            if handler is None:
                residual.append(attribute)
            else:
                residual.extend(handler(parsed, attribute))
        except TableError as exc:
            raise exc.locate(attribute=attribute.path, lineno=attribute.lineno)
    return parsed, tuple(residual)
