"""Type descriptors, type modifiers and their resolution rules."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from tablegen.errors import (
    AttributeArityError,
    PrimaryConversionError,
    UnsupportedTypeError,
)
from tablegen.literals import id_string_to_felt
from tablegen.parsing.struct_parser import Attribute, TypeRef

__all__ = [
    "DEFAULT_PRIMARY_TYPES",
    "FELT_SIZED_TYPES",
    "TypeDefKind",
    "DefaultTypeDef",
    "TypeDef",
    "CustomTypeDef",
    "TypeDescriptor",
    "PrimaryTypeDef",
    "PrimaryTypeDescriptor",
    "TypeModifier",
    "TYPE_MODIFIER_HANDLERS",
    "resolve_type_def",
    "to_primary_type_def",
    "is_primary_type",
    "type_def_impl",
    "describe_type_def",
]


# Types stored in a single field element; the only ones `raw` accepts.
FELT_SIZED_TYPES: frozenset[str] = frozenset(
    {
        "felt252",
        "bool",
        "u8",
        "u16",
        "u32",
        "u64",
        "u128",
        "i8",
        "i16",
        "i32",
        "i64",
        "i128",
        "bytes31",
        "ClassHash",
        "ContractAddress",
        "EthAddress",
        "StorageAddress",
        "StorageBaseAddress",
    }
)

# Types allowed to become a record's whole identity unless configured otherwise.
DEFAULT_PRIMARY_TYPES: frozenset[str] = frozenset(
    {
        "felt252",
        "bytes31",
        "ClassHash",
        "ContractAddress",
        "EthAddress",
        "StorageAddress",
        "StorageBaseAddress",
    }
)


class TypeDefKind(Enum):
    """Explicit type definitions selectable through type modifiers."""

    FELT252 = "Felt252TypeDef"
    SHORT_UTF8 = "ShortUtf8TypeDef"
    BYTES31_ENCODED = "Bytes31EncodedTypeDef"
    BYTE_ARRAY_ENCODED = "ByteArrayEncodedTypeDef"

    @property
    def is_primary_eligible(self) -> bool:
        """Return whether values of this kind fit in a single primary slot."""
        return self in _PRIMARY_KINDS

    @property
    def is_encoded(self) -> bool:
        return self in (TypeDefKind.BYTES31_ENCODED, TypeDefKind.BYTE_ARRAY_ENCODED)


_PRIMARY_KINDS = frozenset(
    {TypeDefKind.FELT252, TypeDefKind.SHORT_UTF8, TypeDefKind.BYTES31_ENCODED}
)


@dataclass(frozen=True)
class DefaultTypeDef:
    """Use the declared type's own introspection."""


@dataclass(frozen=True)
class TypeDef:
    """An explicit type definition chosen by a type modifier."""

    kind: TypeDefKind
    encoding: str | None = None


@dataclass(frozen=True)
class CustomTypeDef:
    """Type definition delegated to a user supplied impl path."""

    path: str


TypeDescriptor = Union[DefaultTypeDef, TypeDef, CustomTypeDef]


@dataclass(frozen=True)
class PrimaryTypeDef(TypeDef):
    """An explicit type definition whose kind fits in a single primary slot."""

    def __post_init__(self) -> None:
        if not self.kind.is_primary_eligible:
            raise PrimaryConversionError(
                f"Type definition {self.kind.value} cannot be used as a primary"
            )


PrimaryTypeDescriptor = Union[DefaultTypeDef, PrimaryTypeDef, CustomTypeDef]


@dataclass
class TypeModifier:
    """Accumulator for type-modifier directives found on one member."""

    raw: bool = False
    short_utf8: bool = False
    encoding: str | None = None
    type_def: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.raw or self.short_utf8 or self.encoding or self.type_def)

    def directives(self) -> list[str]:
        """Names of the directives that have been set, in a fixed order."""
        names = []
        if self.raw:
            names.append("raw")
        if self.short_utf8:
            names.append("short_utf8")
        if self.encoding is not None:
            names.append("encoding")
        if self.type_def is not None:
            names.append("type_def")
        return names

    def extract(self, attribute: Attribute) -> bool:
        """Fold a type-modifier attribute into this accumulator.

        Returns False, leaving the accumulator untouched, when the
        attribute is not a type-modifier directive.
        """
        handler = TYPE_MODIFIER_HANDLERS.get(attribute.path)
        if handler is None:
            return False
        handler(self, attribute)
        return True


def _require_bare(attribute: Attribute) -> None:
    if not attribute.is_bare:
        raise AttributeArityError(
            f"'{attribute.path}' takes no arguments",
            attribute=attribute.path,
            lineno=attribute.lineno,
        )


def _conflict(attribute: Attribute, current: str, value: str) -> UnsupportedTypeError:
    return UnsupportedTypeError(
        f"'{attribute.path}' is given conflicting values {current} and {value}",
        attribute=attribute.path,
        lineno=attribute.lineno,
    )


def _set_raw(modifier: TypeModifier, attribute: Attribute) -> None:
    _require_bare(attribute)
    modifier.raw = True


def _set_short_utf8(modifier: TypeModifier, attribute: Attribute) -> None:
    _require_bare(attribute)
    modifier.short_utf8 = True


def _set_encoding(modifier: TypeModifier, attribute: Attribute) -> None:
    value = attribute.single_unnamed_arg()
    if modifier.encoding is not None and modifier.encoding != value:
        raise _conflict(attribute, modifier.encoding, value)
    modifier.encoding = value


def _set_type_def(modifier: TypeModifier, attribute: Attribute) -> None:
    value = attribute.single_unnamed_arg()
    if modifier.type_def is not None and modifier.type_def != value:
        raise _conflict(attribute, modifier.type_def, value)
    modifier.type_def = value


TYPE_MODIFIER_HANDLERS: dict[str, Callable[[TypeModifier, Attribute], None]] = {
    "raw": _set_raw,
    "short_utf8": _set_short_utf8,
    "encoding": _set_encoding,
    "type_def": _set_type_def,
}


def resolve_type_def(modifier: TypeModifier, ty: TypeRef) -> TypeDescriptor:
    """Resolve a member's type and modifiers into a type descriptor."""
    directives = modifier.directives()
    if not directives:
        return DefaultTypeDef()
    if len(directives) > 1:
        raise UnsupportedTypeError(
            f"Type modifiers {', '.join(directives)} cannot be combined (type {ty})"
        )

    base = ty.base_name if ty.is_plain_path else None
    if modifier.type_def is not None:
        return CustomTypeDef(path=modifier.type_def)
    if modifier.raw and base in FELT_SIZED_TYPES:
        return TypeDef(kind=TypeDefKind.FELT252)
    if modifier.short_utf8 and base == "felt252":
        return TypeDef(kind=TypeDefKind.SHORT_UTF8)
    if modifier.encoding is not None:
        # Encodings must render as identifiers before any code is emitted
        id_string_to_felt(modifier.encoding)
        if base == "ByteArray":
            return TypeDef(kind=TypeDefKind.BYTE_ARRAY_ENCODED, encoding=modifier.encoding)
        if base == "bytes31":
            return TypeDef(kind=TypeDefKind.BYTES31_ENCODED, encoding=modifier.encoding)
    raise UnsupportedTypeError(f"Type modifier '{directives[0]}' is not supported for type {ty}")


def to_primary_type_def(type_def: TypeDescriptor) -> PrimaryTypeDescriptor:
    """Narrow a type descriptor to the primary-eligible subset."""
    if isinstance(type_def, (DefaultTypeDef, CustomTypeDef)):
        return type_def
    if isinstance(type_def, TypeDef):
        return PrimaryTypeDef(kind=type_def.kind, encoding=type_def.encoding)
    raise TypeError(f"Unknown type descriptor: {type_def!r}")


def is_primary_type(type_text: str, primary_types: frozenset[str]) -> bool:
    """Return whether a declared type is in the primary allow-list.

    A plain path also matches on its last segment, so ``core::felt252``
    matches an allow-list entry of ``felt252``.
    """
    if type_text in primary_types:
        return True
    if any(ch in type_text for ch in "<([@ "):
        return False
    return type_text.rsplit("::", 1)[-1] in primary_types


def type_def_impl(type_def: TypeDescriptor, i_path: str) -> str:
    """Render the introspection impl slot for a type descriptor."""
    if isinstance(type_def, DefaultTypeDef):
        return "_"
    if isinstance(type_def, CustomTypeDef):
        return type_def.path
    if isinstance(type_def, TypeDef):
        impl = f"{i_path}::types::{type_def.kind.value}"
        if type_def.kind.is_encoded:
            return f"{impl}<{id_string_to_felt(type_def.encoding or '')}>"
        return impl
    raise TypeError(f"Unknown type descriptor: {type_def!r}")


def describe_type_def(type_def: TypeDescriptor) -> dict[str, Any]:
    """Return a JSON-ready description of a type descriptor."""
    if isinstance(type_def, DefaultTypeDef):
        return {"variant": "default"}
    if isinstance(type_def, CustomTypeDef):
        return {"variant": "custom", "path": type_def.path}
    if isinstance(type_def, TypeDef):
        description: dict[str, Any] = {"variant": "type_def", "kind": type_def.kind.name.lower()}
        if type_def.encoding is not None:
            description["encoding"] = type_def.encoding
        return description
    raise TypeError(f"Unknown type descriptor: {type_def!r}")
