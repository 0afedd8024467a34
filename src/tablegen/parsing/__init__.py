"""Parsing module for annotated struct definitions."""

from tablegen.parsing.struct_parser import (
    Attribute,
    AttributeArg,
    MemberSpec,
    StructParser,
    StructSpec,
    TypeKind,
    TypeRef,
)

__all__ = [
    "Attribute",
    "AttributeArg",
    "MemberSpec",
    "StructParser",
    "StructSpec",
    "TypeKind",
    "TypeRef",
]
