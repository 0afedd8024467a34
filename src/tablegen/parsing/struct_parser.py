"""Parser for annotated struct definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import ply.yacc as yacc

from tablegen.errors import AttributeArityError
from tablegen.parsing.struct_lexer import StructLexer


class TypeKind(Enum):
    """Syntactic shape of a type reference."""

    PATH = "path"
    TUPLE = "tuple"
    FIXED_ARRAY = "fixed_array"
    SNAPSHOT = "snapshot"


@dataclass(frozen=True)
class TypeRef:
    """Reference to a declared type.

    ``name`` is the path text for PATH types; ``args`` holds generic
    arguments, tuple members, or the single element type of fixed arrays
    and snapshots.
    """

    name: str = ""
    args: tuple[TypeRef, ...] = ()
    kind: TypeKind = TypeKind.PATH
    size: str | None = None

    @property
    def base_name(self) -> str:
        """Last path segment, e.g. ``u32`` for ``core::integer::u32``."""
        return self.name.rsplit("::", 1)[-1]

    @property
    def is_plain_path(self) -> bool:
        """Return whether this is a path with no generic arguments."""
        return self.kind is TypeKind.PATH and not self.args

    def __str__(self) -> str:
        if self.kind is TypeKind.TUPLE:
            if len(self.args) == 1:
                return f"({self.args[0]},)"
            return "(" + ", ".join(str(a) for a in self.args) + ")"
        if self.kind is TypeKind.FIXED_ARRAY:
            return f"[{self.args[0]}; {self.size}]"
        if self.kind is TypeKind.SNAPSHOT:
            return f"@{self.args[0]}"
        if self.args:
            return f"{self.name}<" + ", ".join(str(a) for a in self.args) + ">"
        return self.name


@dataclass(frozen=True)
class AttributeArg:
    """One attribute argument; ``value`` is the verbatim source text."""

    value: str
    name: str | None = None


@dataclass(frozen=True)
class Attribute:
    """An attribute such as ``#[key]`` or ``#[name("Label")]``.

    ``args`` is None for a bare attribute and a (possibly empty) tuple
    when parentheses were written.
    """

    path: str
    args: tuple[AttributeArg, ...] | None = None
    lineno: int | None = field(default=None, compare=False)

    @property
    def is_bare(self) -> bool:
        return self.args is None

    def single_unnamed_arg(self) -> str:
        """Return the only argument, which must be unnamed."""
        if not self.args or len(self.args) != 1 or self.args[0].name is not None:
            count = 0 if not self.args else len(self.args)
            raise AttributeArityError(
                f"'{self.path}' expects exactly one unnamed argument, got {count}",
                attribute=self.path,
                lineno=self.lineno,
            )
        return self.args[0].value

    def data(self) -> tuple[str, ...]:
        """Flatten the arguments for metadata emission.

        Named arguments contribute their quoted name followed by the value.
        """
        items: list[str] = []
        for arg in self.args or ():
            if arg.name is not None:
                items.append(f'"{arg.name}"')
            items.append(arg.value)
        return tuple(items)

    def __str__(self) -> str:
        if self.args is None:
            return f"#[{self.path}]"
        rendered = ", ".join(
            a.value if a.name is None else f"{a.name}: {a.value}" for a in self.args
        )
        return f"#[{self.path}({rendered})]"


@dataclass(frozen=True)
class MemberSpec:
    """A struct member before extraction."""

    name: str
    ty: TypeRef
    attributes: tuple[Attribute, ...] = ()
    lineno: int | None = field(default=None, compare=False)

    def has_name_only_attribute(self, path: str) -> bool:
        """Return whether a bare attribute with the given path is present."""
        return any(a.path == path and a.is_bare for a in self.attributes)


@dataclass(frozen=True)
class StructSpec:
    """A struct definition before extraction."""

    name: str
    members: tuple[MemberSpec, ...] = ()
    attributes: tuple[Attribute, ...] = ()
    lineno: int | None = field(default=None, compare=False)


class StructParser:
    """Parser for annotated struct definitions."""

    tokens = StructLexer.tokens

    def __init__(self) -> None:
        self.lexer = StructLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_file(self, p: yacc.YaccProduction) -> None:
        """file : item_list"""
        p[0] = p[1]

    def p_file_empty(self, p: yacc.YaccProduction) -> None:
        """file : empty"""
        p[0] = []

    def p_item_list_single(self, p: yacc.YaccProduction) -> None:
        """item_list : struct_def"""
        p[0] = [p[1]]

    def p_item_list_multiple(self, p: yacc.YaccProduction) -> None:
        """item_list : item_list struct_def"""
        p[0] = p[1]
        p[0].append(p[2])

    def p_struct_def(self, p: yacc.YaccProduction) -> None:
        """struct_def : attribute_list visibility STRUCT IDENTIFIER LBRACE member_list RBRACE
                      | attribute_list visibility STRUCT IDENTIFIER LBRACE member_list COMMA RBRACE"""
        p[0] = StructSpec(
            name=p[4], members=tuple(p[6]), attributes=tuple(p[1]), lineno=p.lineno(3)
        )

    def p_struct_def_empty(self, p: yacc.YaccProduction) -> None:
        """struct_def : attribute_list visibility STRUCT IDENTIFIER LBRACE RBRACE"""
        p[0] = StructSpec(name=p[4], attributes=tuple(p[1]), lineno=p.lineno(3))

    def p_visibility(self, p: yacc.YaccProduction) -> None:
        """visibility : PUB
                      | empty"""
        p[0] = p[1]

    def p_attribute_list_empty(self, p: yacc.YaccProduction) -> None:
        """attribute_list : empty"""
        p[0] = []

    def p_attribute_list_multiple(self, p: yacc.YaccProduction) -> None:
        """attribute_list : attribute_list attribute"""
        p[0] = p[1] + [p[2]]

    def p_attribute_bare(self, p: yacc.YaccProduction) -> None:
        """attribute : HASH LBRACKET path RBRACKET"""
        p[0] = Attribute(path=p[3], args=None, lineno=p.lineno(1))

    def p_attribute_empty_args(self, p: yacc.YaccProduction) -> None:
        """attribute : HASH LBRACKET path LPAREN RPAREN RBRACKET"""
        p[0] = Attribute(path=p[3], args=(), lineno=p.lineno(1))

    def p_attribute_args(self, p: yacc.YaccProduction) -> None:
        """attribute : HASH LBRACKET path LPAREN arg_list RPAREN RBRACKET
                     | HASH LBRACKET path LPAREN arg_list COMMA RPAREN RBRACKET"""
        p[0] = Attribute(path=p[3], args=tuple(p[5]), lineno=p.lineno(1))

    def p_arg_list_single(self, p: yacc.YaccProduction) -> None:
        """arg_list : arg"""
        p[0] = [p[1]]

    def p_arg_list_multiple(self, p: yacc.YaccProduction) -> None:
        """arg_list : arg_list COMMA arg"""
        p[0] = p[1] + [p[3]]

    def p_arg_unnamed(self, p: yacc.YaccProduction) -> None:
        """arg : expr"""
        p[0] = AttributeArg(value=p[1])

    def p_arg_named(self, p: yacc.YaccProduction) -> None:
        """arg : IDENTIFIER COLON expr"""
        p[0] = AttributeArg(value=p[3], name=p[1])

    def p_expr(self, p: yacc.YaccProduction) -> None:
        """expr : STRING
                | SHORT_STRING
                | INTEGER
                | path"""
        p[0] = p[1]

    def p_path_single(self, p: yacc.YaccProduction) -> None:
        """path : IDENTIFIER"""
        p[0] = p[1]

    def p_path_multiple(self, p: yacc.YaccProduction) -> None:
        """path : path DCOLON IDENTIFIER"""
        p[0] = f"{p[1]}::{p[3]}"

    def p_member_list_single(self, p: yacc.YaccProduction) -> None:
        """member_list : member"""
        p[0] = [p[1]]

    def p_member_list_multiple(self, p: yacc.YaccProduction) -> None:
        """member_list : member_list COMMA member"""
        p[0] = p[1] + [p[3]]

    def p_member(self, p: yacc.YaccProduction) -> None:
        """member : attribute_list visibility IDENTIFIER COLON type_ref"""
        p[0] = MemberSpec(
            name=p[3], ty=p[5], attributes=tuple(p[1]), lineno=p.lineno(3)
        )

    def p_type_ref_path(self, p: yacc.YaccProduction) -> None:
        """type_ref : path"""
        p[0] = TypeRef(name=p[1])

    def p_type_ref_generic(self, p: yacc.YaccProduction) -> None:
        """type_ref : path LT type_list GT"""
        p[0] = TypeRef(name=p[1], args=tuple(p[3]))

    def p_type_ref_unit(self, p: yacc.YaccProduction) -> None:
        """type_ref : LPAREN RPAREN"""
        p[0] = TypeRef(kind=TypeKind.TUPLE)

    def p_type_ref_tuple(self, p: yacc.YaccProduction) -> None:
        """type_ref : LPAREN type_list RPAREN"""
        if len(p[2]) == 1:
            # Parenthesised type, not a tuple
            p[0] = p[2][0]
        else:
            p[0] = TypeRef(kind=TypeKind.TUPLE, args=tuple(p[2]))

    def p_type_ref_tuple_trailing(self, p: yacc.YaccProduction) -> None:
        """type_ref : LPAREN type_list COMMA RPAREN"""
        p[0] = TypeRef(kind=TypeKind.TUPLE, args=tuple(p[2]))

    def p_type_ref_fixed_array(self, p: yacc.YaccProduction) -> None:
        """type_ref : LBRACKET type_ref SEMI INTEGER RBRACKET"""
        p[0] = TypeRef(kind=TypeKind.FIXED_ARRAY, args=(p[2],), size=p[4])

    def p_type_ref_snapshot(self, p: yacc.YaccProduction) -> None:
        """type_ref : AT type_ref"""
        p[0] = TypeRef(kind=TypeKind.SNAPSHOT, args=(p[2],))

    def p_type_list_single(self, p: yacc.YaccProduction) -> None:
        """type_list : type_ref"""
        p[0] = [p[1]]

    def p_type_list_multiple(self, p: yacc.YaccProduction) -> None:
        """type_list : type_list COMMA type_ref"""
        p[0] = p[1] + [p[3]]

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> list[StructSpec]:
        """Parse struct definitions in source order."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.lexer.lexer.lineno = 1
        specs = self.parser.parse(data, lexer=self.lexer.lexer)
        if specs is None:
            return []
        return specs
