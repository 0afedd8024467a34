"""Tests for the compiler driver."""

import logging

import pytest

from tablegen import CompilerConfig, TableCompiler
from tablegen.errors import KeysNotFirstError, UnsupportedTypeError
from tablegen.structure import CustomKey, PrimaryKey

SOURCE = """
struct Player {
    #[key]
    id: felt252,
    level: u32,
}

struct Broken {
    a: felt252,
    #[key]
    b: felt252,
}

struct Score {
    #[key]
    player: felt252,
    #[key]
    round: u32,
    points: u64,
}
"""


class TestTableCompiler:
    """Tests for TableCompiler.compile."""

    def test_compiles_every_struct(self):
        result = TableCompiler().compile("struct A { x: u8 }\nstruct B { #[key] y: felt252 }")
        assert result.ok
        assert [t.name for t in result.tables] == ["A", "B"]
        assert result.code == "\n".join(t.code for t in result.tables)

    def test_errors_are_isolated(self):
        """Test that one failing struct does not stop the others."""
        result = TableCompiler().compile(SOURCE)

        assert not result.ok
        assert [t.name for t in result.tables] == ["Player", "Score"]
        (error,) = result.errors
        assert isinstance(error, KeysNotFirstError)
        assert error.struct_name == "Broken"
        assert error.lineno == 11

    def test_key_types(self):
        result = TableCompiler().compile(SOURCE)
        player, score = (t.structure for t in result.tables)
        assert isinstance(player.key, PrimaryKey)
        assert score.key == CustomKey(2)

    def test_only(self):
        """Test compiling a subset of structs."""
        result = TableCompiler().compile(SOURCE, only={"Score"})
        assert result.ok
        assert [t.name for t in result.tables] == ["Score"]

    def test_syntax_error_propagates(self):
        with pytest.raises(SyntaxError, match="line 1"):
            TableCompiler().compile("struct { }")

    def test_empty_source(self):
        result = TableCompiler().compile("")
        assert result.ok
        assert result.tables == []
        assert result.code == ""

    def test_config_is_used(self):
        config = CompilerConfig(
            interface_path="x::t",
            primary_types=frozenset({"u32"}),
            default_primary_type="u64",
        )
        result = TableCompiler(config).compile(
            "struct A { #[key] id: u32 }\nstruct B { v: u8 }"
        )
        a, b = result.tables
        assert isinstance(a.structure.key, PrimaryKey)
        assert "pub impl AStructure of x::t::TableStructure {" in a.code
        assert "    type Primary = u64;\n" in b.code

    def test_compile_struct_raises(self):
        compiler = TableCompiler()
        (struct,) = compiler._parser.parse("struct S { #[raw] a: ByteArray }")
        with pytest.raises(UnsupportedTypeError) as exc_info:
            compiler.compile_struct(struct)
        assert str(exc_info.value).startswith("S.a (line 1): ")

    def test_logs_failures(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="tablegen.compiler"):
            TableCompiler().compile(SOURCE)
        assert "Struct Broken failed" in caplog.text
        assert "Compiled table Player" in caplog.text
