"""Tests for the table definition language server helper functions."""

from lsprotocol import types

from tablegen.compiler import TableCompiler
from tablegen.config import CompilerConfig
from tablegen.lsp import server as server_module
from tablegen.lsp.server import (
    _extract_line_from_error,
    _find_struct_names,
    _word_at_position,
    collect_diagnostics,
    line_range,
)


# ---------------------------------------------------------------------------
# _extract_line_from_error
# ---------------------------------------------------------------------------


class TestExtractLineFromError:
    def test_syntax_error_format(self):
        assert _extract_line_from_error("Syntax error at '{' (line 3)") == 3

    def test_located_table_error(self):
        assert _extract_line_from_error("S.a #[raw] (line 12): not supported") == 12

    def test_no_line(self):
        assert _extract_line_from_error("Syntax error at end of input") is None

    def test_empty_message(self):
        assert _extract_line_from_error("") is None


# ---------------------------------------------------------------------------
# _word_at_position
# ---------------------------------------------------------------------------


class TestWordAtPosition:
    def test_simple_word(self):
        assert _word_at_position("    level: u32,", 6) == "level"

    def test_word_start(self):
        assert _word_at_position("level: u32", 0) == "level"

    def test_word_end(self):
        assert _word_at_position("level: u32", 9) == "u32"

    def test_underscore_word(self):
        assert _word_at_position("#[short_utf8]", 4) == "short_utf8"

    def test_at_punctuation(self):
        assert _word_at_position("#[key]", 1) == ""

    def test_empty_line(self):
        assert _word_at_position("", 0) == ""

    def test_out_of_bounds(self):
        assert _word_at_position("abc", -1) == ""
        assert _word_at_position("abc", 3) == ""


# ---------------------------------------------------------------------------
# _find_struct_names
# ---------------------------------------------------------------------------


class TestFindStructNames:
    def test_single(self):
        assert _find_struct_names("struct Player { a: u8 }") == ["Player"]

    def test_multiple_with_visibility(self):
        source = "pub struct A {}\n#[table]\nstruct B { a: A }"
        assert _find_struct_names(source) == ["A", "B"]

    def test_empty(self):
        assert _find_struct_names("") == []


# ---------------------------------------------------------------------------
# line_range
# ---------------------------------------------------------------------------


class TestLineRange:
    def test_trims_indentation(self):
        rng = line_range("struct S {\n    a: u8,\n}", 2)
        assert rng.start == types.Position(line=1, character=4)
        assert rng.end == types.Position(line=1, character=10)

    def test_unknown_line_uses_last_line(self):
        rng = line_range("a\nbc", None)
        assert rng.start == types.Position(line=1, character=0)
        assert rng.end == types.Position(line=1, character=2)

    def test_out_of_range(self):
        assert line_range("a\nb", 9).start.line == 1

    def test_blank_line_is_not_empty(self):
        rng = line_range("", 1)
        assert rng.start == types.Position(line=0, character=0)
        assert rng.end == types.Position(line=0, character=1)


# ---------------------------------------------------------------------------
# collect_diagnostics
# ---------------------------------------------------------------------------


class TestCollectDiagnostics:
    def test_valid_source(self):
        assert collect_diagnostics("struct S { #[key] a: felt252 }", TableCompiler()) == []

    def test_syntax_error(self):
        (diagnostic,) = collect_diagnostics("struct S {\n    a u8\n}", TableCompiler())
        assert diagnostic.severity == types.DiagnosticSeverity.Error
        assert diagnostic.message.startswith("Syntax error at 'u8'")
        assert diagnostic.range.start.line == 1

    def test_table_errors(self):
        source = "struct A {\n    a: u8,\n    #[key] b: u8,\n}\nstruct B {\n    #[raw] c: ByteArray,\n}"
        diagnostics = collect_diagnostics(source, TableCompiler())
        assert [d.range.start.line for d in diagnostics] == [2, 5]
        assert diagnostics[0].message.startswith("A.b (line 3): ")
        assert all(d.source == "tablegen" for d in diagnostics)


# ---------------------------------------------------------------------------
# load_compiler
# ---------------------------------------------------------------------------


class TestLoadCompiler:
    def test_reads_config_on_first_use(self, isolated_config, monkeypatch):
        monkeypatch.setattr(server_module, "_compiler", None)
        (isolated_config / "tablegen.toml").write_text('interface_path = "x::table"\n')
        compiler = server_module.load_compiler()
        assert compiler.config.interface_path == "x::table"
        assert server_module.load_compiler() is compiler

    def test_invalid_config_falls_back_to_defaults(self, isolated_config, monkeypatch):
        monkeypatch.setattr(server_module, "_compiler", None)
        (isolated_config / "tablegen.toml").write_text("interface_path = \n")
        assert server_module.load_compiler().config == CompilerConfig()
