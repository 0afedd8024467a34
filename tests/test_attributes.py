"""Tests for column attribute extraction."""

import pytest

from tablegen.attributes import extract_column_attributes
from tablegen.column import build_column
from tablegen.errors import (
    AttributeArityError,
    DuplicateAttributeError,
    IdentifierEncodingError,
    UnsupportedTypeError,
)
from tablegen.parsing import StructParser
from tablegen.types import TypeDef, TypeDefKind


def _member_attributes(source_attrs: str):
    """Parse a one-member struct and return the member's attributes."""
    (struct,) = StructParser().parse(f"struct S {{ {source_attrs} x: felt252 }}")
    return struct.members[0].attributes


class TestExtractColumnAttributes:
    """Tests for splitting overrides from residual attributes."""

    def test_no_attributes(self):
        parsed, residual = extract_column_attributes(())
        assert parsed.name is None
        assert parsed.id is None
        assert parsed.type_mod.is_empty
        assert residual == ()

    def test_name_and_id(self):
        """Test that name and id are consumed, id encoded to a felt."""
        parsed, residual = extract_column_attributes(
            _member_attributes('#[name("Custom")] #[id(\'custom\')]')
        )
        assert parsed.name == '"Custom"'
        assert parsed.id == "0x637573746f6d"
        assert residual == ()

    def test_id_integer(self):
        parsed, _ = extract_column_attributes(_member_attributes("#[id(42)]"))
        assert parsed.id == "0x2a"

    def test_passthrough_order(self):
        """Test that unknown attributes are kept in declaration order."""
        parsed, residual = extract_column_attributes(
            _member_attributes("#[key] #[raw] #[foo(1)] #[name(\"n\")] #[a::b]")
        )
        assert parsed.type_mod.raw is True
        assert [str(a) for a in residual] == ["#[key]", "#[foo(1)]", "#[a::b]"]

    def test_index_normalised(self):
        """Test that index is kept as a bare marker."""
        _, residual = extract_column_attributes(_member_attributes("#[index(unique: 1)]"))
        assert len(residual) == 1
        assert residual[0].path == "index"
        assert residual[0].is_bare

    def test_type_modifiers_consumed(self):
        parsed, residual = extract_column_attributes(
            _member_attributes('#[encoding("utf-8")]')
        )
        assert parsed.type_mod.encoding == '"utf-8"'
        assert residual == ()

    def test_duplicate_name(self):
        """Test that a repeated override is rejected and located."""
        with pytest.raises(DuplicateAttributeError) as exc_info:
            extract_column_attributes(_member_attributes('#[name("a")]\n#[name("b")]'))
        assert exc_info.value.attribute == "name"
        assert exc_info.value.lineno == 2

    def test_name_arity(self):
        with pytest.raises(AttributeArityError) as exc_info:
            extract_column_attributes(_member_attributes("#[name]"))
        assert exc_info.value.attribute == "name"

    def test_id_not_encodable(self):
        with pytest.raises(IdentifierEncodingError):
            extract_column_attributes(_member_attributes('#[id("")]'))

    def test_repeated_type_modifier_folds(self):
        """Test that a repeated type modifier folds into one value."""
        parsed, residual = extract_column_attributes(_member_attributes("#[raw] #[raw]"))
        assert parsed.type_mod.directives() == ["raw"]
        assert residual == ()

    def test_repeated_type_modifier_resolves(self):
        (struct,) = StructParser().parse(
            'struct S { #[raw] #[raw] x: u8, #[encoding("utf-8")] #[encoding("utf-8")] s: ByteArray }'
        )
        x, s = (build_column(member, struct.name) for member in struct.members)
        assert x.type_def == TypeDef(kind=TypeDefKind.FELT252)
        assert s.type_def == TypeDef(kind=TypeDefKind.BYTE_ARRAY_ENCODED, encoding='"utf-8"')

    def test_conflicting_type_modifier_values(self):
        """Test that the same modifier with two different values is rejected."""
        with pytest.raises(UnsupportedTypeError) as exc_info:
            extract_column_attributes(
                _member_attributes('#[type_def(a::A)]\n#[type_def(b::B)]')
            )
        assert exc_info.value.attribute == "type_def"
        assert exc_info.value.lineno == 2
