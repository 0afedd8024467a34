"""Tests for identifier encoding and selector hashing."""

import pytest

from tablegen.errors import IdentifierEncodingError
from tablegen.hashing import selector_from_name
from tablegen.literals import FELT_PRIME, id_string_to_felt, quote, unquote


class TestIdStringToFelt:
    """Tests for the literal-to-identifier encoder."""

    def test_short_string_literal(self):
        """Test double-quoted literals encode as short strings."""
        assert id_string_to_felt('"custom"') == "0x637573746f6d"

    def test_single_quoted_literal(self):
        """Test Cairo short string literals."""
        assert id_string_to_felt("'ab'") == "0x6162"

    def test_bare_text_matches_quoted(self):
        """Test that bare text encodes like its quoted form."""
        assert id_string_to_felt("custom") == id_string_to_felt('"custom"')

    def test_hex_literal_is_canonicalised(self):
        """Test hex literals are kept and lower-cased."""
        assert id_string_to_felt("0x00AB") == "0xab"

    def test_decimal_literal(self):
        """Test decimal literals are rendered as hex."""
        assert id_string_to_felt("255") == "0xff"
        assert id_string_to_felt("0") == "0x0"

    def test_quoted_digits_are_strings(self):
        """Test that quoted digits are short strings, not numbers."""
        assert id_string_to_felt('"1"') == "0x31"

    def test_escapes(self):
        """Test escape sequences inside literals."""
        assert id_string_to_felt(r'"a\"b"') == "0x612262"
        assert id_string_to_felt(r"'\x41'") == "0x41"

    def test_max_length(self):
        """Test the 31 character limit."""
        id_string_to_felt("'" + "a" * 31 + "'")
        with pytest.raises(IdentifierEncodingError, match="longer than 31"):
            id_string_to_felt("'" + "a" * 32 + "'")

    def test_empty_string(self):
        """Test that empty literals are rejected."""
        with pytest.raises(IdentifierEncodingError):
            id_string_to_felt('""')

    def test_non_ascii(self):
        """Test that non printable-ASCII characters are rejected."""
        with pytest.raises(IdentifierEncodingError):
            id_string_to_felt('"café"')
        with pytest.raises(IdentifierEncodingError):
            id_string_to_felt(r'"a\nb"')

    def test_out_of_range(self):
        """Test numbers outside the field are rejected."""
        id_string_to_felt(hex(FELT_PRIME - 1))
        with pytest.raises(IdentifierEncodingError, match="range"):
            id_string_to_felt(hex(FELT_PRIME))
        with pytest.raises(IdentifierEncodingError, match="range"):
            id_string_to_felt("-1")

    def test_bad_escape(self):
        """Test unknown escapes are rejected."""
        with pytest.raises(IdentifierEncodingError):
            id_string_to_felt(r'"\q"')
        with pytest.raises(IdentifierEncodingError):
            id_string_to_felt(r'"\x4"')


class TestQuoting:
    """Tests for quote/unquote."""

    def test_quote(self):
        assert quote("score") == '"score"'
        assert quote('a"b') == '"a\\"b"'

    def test_unquote_round_trip(self):
        assert unquote(quote('a"b\\c')) == 'a"b\\c'

    def test_unquote_leaves_bare_text(self):
        assert unquote("plain") == "plain"
        assert unquote("'mismatched\"") == "'mismatched\""


class TestSelectorFromName:
    """Tests for member name hashing."""

    def test_fixed_width(self):
        """Test selectors are 0x plus 64 hex digits."""
        for name in ("a", "score", "a_much_longer_member_name"):
            selector = selector_from_name(name)
            assert selector.startswith("0x")
            assert len(selector) == 66
            int(selector, 16)

    def test_deterministic(self):
        """Test that hashing the same name twice gives the same selector."""
        assert selector_from_name("score") == selector_from_name("score")

    def test_distinct_names(self):
        """Test that different names hash differently."""
        assert selector_from_name("score") != selector_from_name("name")

    def test_fits_field_element(self):
        """Test selectors are below 2**250."""
        assert int(selector_from_name("score"), 16) < 2**250

    def test_keccak_digest(self):
        """Test that selectors are masked Keccak-256 digests, not SHA3-256."""
        assert selector_from_name("") == (
            "0x01d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )
        selector = selector_from_name("score")
        assert selector.startswith("0x03ff0cc4")
        assert selector.endswith("7c7e02a7")
