"""Encoding of attribute literals into field-element identifiers."""

from __future__ import annotations

import re

from tablegen.errors import IdentifierEncodingError

__all__ = [
    "FELT_PRIME",
    "SHORT_STRING_MAX_LEN",
    "id_string_to_felt",
    "quote",
    "unquote",
]

FELT_PRIME = 2**251 + 17 * 2**192 + 1

SHORT_STRING_MAX_LEN = 31

_DECIMAL_RE = re.compile(r"^-?[0-9]+$")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")

_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
}


def quote(text: str) -> str:
    """Render text as a double-quoted string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def unquote(literal: str) -> str:
    """Strip the quotes from a string literal and resolve its escapes.

    Text that is not wrapped in matching quotes is returned unchanged.
    """
    if len(literal) < 2 or literal[0] not in "\"'" or literal[-1] != literal[0]:
        return literal
    body = literal[1:-1]
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        if i + 1 >= len(body):
            raise IdentifierEncodingError(f"Dangling escape in literal {literal}")
        esc = body[i + 1]
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
            i += 2
        elif esc == "x":
            hex_digits = body[i + 2 : i + 4]
            try:
                if len(hex_digits) != 2:
                    raise ValueError(hex_digits)
                out.append(chr(int(hex_digits, 16)))
            except ValueError:
                raise IdentifierEncodingError(
                    f"Invalid hex escape '\\x{hex_digits}' in literal {literal}"
                ) from None
            i += 4
        else:
            raise IdentifierEncodingError(f"Unknown escape '\\{esc}' in literal {literal}")
    return "".join(out)


def _check_felt_range(value: int, literal: str) -> int:
    if value < 0 or value >= FELT_PRIME:
        raise IdentifierEncodingError(f"Identifier {literal} is outside the field element range")
    return value


def _short_string_to_int(text: str, literal: str) -> int:
    if not text:
        raise IdentifierEncodingError("Identifier literal must not be empty")
    if len(text) > SHORT_STRING_MAX_LEN:
        raise IdentifierEncodingError(
            f"Identifier {literal} is longer than {SHORT_STRING_MAX_LEN} characters"
        )
    for ch in text:
        if not (0x20 <= ord(ch) <= 0x7E):
            raise IdentifierEncodingError(
                f"Identifier {literal} contains non printable-ASCII character {ch!r}"
            )
    return int.from_bytes(text.encode("ascii"), "big")


def id_string_to_felt(literal: str) -> str:
    """Encode an identifier literal as a canonical hex field element.

    Integer literals (decimal or ``0x`` hex) are range checked and kept.
    Quoted literals and bare text are encoded as short strings: up to 31
    printable ASCII characters packed big-endian.

    >>> id_string_to_felt("0x1F")
    '0x1f'
    >>> id_string_to_felt("'ab'")
    '0x6162'
    """
    text = literal.strip()
    if _HEX_RE.match(text):
        value = _check_felt_range(int(text, 16), literal)
    elif _DECIMAL_RE.match(text):
        value = _check_felt_range(int(text, 10), literal)
    else:
        value = _short_string_to_int(unquote(text), literal)
    return hex(value)
