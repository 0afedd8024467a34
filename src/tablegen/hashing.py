"""Deterministic selectors for member names."""

from __future__ import annotations

from Crypto.Hash import keccak

__all__ = ["SELECTOR_BITS", "selector_from_name"]

# Selectors must fit in a single field element.
SELECTOR_BITS = 250
_SELECTOR_MASK = (1 << SELECTOR_BITS) - 1


def selector_from_name(name: str) -> str:
    """Hash a member name into a fixed-width hex selector.

    The digest is Keccak-256 over the UTF-8 name, truncated to the low
    250 bits and rendered as ``0x`` followed by 64 lowercase hex digits.

    >>> selector_from_name("score") == selector_from_name("score")
    True
    >>> len(selector_from_name("score"))
    66
    """
    digest = keccak.new(digest_bits=256, data=name.encode("utf-8")).digest()
    value = int.from_bytes(digest, "big") & _SELECTOR_MASK
    return f"0x{value:064x}"
