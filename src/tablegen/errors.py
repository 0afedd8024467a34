"""Exception types raised while compiling table structures."""

from __future__ import annotations

__all__ = [
    "TableError",
    "KeysNotFirstError",
    "AttributeArityError",
    "DuplicateAttributeError",
    "UnsupportedTypeError",
    "PrimaryConversionError",
    "IdentifierEncodingError",
]


class TableError(ValueError):
    """Base class for failures that abort compilation of one struct.

    Location details are optional and are filled in by ``locate`` as the
    error travels outward through the pipeline. Details set by an inner
    layer are never overwritten by an outer one.
    """

    def __init__(
        self,
        message: str,
        *,
        struct_name: str | None = None,
        field_name: str | None = None,
        attribute: str | None = None,
        lineno: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.struct_name = struct_name
        self.field_name = field_name
        self.attribute = attribute
        self.lineno = lineno

    def locate(
        self,
        *,
        struct_name: str | None = None,
        field_name: str | None = None,
        attribute: str | None = None,
        lineno: int | None = None,
    ) -> TableError:
        """Fill in missing location details and return the same error."""
        if self.struct_name is None:
            self.struct_name = struct_name
        if self.field_name is None:
            self.field_name = field_name
        if self.attribute is None:
            self.attribute = attribute
        if self.lineno is None:
            self.lineno = lineno
        return self

    @property
    def location(self) -> str:
        """Human readable location prefix, empty when nothing is known."""
        parts: list[str] = []
        if self.struct_name and self.field_name:
            parts.append(f"{self.struct_name}.{self.field_name}")
        elif self.struct_name or self.field_name:
            parts.append(self.struct_name or self.field_name or "")
        if self.attribute:
            parts.append(f"#[{self.attribute}]")
        if self.lineno is not None:
            parts.append(f"(line {self.lineno})")
        return " ".join(parts)

    def __str__(self) -> str:
        location = self.location
        return f"{location}: {self.message}" if location else self.message


class KeysNotFirstError(TableError):
    """Key columns are not a contiguous prefix of the member list."""


class AttributeArityError(TableError):
    """A recognised directive was given the wrong number or shape of arguments."""


class DuplicateAttributeError(TableError):
    """A recognised directive was given more than once on the same member."""


class UnsupportedTypeError(TableError):
    """No resolver rule exists for a type / type-modifier combination."""


class PrimaryConversionError(TableError):
    """The promoted key column's type descriptor is not primary-eligible."""


class IdentifierEncodingError(TableError):
    """A literal cannot be encoded as a field-element identifier."""
