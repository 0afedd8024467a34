"""tablegen - compile annotated struct definitions into table schemas and source."""

from tablegen.codegen import generate
from tablegen.column import Column, build_column
from tablegen.compiler import CompiledTable, CompileResult, TableCompiler
from tablegen.config import CompilerConfig
from tablegen.errors import (
    AttributeArityError,
    DuplicateAttributeError,
    IdentifierEncodingError,
    KeysNotFirstError,
    PrimaryConversionError,
    TableError,
    UnsupportedTypeError,
)
from tablegen.parsing import StructParser
from tablegen.primary import Primary
from tablegen.structure import (
    CustomKey,
    KeyType,
    PrimaryKey,
    TableStructure,
    extract_table,
)

__all__ = [
    # Main API
    "TableCompiler",
    "CompileResult",
    "CompiledTable",
    "CompilerConfig",
    "StructParser",
    "extract_table",
    "generate",
    # Model
    "Column",
    "build_column",
    "Primary",
    "KeyType",
    "PrimaryKey",
    "CustomKey",
    "TableStructure",
    # Errors
    "TableError",
    "KeysNotFirstError",
    "AttributeArityError",
    "DuplicateAttributeError",
    "UnsupportedTypeError",
    "PrimaryConversionError",
    "IdentifierEncodingError",
]

__version__ = "0.1.0"
