"""Compile annotated struct definitions into table source."""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass, field

from tablegen.codegen import generate
from tablegen.config import CompilerConfig
from tablegen.errors import TableError
from tablegen.parsing import StructParser, StructSpec
from tablegen.structure import TableStructure, extract_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledTable:
    """Assembled structure and generated source for one struct."""

    structure: TableStructure
    code: str

    @property
    def name(self) -> str:
        return self.structure.name


@dataclass
class CompileResult:
    """Outcome of compiling one source text."""

    tables: list[CompiledTable] = field(default_factory=list)
    errors: list[TableError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def code(self) -> str:
        """Generated source of every successful table, in declaration order."""
        return "\n".join(t.code for t in self.tables)


class TableCompiler:
    """Drives parsing, extraction and code generation."""

    def __init__(self, config: CompilerConfig | None = None) -> None:
        """Initialize a compiler.

        Args:
            config: Compiler settings; defaults are used when omitted.
        """
        self.config = config or CompilerConfig()
        self._parser = StructParser()

    def compile_struct(self, struct: StructSpec) -> CompiledTable:
        """Compile one parsed struct.

        Raises:
            TableError: If the struct cannot be compiled.
        """
        structure = extract_table(struct, self.config.primary_types)
        code = generate(
            structure, self.config.interface_path, self.config.default_primary_type
        )
        return CompiledTable(structure=structure, code=code)

    def compile(self, source: str, only: Collection[str] | None = None) -> CompileResult:
        """Compile every struct in ``source``.

        A struct that fails is reported in the result and does not stop
        the others. Syntax errors abort the whole source.

        Args:
            source: Struct definitions.
            only: If given, compile only structs with these names.

        Raises:
            SyntaxError: If the source cannot be parsed.
        """
        structs = self._parser.parse(source)
        logger.debug("Parsed %d struct(s)", len(structs))

        result = CompileResult()
        for struct in structs:
            if only is not None and struct.name not in only:
                logger.debug("Skipping struct %s", struct.name)
                continue
            try:
                compiled = self.compile_struct(struct)
            except TableError as exc:
                logger.debug("Struct %s failed: %s", struct.name, exc)
                result.errors.append(exc)
                continue
            logger.debug(
                "Compiled table %s (%s, %d columns)",
                struct.name,
                type(compiled.structure.key).__name__,
                len(compiled.structure.columns),
            )
            result.tables.append(compiled)
        return result
