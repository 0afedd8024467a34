"""Table definition language server: diagnostics, completion, hover via pygls."""

from __future__ import annotations

import logging
import re
import tomllib

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from tablegen.compiler import TableCompiler
from tablegen.config import CompilerConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Static data
# ---------------------------------------------------------------------------

BUILTIN_TYPES: dict[str, str] = {
    "felt252": "Field element (primary-eligible)",
    "bool": "Boolean value",
    "u8": "Unsigned 8-bit integer",
    "u16": "Unsigned 16-bit integer",
    "u32": "Unsigned 32-bit integer",
    "u64": "Unsigned 64-bit integer",
    "u128": "Unsigned 128-bit integer",
    "u256": "Unsigned 256-bit integer (two field elements)",
    "i8": "Signed 8-bit integer",
    "i16": "Signed 16-bit integer",
    "i32": "Signed 32-bit integer",
    "i64": "Signed 64-bit integer",
    "i128": "Signed 128-bit integer",
    "bytes31": "31 raw bytes in one field element (primary-eligible)",
    "ByteArray": "Variable-length byte string",
    "ClassHash": "Contract class hash (primary-eligible)",
    "ContractAddress": "Contract address (primary-eligible)",
    "EthAddress": "Ethereum address (primary-eligible)",
    "StorageAddress": "Storage address (primary-eligible)",
    "StorageBaseAddress": "Storage base address (primary-eligible)",
    "Array": "Growable array, Array<T>",
    "Span": "Read-only view of an array, Span<T>",
    "Option": "Optional value, Option<T>",
}

ATTRIBUTES: dict[str, str] = {
    "key": "Member is part of the record key; key members must come first",
    "name": "Display name of the column, name(\"Label\")",
    "id": "Explicit column id, id('short_string') or id(0x...)",
    "index": "Reserved index marker (arguments are ignored)",
    "raw": "Type modifier: store a single-felt type as a raw felt252",
    "short_utf8": "Type modifier: store a felt252 as a short UTF-8 string",
    "encoding": "Type modifier: tag a ByteArray or bytes31 with an encoding, encoding(\"utf-8\")",
    "type_def": "Type modifier: delegate the type definition to an impl, type_def(path::Impl)",
}

# Regex to extract the line number from parser error messages
_LINE_RE = re.compile(r"\(line (\d+)\)")

# Regex to find struct names in source
_STRUCT_RE = re.compile(r"\bstruct\s+(\w+)")

# ---------------------------------------------------------------------------
# Helpers (module-level so they are easy to unit-test)
# ---------------------------------------------------------------------------


def _extract_line_from_error(message: str) -> int | None:
    """Return the 1-based line number embedded in an error message, or None."""
    m = _LINE_RE.search(message)
    return int(m.group(1)) if m else None


def _find_struct_names(source: str) -> list[str]:
    """Return struct names declared in *source*."""
    return [m.group(1) for m in _STRUCT_RE.finditer(source)]


def _word_at_position(line_text: str, character: int) -> str:
    """Return the contiguous identifier-like word surrounding *character*."""
    if character < 0 or character >= len(line_text):
        return ""
    ch = line_text[character]
    if not (ch.isalnum() or ch == "_"):
        return ""
    # Scan left
    left = character
    while left > 0 and (line_text[left - 1].isalnum() or line_text[left - 1] == "_"):
        left -= 1
    # Scan right
    right = character
    while right < len(line_text) and (line_text[right].isalnum() or line_text[right] == "_"):
        right += 1
    return line_text[left:right]


def line_range(source: str, lineno: int | None) -> types.Range:
    """Range covering the non-blank text of a 1-based line.

    Falls back to the last line when *lineno* is unknown or out of range.
    """
    lines = source.split("\n")
    if lineno is None or not 1 <= lineno <= len(lines):
        index = max(len(lines) - 1, 0)
    else:
        index = lineno - 1
    text = lines[index] if lines else ""
    start = len(text) - len(text.lstrip())
    end = max(len(text.rstrip()), start + 1)
    return types.Range(
        start=types.Position(line=index, character=start),
        end=types.Position(line=index, character=end),
    )


def collect_diagnostics(source: str, compiler: TableCompiler) -> list[types.Diagnostic]:
    """Compile *source* and turn every failure into a diagnostic."""
    try:
        result = compiler.compile(source)
    except SyntaxError as exc:
        msg = str(exc)
        return [
            types.Diagnostic(
                range=line_range(source, _extract_line_from_error(msg)),
                severity=types.DiagnosticSeverity.Error,
                source="tablegen",
                message=msg,
            )
        ]
    return [
        types.Diagnostic(
            range=line_range(source, error.lineno),
            severity=types.DiagnosticSeverity.Error,
            source="tablegen",
            message=str(error),
        )
        for error in result.errors
    ]


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------

server = LanguageServer("tablegen-language-server", "0.1.0")
_compiler: TableCompiler | None = None


def load_compiler() -> TableCompiler:
    """Return the shared compiler, loading config on first use.

    An unreadable config file falls back to the default settings.
    """
    global _compiler
    if _compiler is None:
        try:
            config = CompilerConfig.load()
        except tomllib.TOMLDecodeError as exc:
            logger.warning("Ignoring invalid tablegen config: %s", exc)
            config = CompilerConfig()
        _compiler = TableCompiler(config)
    return _compiler


@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: types.DidOpenTextDocumentParams) -> None:
    _validate_document(params.text_document.uri)


@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: types.DidChangeTextDocumentParams) -> None:
    _validate_document(params.text_document.uri)


def _validate_document(uri: str) -> None:
    doc = server.workspace.get_text_document(uri)
    diagnostics = collect_diagnostics(doc.source, load_compiler())
    server.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(
    types.TEXT_DOCUMENT_COMPLETION,
    types.CompletionOptions(trigger_characters=[":", "["]),
)
def completions(params: types.CompletionParams) -> types.CompletionList:
    doc = server.workspace.get_text_document(params.text_document.uri)
    line_text = doc.lines[params.position.line] if params.position.line < len(doc.lines) else ""
    prefix = line_text[: params.position.character].rstrip()

    items: list[types.CompletionItem] = []

    if prefix.endswith("#["):
        # Attribute context: offer recognised directives
        for name, desc in ATTRIBUTES.items():
            items.append(
                types.CompletionItem(
                    label=name,
                    kind=types.CompletionItemKind.Keyword,
                    detail=desc,
                )
            )
    elif prefix.endswith(":") and not prefix.endswith("::"):
        # Member type context: offer built-in types + declared structs
        for name, desc in BUILTIN_TYPES.items():
            items.append(
                types.CompletionItem(
                    label=name,
                    kind=types.CompletionItemKind.TypeParameter,
                    detail=desc,
                )
            )
        for name in _find_struct_names(doc.source):
            items.append(
                types.CompletionItem(
                    label=name,
                    kind=types.CompletionItemKind.Struct,
                    detail="Declared struct",
                )
            )

    return types.CompletionList(is_incomplete=False, items=items)


@server.feature(types.TEXT_DOCUMENT_HOVER)
def hover(params: types.HoverParams) -> types.Hover | None:
    doc = server.workspace.get_text_document(params.text_document.uri)
    if params.position.line >= len(doc.lines):
        return None
    line_text = doc.lines[params.position.line]
    word = _word_at_position(line_text, params.position.character)
    if not word:
        return None

    content: str | None = None
    if word in BUILTIN_TYPES:
        content = f"**{word}**: {BUILTIN_TYPES[word]}"
    elif word in ATTRIBUTES and "#[" in line_text:
        content = f"**#[{word}]**: {ATTRIBUTES[word]}"

    if content is None:
        return None
    return types.Hover(
        contents=types.MarkupContent(
            kind=types.MarkupKind.Markdown,
            value=content,
        )
    )


def main() -> None:
    server.start_io()


if __name__ == "__main__":
    main()
