"""Candid IDL Language Server — diagnostics, completion, hover via pygls."""

from __future__ import annotations

import re

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from candid_forms.errors import CyclicAliasError
from candid_forms.json_example import example
from candid_forms.parsing.idl_parser import InterfaceParser
from candid_forms.resolver import extract_aliases, resolve, unresolved_names

# ---------------------------------------------------------------------------
# Static data
# ---------------------------------------------------------------------------

BUILTIN_TYPES: dict[str, str] = {
    "text": "UTF-8 text",
    "bool": "Boolean value (true/false)",
    "float32": "32-bit IEEE 754 float",
    "float64": "64-bit IEEE 754 float",
    "principal": "Principal identifier (textual form, e.g. aaaaa-aa)",
    "nat": "Unbounded natural number (JSON: number or decimal string)",
    "int": "Unbounded integer (JSON: number or decimal string)",
    "nat8": "Unsigned 8-bit integer (0–255)",
    "nat16": "Unsigned 16-bit integer",
    "nat32": "Unsigned 32-bit integer",
    "nat64": "Unsigned 64-bit integer",
    "int8": "Signed 8-bit integer (-128–127)",
    "int16": "Signed 16-bit integer",
    "int32": "Signed 32-bit integer",
    "int64": "Signed 64-bit integer",
    "blob": "Byte sequence (shorthand for vec nat8)",
}

KEYWORDS: dict[str, str] = {
    "type": "Declare a type alias (type Name = T;)",
    "opt": "Optional value (JSON: null or the inner value)",
    "vec": "Sequence of values (JSON: array)",
    "record": "Named fields (JSON: object, or array in field order)",
    "variant": "One of several cases (JSON: single-key object)",
    "func": "Function reference type",
    "service": "Service reference type or the actor definition",
    "query": "Read-only method mode",
    "composite_query": "Read-only method that may call other queries",
    "oneway": "Method without a reply",
    "import": "Import definitions from another .did file",
}

# Regex to extract position from parser error messages
_POSITION_RE = re.compile(r"position (\d+)")

# Regex to find declared alias names in source
_ALIAS_DECL_RE = re.compile(r"\btype\s+([A-Za-z_][A-Za-z0-9_]*)\s*=")

# ---------------------------------------------------------------------------
# Helpers (module-level so they are easy to unit-test)
# ---------------------------------------------------------------------------


def lexpos_to_position(source: str, lexpos: int) -> types.Position:
    """Convert a character offset into an LSP ``Position(line, character)``."""
    line = source.count("\n", 0, lexpos)
    last_nl = source.rfind("\n", 0, lexpos)
    character = lexpos if last_nl == -1 else lexpos - last_nl - 1
    return types.Position(line=line, character=character)


def _extract_position_from_error(message: str) -> int | None:
    """Return the integer position embedded in a SyntaxError message, or None."""
    m = _POSITION_RE.search(message)
    return int(m.group(1)) if m else None


def _find_aliases(source: str) -> list[tuple[str, int]]:
    """Return ``(name, offset)`` for every alias declaration in *source*."""
    return [(m.group(1), m.start(1)) for m in _ALIAS_DECL_RE.finditer(source)]


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


def _range_at(source: str, offset: int, length: int) -> types.Range:
    start = lexpos_to_position(source, offset)
    end = types.Position(line=start.line, character=start.character + max(length, 1))
    return types.Range(start=start, end=end)


def collect_diagnostics(source: str) -> list[types.Diagnostic]:
    """Syntax errors, cyclic aliases and unknown type names in *source*."""
    diagnostics: list[types.Diagnostic] = []
    try:
        InterfaceParser().parse(source)
    except SyntaxError as exc:
        msg = str(exc)
        pos_int = _extract_position_from_error(msg)
        if pos_int is not None:
            rng = _range_at(source, pos_int, 1)
        else:
            # Fallback: end of document
            lines = source.split("\n")
            rng = _range_at(source, len(source) - len(lines[-1]), 1)
        diagnostics.append(
            types.Diagnostic(
                range=rng,
                severity=types.DiagnosticSeverity.Error,
                source="candid",
                message=msg,
            )
        )
        return diagnostics

    aliases = extract_aliases(source)
    for name, offset in _find_aliases(source):
        if name not in aliases:
            continue
        try:
            resolve(name, aliases)
        except CyclicAliasError as exc:
            diagnostics.append(
                types.Diagnostic(
                    range=_range_at(source, offset, len(name)),
                    severity=types.DiagnosticSeverity.Error,
                    source="candid",
                    message=str(exc),
                )
            )
            continue
        for unknown in unresolved_names(aliases[name], aliases):
            diagnostics.append(
                types.Diagnostic(
                    range=_range_at(source, offset, len(name)),
                    severity=types.DiagnosticSeverity.Warning,
                    source="candid",
                    message=f"Type '{unknown}' used by '{name}' is not defined",
                )
            )
    return diagnostics


def hover_text(source: str, word: str) -> str | None:
    """Markdown shown when hovering *word* in *source*."""
    lower = word.lower()
    if lower in BUILTIN_TYPES:
        return f"**{lower}** — {BUILTIN_TYPES[lower]}"
    if lower in KEYWORDS:
        return f"**{lower}** — {KEYWORDS[lower]}"
    aliases = extract_aliases(source)
    if word not in aliases:
        return None
    try:
        resolved = resolve(word, aliases)
    except CyclicAliasError as exc:
        return f"**{word}** — {exc}"
    return f"**{word}** = `{resolved}`\n\nExample:\n```json\n{example(resolved)}\n```"


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------

server = LanguageServer("candid-language-server", "0.1.0")


@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: types.DidOpenTextDocumentParams) -> None:
    _validate_document(params.text_document.uri)


@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: types.DidChangeTextDocumentParams) -> None:
    _validate_document(params.text_document.uri)


def _validate_document(uri: str) -> None:
    doc = server.workspace.get_text_document(uri)
    server.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=collect_diagnostics(doc.source))
    )


@server.feature(
    types.TEXT_DOCUMENT_COMPLETION,
    types.CompletionOptions(trigger_characters=[":", "="]),
)
def completions(params: types.CompletionParams) -> types.CompletionList:
    doc = server.workspace.get_text_document(params.text_document.uri)
    line_text = doc.lines[params.position.line] if params.position.line < len(doc.lines) else ""
    prefix = line_text[: params.position.character].rstrip()

    items: list[types.CompletionItem] = []

    if prefix.endswith(":") or prefix.endswith("="):
        # Type context — offer built-in types, compound keywords and aliases
        for name, desc in BUILTIN_TYPES.items():
            items.append(
                types.CompletionItem(
                    label=name,
                    kind=types.CompletionItemKind.TypeParameter,
                    detail=desc,
                )
            )
        for name in ("opt", "vec", "record", "variant"):
            items.append(
                types.CompletionItem(
                    label=name,
                    kind=types.CompletionItemKind.Keyword,
                    detail=KEYWORDS[name],
                )
            )
        for name, _ in _find_aliases(doc.source):
            items.append(
                types.CompletionItem(
                    label=name,
                    kind=types.CompletionItemKind.Class,
                    detail="Type alias",
                )
            )

    return types.CompletionList(is_incomplete=False, items=items)


@server.feature(types.TEXT_DOCUMENT_HOVER)
def hover(params: types.HoverParams) -> types.Hover | None:
    doc = server.workspace.get_text_document(params.text_document.uri)
    if params.position.line >= len(doc.lines):
        return None
    word = _word_at_position(doc.lines[params.position.line], params.position.character)
    if not word:
        return None

    content = hover_text(doc.source, word)
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
