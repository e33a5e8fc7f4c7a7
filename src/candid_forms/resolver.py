"""Candid type alias extraction and resolution.

- Extracts ``type Name = <type>;`` aliases from Candid source text
- Resolves argument types by expanding aliases through ``opt T``,
  ``vec T``, record fields and variant payloads
- Records and variants are re-serialized with their resolved member types
"""

from __future__ import annotations

import logging
import re

from candid_forms.errors import CyclicAliasError, UnresolvedTypeError
from candid_forms.parsing.fragments import (
    extract_inner,
    parse_record_fields,
    parse_variant_cases,
    render_record,
    render_variant,
)
from candid_forms.parsing.idl_lexer import IdlLexer
from candid_forms.types import (
    BUILTIN_SHORTHANDS,
    COMPOUND_KEYWORDS,
    FieldSpec,
    VariantCase,
    is_builtin_name,
    type_keyword,
)

logger = logging.getLogger(__name__)

_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_BLOCK_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_DEPTH_DELTAS = {
    "LBRACE": ("curl", 1),
    "RBRACE": ("curl", -1),
    "LPAREN": ("paren", 1),
    "RPAREN": ("paren", -1),
    "LANGLE": ("angle", 1),
    "RANGLE": ("angle", -1),
}


def strip_comments(source: str) -> str:
    """Remove ``//`` line comments and ``/* */`` block comments."""
    return _BLOCK_COMMENT_RE.sub("", _LINE_COMMENT_RE.sub("", source))


def extract_aliases(source: str) -> dict[str, str]:
    """Return the ``name -> type expression`` table declared in ``source``.

    Malformed declarations (no name, no ``=``, no terminating ``;`` at the top
    level) are skipped rather than failing the whole extraction.
    """
    text = strip_comments(source)
    lexer = IdlLexer(skip_illegal=True)
    lexer.build()
    toks = lexer.tokenize(text)

    aliases: dict[str, str] = {}
    i = 0
    while i < len(toks):
        if toks[i].type != "TYPE":
            i += 1
            continue
        if i + 2 >= len(toks) or toks[i + 1].type != "IDENTIFIER" or toks[i + 2].type != "EQUALS":
            logger.debug("Skipping malformed type declaration at position %d", toks[i].lexpos)
            i += 1
            continue

        name = toks[i + 1].value
        j = i + 3
        depth = {"curl": 0, "paren": 0, "angle": 0}
        while j < len(toks):
            tok = toks[j]
            if tok.type in _DEPTH_DELTAS:
                counter, delta = _DEPTH_DELTAS[tok.type]
                depth[counter] += delta
            elif tok.type == "SEMI" and not any(depth.values()):
                break
            j += 1
        if j >= len(toks):
            logger.debug("Unterminated declaration of type '%s'", name)
            break

        if j > i + 3:
            start = toks[i + 3].lexpos
            expr = text[start : toks[j].lexpos].strip()
            aliases[name] = expr
        i = j + 1
    return aliases


def resolve(type_expr: str, aliases: dict[str, str], *, strict: bool = False) -> str:
    """Expand every alias in ``type_expr`` using the ``aliases`` table.

    Unknown names are returned unchanged unless ``strict`` is set, in which
    case UnresolvedTypeError is raised. Cycles raise CyclicAliasError.
    """
    return _resolve(type_expr, aliases, strict, ())


def _resolve(type_expr: str, aliases: dict[str, str], strict: bool, expanding: tuple[str, ...]) -> str:
    t = type_expr.strip()
    keyword = type_keyword(t)

    if keyword in ("opt", "vec"):
        inner = extract_inner(t, keyword)
        return f"{keyword} {_resolve(inner, aliases, strict, expanding)}"
    if keyword == "record":
        fields = [
            FieldSpec(name=f.name, type_expr=_resolve(f.type_expr, aliases, strict, expanding))
            for f in parse_record_fields(t)
        ]
        return render_record(fields)
    if keyword == "variant":
        cases = [
            VariantCase(
                name=c.name,
                type_expr=None if c.type_expr is None else _resolve(c.type_expr, aliases, strict, expanding),
            )
            for c in parse_variant_cases(t)
        ]
        return render_variant(cases)

    # Plain alias or scalar
    if t in aliases:
        if t in expanding:
            chain = list(expanding[expanding.index(t) :]) + [t]
            raise CyclicAliasError(chain)
        return _resolve(aliases[t], aliases, strict, expanding + (t,))
    if t.lower() in BUILTIN_SHORTHANDS:
        return BUILTIN_SHORTHANDS[t.lower()]

    if strict and keyword not in COMPOUND_KEYWORDS and not is_builtin_name(t):
        raise UnresolvedTypeError(t)
    if keyword not in COMPOUND_KEYWORDS and not is_builtin_name(t):
        logger.debug("Leaving unresolved type name '%s' as-is", t)
    return t


def unresolved_names(type_expr: str, aliases: dict[str, str]) -> list[str]:
    """Return the bare names in ``type_expr`` that would pass through unresolved."""
    found: list[str] = []
    _collect_unresolved(type_expr, aliases, found, ())
    return found


def _collect_unresolved(type_expr: str, aliases: dict[str, str], found: list[str], expanding: tuple[str, ...]) -> None:
    t = type_expr.strip()
    keyword = type_keyword(t)
    if keyword in ("opt", "vec"):
        _collect_unresolved(extract_inner(t, keyword), aliases, found, expanding)
    elif keyword == "record":
        for f in parse_record_fields(t):
            _collect_unresolved(f.type_expr, aliases, found, expanding)
    elif keyword == "variant":
        for c in parse_variant_cases(t):
            if c.type_expr is not None:
                _collect_unresolved(c.type_expr, aliases, found, expanding)
    elif t in aliases:
        if t not in expanding:
            _collect_unresolved(aliases[t], aliases, found, expanding + (t,))
    elif keyword not in COMPOUND_KEYWORDS and not is_builtin_name(t) and _NAME_RE.fullmatch(t):
        if t not in found:
            found.append(t)


class TypeResolver:
    """Alias table for one Candid source, with resolution helpers."""

    def __init__(self, candid_source: str) -> None:
        self._aliases = extract_aliases(candid_source)

    @property
    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def resolve_type(self, type_expr: str, *, strict: bool = False) -> str:
        return resolve(type_expr, self._aliases, strict=strict)

    def resolve_arg_types(self, args: list[str], *, strict: bool = False) -> list[str]:
        """Resolve a list of argument type strings."""
        return [self.resolve_type(a, strict=strict) for a in args]

    def unresolved_names(self, type_expr: str) -> list[str]:
        return unresolved_names(type_expr, self._aliases)
