"""Splitting of record and variant bodies into fields and cases.

Type expressions are kept as text; these helpers re-derive the structure of
one ``record { ... }`` or ``variant { ... }`` level on demand.
"""

from __future__ import annotations

from candid_forms.types import FieldSpec, VariantCase, type_keyword

_OPENERS = {"{": "}", "(": ")", "<": ">"}
_CLOSERS = {"}": "{", ")": "(", ">": "<"}


def _scan_top_level(text: str, separator: str) -> list[int]:
    """Return the offsets of ``separator`` at nesting depth zero.

    Braces, parentheses and angle brackets are tracked with independent
    counters. Characters inside double-quoted labels are skipped, and the
    ``>`` of a ``->`` arrow never closes an angle bracket.
    """
    depth = {"{": 0, "(": 0, "<": 0}
    offsets: list[int] = []
    in_string = False
    escape_next = False

    for i, ch in enumerate(text):
        if escape_next:
            escape_next = False
            continue
        if in_string:
            if ch == "\\":
                escape_next = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in _OPENERS:
            depth[ch] += 1
        elif ch in _CLOSERS:
            if ch == ">" and i > 0 and text[i - 1] == "-":
                continue
            depth[_CLOSERS[ch]] -= 1
        elif ch == separator and not any(depth.values()):
            offsets.append(i)
    return offsets


def split_top_level(text: str, separator: str = ";") -> list[str]:
    """Split ``text`` on ``separator`` at depth zero, dropping blank parts."""
    parts: list[str] = []
    start = 0
    for offset in _scan_top_level(text, separator):
        parts.append(text[start:offset])
        start = offset + 1
    parts.append(text[start:])
    return [p.strip() for p in parts if p.strip()]


def partition_top_level(text: str, separator: str = ":") -> tuple[str, str] | None:
    """Split ``text`` once on the first top-level ``separator``, or None."""
    offsets = _scan_top_level(text, separator)
    if not offsets:
        return None
    return text[: offsets[0]].strip(), text[offsets[0] + 1 :].strip()


def braced_body(type_expr: str) -> str | None:
    """Return the text between the first ``{`` and the last ``}``."""
    s = type_expr.strip()
    lbrace = s.find("{")
    rbrace = s.rfind("}")
    if lbrace < 0 or rbrace <= lbrace:
        return None
    return s[lbrace + 1 : rbrace]


def extract_inner(type_expr: str, keyword: str) -> str:
    """Return the wrapped type of ``opt T`` / ``vec T`` (or ``opt <T>``)."""
    s = type_expr.strip()
    rest = s[len(keyword) :].strip() if s.lower().startswith(keyword) else s
    if rest.startswith("<") and rest.endswith(">"):
        return rest[1:-1].strip()
    return rest


def _unquote(label: str) -> str:
    if len(label) >= 2 and label[0] == label[-1] == '"':
        return label[1:-1]
    return label


def parse_record_fields(type_expr: str) -> list[FieldSpec]:
    """Parse ``record { a : T; b : U }`` into an ordered list of FieldSpec.

    Fields without a label take their position as name, so
    ``record { int; text }`` yields fields ``0`` and ``1``.
    """
    body = braced_body(type_expr)
    if body is None:
        return []
    fields: list[FieldSpec] = []
    for index, part in enumerate(split_top_level(body, ";")):
        split = partition_top_level(part, ":")
        if split is None or not split[0]:
            fields.append(FieldSpec(name=str(index), type_expr=part))
        else:
            name, ty = split
            fields.append(FieldSpec(name=_unquote(name), type_expr=ty))
    return fields


def parse_variant_cases(type_expr: str) -> list[VariantCase]:
    """Parse ``variant { A; B : T }``; a case without ``:`` has no payload."""
    body = braced_body(type_expr)
    if body is None:
        return []
    cases: list[VariantCase] = []
    for part in split_top_level(body, ";"):
        split = partition_top_level(part, ":")
        if split is None:
            cases.append(VariantCase(name=_unquote(part)))
        else:
            name, ty = split
            cases.append(VariantCase(name=_unquote(name), type_expr=ty or None))
    return cases


def render_record(fields: list[FieldSpec]) -> str:
    if not fields:
        return "record {}"
    return "record { " + "; ".join(f"{f.name} : {f.type_expr}" for f in fields) + " }"


def render_variant(cases: list[VariantCase]) -> str:
    if not cases:
        return "variant {}"
    parts = [c.name if c.type_expr is None else f"{c.name} : {c.type_expr}" for c in cases]
    return "variant { " + "; ".join(parts) + " }"


def is_optional(type_expr: str) -> bool:
    return type_keyword(type_expr) == "opt"
