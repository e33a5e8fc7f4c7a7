"""Textual Candid argument literals assembled directly from raw strings."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from candid_forms.errors import ArgumentCountError, MissingFieldError, RecordShapeError
from candid_forms.parsing.fragments import extract_inner
from candid_forms.types import FieldSpec, ScalarType, scalar_type, type_keyword


def compose_args(raw_values: list[str]) -> str:
    """Join trimmed, non-blank values into a Candid tuple like ``(42, "hi")``."""
    cleaned = [s.strip() for s in raw_values if s.strip()]
    return f"({', '.join(cleaned)})"


def _quote(value: str) -> str:
    s = value.strip()
    if len(s) >= 2 and s[0] == s[-1] == '"':
        return s
    return json.dumps(value, ensure_ascii=False)


def format_literal(type_expr: str, raw: str) -> str:
    """Format one raw string as a Candid value literal for ``type_expr``."""
    t = type_expr.strip()
    s = raw.strip()
    scalar = scalar_type(t)

    if type_keyword(t) == "opt":
        if not s or s == "null":
            return "null"
        return f"opt {format_literal(extract_inner(t, 'opt'), s)}"
    if scalar is ScalarType.TEXT:
        return _quote(raw)
    if scalar is ScalarType.PRINCIPAL:
        if s.startswith("principal"):
            return s
        return f"principal {_quote(s)}"
    if scalar is ScalarType.BOOL and s.lower() in ("true", "false"):
        return s.lower()
    # Numbers, records and other literals are passed through as typed
    return s


def build_record_literal(fields: list[FieldSpec], raw_values: list[str]) -> str:
    """Build ``record { name = value : type; ... }`` from one raw value per field."""
    if len(raw_values) != len(fields):
        raise ArgumentCountError(f"Expected {len(fields)} values for record, got {len(raw_values)}")
    parts = []
    for f, raw in zip(fields, raw_values):
        literal = format_literal(f.type_expr, raw)
        if not literal:
            raise MissingFieldError(f"Missing value for field {f.name}")
        parts.append(f"{f.name} = {literal} : {f.type_expr.strip()}")
    if not parts:
        return "record {}"
    return "record { " + "; ".join(parts) + " }"


def compose_single_record_arg(fields: list[FieldSpec], raw_values: list[str]) -> str:
    """Wrap a single record argument in a Candid tuple."""
    return f"({build_record_literal(fields, raw_values)})"


def _raw_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_record_from_dynamic(fields: list[FieldSpec], value: Any) -> str:
    """Build a record literal from a list, or a mapping keyed by name or position."""
    if isinstance(value, (list, tuple)):
        raw = [_raw_text(v) for v in value]
    elif isinstance(value, Mapping):
        raw = []
        for i, f in enumerate(fields):
            if f.name in value:
                raw.append(_raw_text(value[f.name]))
            elif str(i) in value:
                raw.append(_raw_text(value[str(i)]))
            else:
                raise MissingFieldError(f"Missing field {f.name}")
    else:
        raise RecordShapeError(f"Unsupported record input: {type(value).__name__}")
    return build_record_literal(fields, raw)
