"""Validation of JSON argument text against resolved Candid types.

Every problem found is reported; nothing raises for malformed input.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from candid_forms.parsing.fragments import (
    extract_inner,
    is_optional,
    parse_record_fields,
    parse_variant_cases,
)
from candid_forms.types import ScalarType, scalar_type, type_keyword


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate(types: list[str], json_text: str, *, strict_variants: bool = False) -> list[str]:
    """Return every violation of ``json_text`` against the argument ``types``.

    An empty list means the text is valid. With ``strict_variants`` the case
    name of a variant value is checked against the declared cases and its
    payload is validated too.
    """
    if not types and not json_text.strip():
        # no-arg method: empty input is the only valid payload
        return []
    try:
        parsed = json.loads(json_text) if json_text.strip() else None
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and over-long integer literals
        return [f"Invalid JSON: {e}"]

    checker = _ShapeChecker(strict_variants=strict_variants)
    if len(types) == 1:
        checker.check(parsed, types[0], "")
    elif not isinstance(parsed, list) or len(parsed) != len(types):
        checker.errors.append(f"Expected JSON array with {len(types)} items")
    else:
        for i, (value, ty) in enumerate(zip(parsed, types)):
            checker.check(value, ty, f"[{i}]")
    return checker.errors


def validate_json_args(
    resolved_arg_types: list[str], json_text: str, *, strict_variants: bool = False
) -> ValidationResult:
    return ValidationResult(
        errors=validate(resolved_arg_types, json_text, strict_variants=strict_variants)
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class _ShapeChecker:
    """Recursive walk that accumulates path-qualified messages."""

    def __init__(self, strict_variants: bool = False) -> None:
        self.strict_variants = strict_variants
        self.errors: list[str] = []

    def _error(self, path: str, message: str) -> None:
        self.errors.append(f"{path or '(root)'} {message}")

    def check(self, value: Any, type_expr: str, path: str) -> None:
        t = type_expr.strip()
        scalar = scalar_type(t)
        if scalar is not None:
            self._check_scalar(value, scalar, path)
            return

        keyword = type_keyword(t)
        if keyword == "opt":
            if value is not None:
                self.check(value, extract_inner(t, "opt"), path)
        elif keyword == "vec" or t.lower() == "blob":
            inner = extract_inner(t, "vec") if keyword == "vec" else "nat8"
            if not isinstance(value, list):
                self._error(path, "expected array")
                return
            for i, item in enumerate(value):
                self.check(item, inner, f"{path}[{i}]")
        elif keyword == "record":
            self._check_record(value, t, path)
        elif keyword == "variant":
            self._check_variant(value, t, path)

    def _check_scalar(self, value: Any, scalar: ScalarType, path: str) -> None:
        if scalar is ScalarType.TEXT:
            if value is not None and not isinstance(value, str):
                self._error(path, "expected string")
        elif scalar is ScalarType.PRINCIPAL:
            if value is not None and not isinstance(value, str):
                self._error(path, "expected principal text")
        elif scalar is ScalarType.BOOL:
            if not isinstance(value, bool):
                self._error(path, "expected boolean")
        elif scalar.is_unbounded:
            if not (_is_number(value) or isinstance(value, str)):
                self._error(path, "expected number or numeric string")
        elif not _is_number(value):
            self._error(path, "expected number")

    def _check_record(self, value: Any, type_expr: str, path: str) -> None:
        fields = parse_record_fields(type_expr)
        if isinstance(value, list):
            if len(value) != len(fields):
                self._error(path, f"expected {len(fields)} items for record, got {len(value)}")
                return
            for f, item in zip(fields, value):
                self.check(item, f.type_expr, f"{path}.{f.name}")
            return
        if not isinstance(value, Mapping):
            self._error(path, "expected object with named fields")
            return
        for f in fields:
            if f.name not in value:
                if not is_optional(f.type_expr):
                    self._error(path, f"missing field {f.name}")
                continue
            self.check(value[f.name], f.type_expr, f"{path}.{f.name}")

    def _check_variant(self, value: Any, type_expr: str, path: str) -> None:
        cases = parse_variant_cases(type_expr)
        if not isinstance(value, Mapping) or len(value) != 1:
            hint = "one of: " + ", ".join(c.name for c in cases) if cases else "a single case object"
            self._error(path, f"expected variant as object with {hint}")
            return
        if not self.strict_variants:
            # Case names are not checked in lenient mode
            return
        (name, payload), = value.items()
        case = next((c for c in cases if c.name == name), None)
        if case is None:
            self._error(
                path,
                f"unknown variant case {name} (expected one of: {', '.join(c.name for c in cases)})",
            )
        elif case.type_expr is None:
            if payload is not None:
                self._error(f"{path}.{name}", "expected null")
        else:
            self.check(payload, case.type_expr, f"{path}.{name}")
