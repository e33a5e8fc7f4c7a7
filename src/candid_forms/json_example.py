"""Example JSON values for resolved Candid types, used to pre-fill inputs."""

from __future__ import annotations

import json
from typing import Any

from candid_forms.parsing.fragments import extract_inner, parse_record_fields, parse_variant_cases
from candid_forms.types import ScalarType, scalar_type, type_keyword

SAMPLE_PRINCIPAL = "ryjl3-tyaaa-aaaaa-aaaba-cai"

_SCALAR_EXAMPLES: dict[ScalarType, Any] = {
    ScalarType.TEXT: "example",
    ScalarType.BOOL: True,
    ScalarType.FLOAT32: 3.14,
    ScalarType.FLOAT64: 3.14,
    ScalarType.PRINCIPAL: SAMPLE_PRINCIPAL,
    # Unbounded integers are shown as strings to demonstrate big values
    ScalarType.NAT: "100000000000000000000",
    ScalarType.INT: "-100000000000000000000",
}


def example_value(type_expr: str) -> Any:
    """Return a representative JSON-compatible value for ``type_expr``."""
    t = type_expr.strip()
    scalar = scalar_type(t)
    if scalar is not None:
        if scalar in _SCALAR_EXAMPLES:
            return _SCALAR_EXAMPLES[scalar]
        return -1 if scalar.is_signed else 0

    keyword = type_keyword(t)
    if keyword == "opt":
        # Users may replace null with a value of the inner type
        return None
    if keyword == "vec":
        return [example_value(extract_inner(t, "vec"))]
    if t.lower() == "blob":
        return [0]
    if keyword == "record":
        return {f.name: example_value(f.type_expr) for f in parse_record_fields(t)}
    if keyword == "variant":
        cases = parse_variant_cases(t)
        if not cases:
            return {}
        first = cases[0]
        payload = None if first.type_expr is None else example_value(first.type_expr)
        return {first.name: payload}
    return f"<value for {t}>"


def example(type_expr: str) -> str:
    """Return a pretty-printed example literal for one type."""
    return json.dumps(example_value(type_expr), indent=2)


def examples(types: list[str]) -> str:
    """Return an example for an argument list.

    Empty for no arguments, a single literal for one, a JSON array otherwise.
    """
    if not types:
        return ""
    if len(types) == 1:
        return example(types[0])
    return json.dumps([example_value(t) for t in types], indent=2)
