"""Conversion of user-entered values into canonical Candid-shaped JSON values.

The result of :func:`build_argument_list` is what gets handed to the wire
encoder: plain dicts, lists, strings, numbers, booleans and None. Unbounded
``nat``/``int`` values that do not fit in 64 bits are kept as decimal-digit
strings so no precision is lost in JSON.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from candid_forms.errors import (
    ArgumentCountError,
    CandidError,
    ExpectedSequenceError,
    InvalidBooleanError,
    InvalidFloatError,
    InvalidIntegerError,
    MissingFieldError,
    RecordShapeError,
)
from candid_forms.parsing.fragments import extract_inner, parse_record_fields
from candid_forms.types import ScalarType, scalar_type, type_keyword

logger = logging.getLogger(__name__)

# Digit strings longer than this cannot be a 64-bit value and stay strings
MAX_NATIVE_DIGITS = 19

_DIGITS_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_UNSUPPORTED_RE = re.compile(r"\b(variant|func|service)\b", re.IGNORECASE)


def pre_parse(value: Any) -> Any:
    """Decode text that looks like a JSON object, array, null or boolean.

    Anything else, including text that fails to decode, is returned as-is.
    """
    if isinstance(value, str):
        s = value.strip()
        if (
            (s.startswith("{") and s.endswith("}"))
            or (s.startswith("[") and s.endswith("]"))
            or s in ("null", "true", "false")
        ):
            try:
                return json.loads(s)
            except (ValueError, RecursionError):
                logger.debug("Input looked like JSON but did not decode; keeping text")
    return value


def build_value(type_expr: str, raw: Any) -> Any:
    """Convert one raw input for a resolved ``type_expr`` into canonical form."""
    return _convert(type_expr, pre_parse(raw), "")


def build_argument_list(types: list[str], raw_values: list[Any]) -> Any:
    """Convert one raw input per argument type.

    Returns the single converted value when there is exactly one argument,
    otherwise a list in argument order.
    """
    if len(raw_values) != len(types):
        raise ArgumentCountError(f"Expected {len(types)} inputs, got {len(raw_values)}")
    values = [build_value(t, v) for t, v in zip(types, raw_values)]
    if len(types) == 1:
        return values[0]
    return values


def _convert(type_expr: str, value: Any, path: str) -> Any:
    t = type_expr.strip()
    scalar = scalar_type(t)
    if scalar is not None:
        return _convert_scalar(scalar, value, path)

    keyword = type_keyword(t)
    if keyword == "opt":
        if value is None:
            return None
        return _convert(extract_inner(t, "opt"), value, path)

    if keyword == "vec" or t.lower() == "blob":
        inner = "nat8" if keyword != "vec" else extract_inner(t, "vec")
        if not isinstance(value, (list, tuple)):
            raise ExpectedSequenceError("Expected List for vec type", path)
        return [_convert(inner, item, f"{path}[{i}]") for i, item in enumerate(value)]

    if keyword == "record":
        return _convert_record(t, value, path)

    # Fallback: pass-through
    return value


def _convert_record(type_expr: str, value: Any, path: str) -> dict[str, Any]:
    fields = parse_record_fields(type_expr)
    if not fields:
        return {}
    out: dict[str, Any] = {}
    if isinstance(value, Mapping):
        for f in fields:
            if f.name not in value:
                raise MissingFieldError(f"Missing field {f.name}", path)
            out[f.name] = _convert(f.type_expr, value[f.name], f"{path}.{f.name}")
        return out
    if isinstance(value, (list, tuple)):
        if len(value) != len(fields):
            raise RecordShapeError(
                f"Expected {len(fields)} items for record, got {len(value)}", path
            )
        for f, item in zip(fields, value):
            out[f.name] = _convert(f.type_expr, item, f"{path}.{f.name}")
        return out
    raise RecordShapeError(f"Unsupported record input: {type(value).__name__}", path)


def _convert_scalar(scalar: ScalarType, value: Any, path: str) -> Any:
    if scalar in (ScalarType.TEXT, ScalarType.PRINCIPAL):
        return _as_text(value)
    if scalar is ScalarType.BOOL:
        return _as_bool(value, path)
    if scalar.is_float:
        return _as_float(value, path)
    if scalar.is_unbounded:
        return _as_big_integer(value, path)
    return _as_int(value, path)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _as_bool(value: Any, path: str) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).lower()
    if s == "true":
        return True
    if s == "false":
        return False
    raise InvalidBooleanError(f"Invalid bool: {value}", path)


def _as_float(value: Any, path: str) -> int | float:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    if isinstance(value, str) and _FLOAT_RE.match(value.strip()):
        result = float(value.strip())
        # "1e999" matches the pattern but overflows to inf
        if math.isfinite(result):
            return result
    raise InvalidFloatError(f"Invalid float: {value}", path)


def _as_int(value: Any, path: str) -> int:
    if isinstance(value, bool):
        raise InvalidIntegerError(f"Invalid integer: {value}", path)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    if isinstance(value, str) and _DIGITS_RE.match(value.strip()):
        try:
            return int(value.strip())
        except ValueError:
            # Longer than the interpreter's integer string conversion limit
            pass
    raise InvalidIntegerError(f"Invalid integer: {str(value)[:40]}", path)


def _exceeds_native(digits: str) -> bool:
    return len(digits.lstrip("-")) > MAX_NATIVE_DIGITS


def _as_big_integer(value: Any, path: str) -> int | str | Any:
    if value is None:
        return "0"
    if isinstance(value, bool):
        raise InvalidIntegerError(f"Invalid integer: {value}", path)
    if isinstance(value, int):
        if abs(value) < 10**MAX_NATIVE_DIGITS:
            return value
        try:
            return str(value)
        except ValueError:
            raise InvalidIntegerError("Integer is too large to convert to text", path) from None
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidIntegerError(f"Invalid integer: {value}", path)
        if value.is_integer():
            return int(value)
    s = str(value)
    if not _DIGITS_RE.match(s):
        # Not plain digits; assume it is already a valid literal
        return value
    if _exceeds_native(s):
        return s
    return int(s)


class FormModel:
    """Converts user-entered values for a method's resolved argument types."""

    def __init__(self, arg_types: list[str]) -> None:
        self.arg_types = list(arg_types)

    @property
    def supports_form(self) -> bool:
        """Return False when a type needs variant, func or service input."""
        return not any(_UNSUPPORTED_RE.search(t) for t in self.arg_types)

    def build(self, inputs: list[Any]) -> Any:
        return build_argument_list(self.arg_types, inputs)

    def build_json(self, inputs: list[Any]) -> str:
        """Build the JSON text for the provided inputs.

        - 0 args: returns an empty string
        - 1 arg: returns a single JSON value
        - N>1 args: returns a JSON array
        """
        if not self.arg_types:
            if inputs:
                raise ArgumentCountError(f"Expected 0 inputs, got {len(inputs)}")
            return ""
        value = self.build(inputs)
        try:
            return json.dumps(value, separators=(",", ":"), allow_nan=False)
        except ValueError as e:
            # NaN, Infinity or an over-long int left in a passed-through value
            raise CandidError(str(e)) from None
