"""Data model for Candid type expressions and interface methods."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


class ScalarType(Enum):
    """Built-in scalar types understood by the converter and validator."""

    TEXT = "text"
    BOOL = "bool"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    PRINCIPAL = "principal"
    NAT = "nat"
    INT = "int"
    NAT8 = "nat8"
    NAT16 = "nat16"
    NAT32 = "nat32"
    NAT64 = "nat64"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"

    @property
    def is_float(self) -> bool:
        return self in (ScalarType.FLOAT32, ScalarType.FLOAT64)

    @property
    def is_unbounded(self) -> bool:
        """Return whether this is the arbitrary-precision ``nat`` or ``int``."""
        return self in (ScalarType.NAT, ScalarType.INT)

    @property
    def is_fixed_width(self) -> bool:
        return self.bit_width is not None

    @property
    def is_signed(self) -> bool:
        return self.value.startswith("int")

    @property
    def bit_width(self) -> int | None:
        """Return the width in bits for ``nat8``..``int64``, else None."""
        widths = {
            ScalarType.NAT8: 8,
            ScalarType.NAT16: 16,
            ScalarType.NAT32: 32,
            ScalarType.NAT64: 64,
            ScalarType.INT8: 8,
            ScalarType.INT16: 16,
            ScalarType.INT32: 32,
            ScalarType.INT64: 64,
        }
        return widths.get(self)


# Mapping from lowercase type names to ScalarType values
SCALAR_TYPE_NAMES: dict[str, ScalarType] = {st.value: st for st in ScalarType}

# Compound keywords that open a structured type expression
COMPOUND_KEYWORDS = ("opt", "vec", "record", "variant", "func", "service")

# Built-in shorthands expanded by the resolver
BUILTIN_SHORTHANDS: dict[str, str] = {"blob": "vec nat8"}

_LEADING_WORD_RE = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_]*)")


def type_keyword(type_expr: str) -> str:
    """Return the lowercase leading keyword of a type expression.

    Only whole words count: ``optional_id`` yields ``optional_id``, not
    ``opt``. Returns an empty string when the expression does not start with
    an identifier.
    """
    m = _LEADING_WORD_RE.match(type_expr)
    return m.group(1).lower() if m else ""


def scalar_type(type_expr: str) -> ScalarType | None:
    """Return the ScalarType for a bare scalar expression, or None."""
    return SCALAR_TYPE_NAMES.get(type_expr.strip().lower())


def is_builtin_name(name: str) -> bool:
    lower = name.strip().lower()
    return lower in SCALAR_TYPE_NAMES or lower in BUILTIN_SHORTHANDS


@dataclass(frozen=True)
class FieldSpec:
    """A record field: its label and (unresolved or resolved) type expression."""

    name: str
    type_expr: str


@dataclass(frozen=True)
class VariantCase:
    """A variant case; ``type_expr`` is None when the case carries no value."""

    name: str
    type_expr: str | None = None


class MethodKind(Enum):
    """Invocation mode of a service method."""

    UPDATE = "update"
    QUERY = "query"
    COMPOSITE_QUERY = "composite_query"
    ONEWAY = "oneway"


@dataclass
class MethodInfo:
    """Signature of one service method, with argument types as text."""

    name: str
    kind: MethodKind = MethodKind.UPDATE
    args: list[str] = field(default_factory=list)
    rets: list[str] = field(default_factory=list)
    arg_names: list[str | None] = field(default_factory=list)

    @property
    def is_query(self) -> bool:
        return self.kind in (MethodKind.QUERY, MethodKind.COMPOSITE_QUERY)

    def signature(self) -> str:
        """Render the method as ``name : (args) -> (rets) mode``."""
        text = f"{self.name} : ({', '.join(self.args)}) -> ({', '.join(self.rets)})"
        if self.kind is not MethodKind.UPDATE:
            text += f" {self.kind.value}"
        return text
