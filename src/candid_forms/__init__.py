"""Candid Forms - build, validate and preview Candid call arguments."""

from candid_forms.errors import (
    ArgumentCountError,
    CandidError,
    CyclicAliasError,
    ExpectedSequenceError,
    InvalidBooleanError,
    InvalidFloatError,
    InvalidIntegerError,
    MissingFieldError,
    RecordShapeError,
    UnresolvedTypeError,
)
from candid_forms.form_model import FormModel, build_argument_list, build_value
from candid_forms.interface import CandidInterface, MethodForm
from candid_forms.json_example import example, example_value, examples
from candid_forms.literals import (
    build_record_from_dynamic,
    build_record_literal,
    compose_args,
    compose_single_record_arg,
)
from candid_forms.parsing import parse_interface, parse_record_fields, parse_variant_cases
from candid_forms.resolver import TypeResolver, extract_aliases, resolve
from candid_forms.types import FieldSpec, MethodInfo, MethodKind, ScalarType, VariantCase
from candid_forms.validate import ValidationResult, validate, validate_json_args

__all__ = [
    # Main API
    "CandidInterface",
    "MethodForm",
    "TypeResolver",
    "FormModel",
    # Components
    "extract_aliases",
    "resolve",
    "parse_record_fields",
    "parse_variant_cases",
    "parse_interface",
    "build_value",
    "build_argument_list",
    "validate",
    "validate_json_args",
    "ValidationResult",
    "example",
    "example_value",
    "examples",
    "compose_args",
    "build_record_literal",
    "compose_single_record_arg",
    "build_record_from_dynamic",
    # Data model
    "FieldSpec",
    "VariantCase",
    "MethodInfo",
    "MethodKind",
    "ScalarType",
    # Errors
    "CandidError",
    "ArgumentCountError",
    "InvalidBooleanError",
    "InvalidFloatError",
    "InvalidIntegerError",
    "ExpectedSequenceError",
    "MissingFieldError",
    "RecordShapeError",
    "CyclicAliasError",
    "UnresolvedTypeError",
]

__version__ = "0.1.0"
