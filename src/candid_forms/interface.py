"""A parsed Candid interface and per-method argument forms."""

from __future__ import annotations

from typing import Any

from candid_forms.form_model import FormModel
from candid_forms.json_example import examples
from candid_forms.parsing.idl_parser import ParsedInterface, parse_interface
from candid_forms.resolver import TypeResolver
from candid_forms.types import MethodInfo
from candid_forms.validate import ValidationResult, validate_json_args


class MethodForm:
    """Build, validate and preview arguments for one method."""

    def __init__(self, method: MethodInfo, resolver: TypeResolver, *, strict: bool = False) -> None:
        self.method = method
        self.arg_types = resolver.resolve_arg_types(method.args, strict=strict)
        self.model = FormModel(self.arg_types)

    @property
    def supports_form(self) -> bool:
        return self.model.supports_form

    def example(self) -> str:
        return examples(self.arg_types)

    def validate(self, json_text: str, *, strict_variants: bool = False) -> ValidationResult:
        return validate_json_args(self.arg_types, json_text, strict_variants=strict_variants)

    def build(self, inputs: list[Any]) -> Any:
        return self.model.build(inputs)

    def build_json(self, inputs: list[Any]) -> str:
        return self.model.build_json(inputs)


class CandidInterface:
    """Methods of a ``.did`` source together with its alias table."""

    def __init__(self, parsed: ParsedInterface, resolver: TypeResolver) -> None:
        self.parsed = parsed
        self.resolver = resolver

    @classmethod
    def from_source(cls, source: str) -> CandidInterface:
        return cls(parse_interface(source), TypeResolver(source))

    @property
    def methods(self) -> list[MethodInfo]:
        return list(self.parsed.methods)

    def method(self, name: str) -> MethodInfo:
        found = self.parsed.method(name)
        if found is None:
            raise KeyError(f"Method '{name}' not found")
        return found

    def form(self, name: str, *, strict: bool = False) -> MethodForm:
        return MethodForm(self.method(name), self.resolver, strict=strict)
