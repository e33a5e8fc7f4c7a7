"""Parsing module for Candid interface source and type fragments."""

from candid_forms.parsing.fragments import (
    extract_inner,
    parse_record_fields,
    parse_variant_cases,
    split_top_level,
)
from candid_forms.parsing.idl_lexer import IdlLexer
from candid_forms.parsing.idl_parser import InterfaceParser, ParsedInterface, parse_interface

__all__ = [
    "IdlLexer",
    "InterfaceParser",
    "ParsedInterface",
    "extract_inner",
    "parse_interface",
    "parse_record_fields",
    "parse_variant_cases",
    "split_top_level",
]
