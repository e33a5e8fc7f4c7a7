"""Tests for textual Candid literal composition."""

import pytest

from candid_forms.errors import ArgumentCountError, MissingFieldError, RecordShapeError
from candid_forms.literals import (
    build_record_from_dynamic,
    build_record_literal,
    compose_args,
    compose_single_record_arg,
    format_literal,
)
from candid_forms.types import FieldSpec

RANGE_FIELDS = [FieldSpec("start", "nat64"), FieldSpec("length", "nat64")]


class TestComposeArgs:
    """Tests for tuple composition."""

    def test_empty(self):
        """Test composing no values."""
        assert compose_args([]) == "()"
        assert compose_args(["  "]) == "()"

    def test_values(self):
        """Test composing values."""
        assert compose_args(["42"]) == "(42)"
        assert compose_args(["42", '"hi"']) == '(42, "hi")'

    def test_blank_values_dropped(self):
        """Test that blank values are dropped."""
        assert compose_args([" 1 ", "", "2"]) == "(1, 2)"


class TestFormatLiteral:
    """Tests for per-type literal formatting."""

    def test_text_quoted(self):
        """Test quoting text."""
        assert format_literal("text", "hello") == '"hello"'
        assert format_literal("text", 'say "hi"') == '"say \\"hi\\""'

    def test_text_already_quoted(self):
        """Test that quoted text is kept."""
        assert format_literal("text", '"hello"') == '"hello"'

    def test_number_passes_through(self):
        """Test that numbers are passed through."""
        assert format_literal("nat64", " 10 ") == "10"

    def test_principal(self):
        """Test principal literals."""
        assert format_literal("principal", "aaaaa-aa") == 'principal "aaaaa-aa"'

    def test_bool(self):
        """Test boolean literals."""
        assert format_literal("bool", "TRUE") == "true"

    def test_opt(self):
        """Test opt literals."""
        assert format_literal("opt text", "") == "null"
        assert format_literal("opt text", "x") == 'opt "x"'


class TestRecordLiterals:
    """Tests for record literal builders."""

    def test_build_record_literal(self):
        """Test building a record literal."""
        rec = build_record_literal(RANGE_FIELDS, ["10", "25"])
        assert rec == "record { start = 10 : nat64; length = 25 : nat64 }"

    def test_text_field(self):
        """Test a record literal with a text field."""
        rec = build_record_literal([FieldSpec("name", "text")], ["bob"])
        assert rec == 'record { name = "bob" : text }'

    def test_count_mismatch(self):
        """Test that a value count mismatch is rejected."""
        with pytest.raises(ArgumentCountError):
            build_record_literal(RANGE_FIELDS, ["10"])

    def test_blank_value(self):
        """Test that a blank field value is rejected."""
        with pytest.raises(MissingFieldError):
            build_record_literal(RANGE_FIELDS, ["10", " "])

    def test_single_record_arg(self):
        """Test wrapping a record in an argument tuple."""
        args = compose_single_record_arg(RANGE_FIELDS, ["0", "100"])
        assert args == "(record { start = 0 : nat64; length = 100 : nat64 })"

    def test_from_list(self):
        """Test building a record from a list."""
        rec = build_record_from_dynamic(RANGE_FIELDS, [0, 10])
        assert rec == "record { start = 0 : nat64; length = 10 : nat64 }"

    def test_from_named_mapping(self):
        """Test building a record from a mapping by name."""
        rec = build_record_from_dynamic(RANGE_FIELDS, {"length": 10, "start": 0})
        assert rec == "record { start = 0 : nat64; length = 10 : nat64 }"

    def test_from_positional_mapping(self):
        """Test building a record from a mapping by position."""
        rec = build_record_from_dynamic(RANGE_FIELDS, {"0": 0, "1": 10})
        assert "start = 0" in rec and "length = 10" in rec

    def test_from_mapping_missing(self):
        """Test that a missing mapping key is rejected."""
        with pytest.raises(MissingFieldError):
            build_record_from_dynamic(RANGE_FIELDS, {"start": 0})

    def test_from_unsupported(self):
        """Test that unsupported input is rejected."""
        with pytest.raises(RecordShapeError):
            build_record_from_dynamic(RANGE_FIELDS, 5)
