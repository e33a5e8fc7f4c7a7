"""Tests for example synthesis."""

import json

from candid_forms.json_example import SAMPLE_PRINCIPAL, example, example_value, examples


class TestExampleValue:
    """Tests for per-type example values."""

    def test_scalars(self):
        """Test scalar examples."""
        assert example_value("text") == "example"
        assert example_value("bool") is True
        assert example_value("float64") == 3.14
        assert example_value("principal") == SAMPLE_PRINCIPAL

    def test_big_integers_are_strings(self):
        """Test that unbounded integer examples are strings."""
        assert example_value("nat") == "100000000000000000000"
        assert example_value("int") == "-100000000000000000000"

    def test_fixed_width(self):
        """Test fixed-width integer examples."""
        assert example_value("nat64") == 0
        assert example_value("int16") == -1

    def test_opt_short_circuits(self):
        """Test that opt examples are null."""
        assert example_value("opt vec nat64") is None

    def test_vec(self):
        """Test vec examples."""
        assert example_value("vec text") == ["example"]
        assert example_value("blob") == [0]

    def test_record(self):
        """Test record examples."""
        value = example_value("record { to : principal; amount : nat64; memo : opt text }")
        assert value == {"to": SAMPLE_PRINCIPAL, "amount": 0, "memo": None}
        assert list(value) == ["to", "amount", "memo"]

    def test_variant_first_case(self):
        """Test that variant examples use the first case."""
        assert example_value("variant { Ok : nat; Err : text }") == {"Ok": "100000000000000000000"}
        assert example_value("variant { install; reinstall }") == {"install": None}

    def test_empty_variant(self):
        """Test the example for an empty variant."""
        assert example_value("variant {}") == {}

    def test_unknown(self):
        """Test the placeholder for an unknown type."""
        assert example_value("Mystery") == "<value for Mystery>"


class TestExampleText:
    """Tests for the rendered example literals."""

    def test_opt_literal(self):
        """Test the rendered opt example."""
        assert example("opt vec nat64") == "null"

    def test_record_pretty_printed(self):
        """Test that record examples are indented."""
        assert example("record { a : text; b : bool }") == '{\n  "a": "example",\n  "b": true\n}'

    def test_examples_none(self):
        """Test examples for no arguments."""
        assert examples([]) == ""

    def test_examples_single(self):
        """Test examples for one argument."""
        assert examples(["nat8"]) == "0"

    def test_examples_multiple(self):
        """Test examples for several arguments."""
        text = examples(["text", "vec nat8"])
        assert text.startswith("[")
        assert json.loads(text) == ["example", [0]]
