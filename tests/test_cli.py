"""Tests for the candid-forms command line."""

import io
import json

import pytest

from candid_forms.cli import main

SERVICE_DID = """
type Range = record { start : nat64; length : nat64 };
service : {
    greet : (text) -> (text) query;
    read : (Range) -> (blob) query;
    transfer : (principal, nat) -> ();
}
"""


@pytest.fixture
def did_file(tmp_path):
    path = tmp_path / "service.did"
    path.write_text(SERVICE_DID)
    return str(path)


class TestCli:
    """Tests for each subcommand."""

    def test_methods(self, did_file, capsys):
        """Test listing method signatures."""
        assert main(["methods", did_file]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "greet : (text) -> (text) query"
        assert out[2] == "transfer : (principal, nat) -> ()"

    def test_resolve(self, did_file, capsys):
        """Test resolving a type expression through aliases."""
        assert main(["resolve", did_file, "opt Range"]) == 0
        assert capsys.readouterr().out.strip() == "opt record { start : nat64; length : nat64 }"

    def test_resolve_strict_unknown(self, did_file, capsys):
        """Test that strict resolution reports an unknown name."""
        assert main(["resolve", did_file, "Missing", "--strict"]) == 1
        assert "Type 'Missing' not found" in capsys.readouterr().err

    def test_example(self, did_file, capsys):
        """Test printing an example argument."""
        assert main(["example", did_file, "read"]) == 0
        assert json.loads(capsys.readouterr().out) == {"start": 0, "length": 0}

    def test_validate_ok(self, did_file, capsys):
        """Test validating well-formed arguments."""
        assert main(["validate", did_file, "greet", '"hi"']) == 0
        assert capsys.readouterr().out.strip() == "OK"

    def test_validate_errors(self, did_file, capsys):
        """Test that validation failures exit with status 2."""
        assert main(["validate", did_file, "greet", "5"]) == 2
        assert capsys.readouterr().out.strip() == "(root) expected string"

    def test_validate_stdin(self, did_file, capsys, monkeypatch):
        """Test reading JSON arguments from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO('["aaaaa-aa", 5]'))
        assert main(["validate", did_file, "transfer"]) == 0

    def test_build(self, did_file, capsys):
        """Test building canonical arguments from raw values."""
        assert main(["build", did_file, "transfer", "aaaaa-aa", "100"]) == 0
        assert json.loads(capsys.readouterr().out) == ["aaaaa-aa", 100]

    def test_build_count_mismatch(self, did_file, capsys):
        """Test that a missing value is reported as an error."""
        assert main(["build", did_file, "transfer", "aaaaa-aa"]) == 1
        assert "Expected 2 inputs, got 1" in capsys.readouterr().err

    def test_compose(self, capsys):
        """Test composing an argument tuple."""
        assert main(["compose", "42", '"hi"']) == 0
        assert capsys.readouterr().out.strip() == '(42, "hi")'

    def test_unknown_method(self, did_file, capsys):
        """Test that an unknown method is reported."""
        assert main(["example", did_file, "nope"]) == 1
        assert "Method 'nope' not found" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        """Test that a missing .did file is reported."""
        assert main(["methods", str(tmp_path / "absent.did")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_syntax_error(self, tmp_path, capsys):
        """Test that a malformed .did file is reported."""
        path = tmp_path / "bad.did"
        path.write_text("service : { greet : (text) -> ; }")
        assert main(["methods", str(path)]) == 1
        assert "Syntax error" in capsys.readouterr().err
