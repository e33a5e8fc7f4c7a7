"""Tests for the Candid IDL lexer and interface parser."""

import pytest

from candid_forms.parsing.idl_lexer import IdlLexer
from candid_forms.parsing.idl_parser import parse_interface
from candid_forms.types import MethodKind


class TestIdlLexer:
    """Tests for the IDL lexer."""

    def test_tokenize_alias(self):
        """Test tokenizing an alias definition."""
        lexer = IdlLexer()
        lexer.build()

        tokens = lexer.tokenize("type Id = opt vec nat;")
        token_types = [t.type for t in tokens]

        assert token_types == ["TYPE", "IDENTIFIER", "EQUALS", "OPT", "VEC", "IDENTIFIER", "SEMI"]

    def test_arrow_token(self):
        """Test tokenizing a function arrow."""
        lexer = IdlLexer()
        lexer.build()

        token_types = [t.type for t in lexer.tokenize("(nat) -> ()")]

        assert token_types == ["LPAREN", "IDENTIFIER", "RPAREN", "ARROW", "LPAREN", "RPAREN"]

    def test_comments_ignored(self):
        """Test that comments are skipped and lines counted."""
        lexer = IdlLexer()
        lexer.build()

        tokens = lexer.tokenize("// line\ntype /* block\ncomment */ A")
        assert [t.type for t in tokens] == ["TYPE", "IDENTIFIER"]
        assert tokens[1].lineno == 3

    def test_quoted_label(self):
        """Test tokenizing a quoted label."""
        lexer = IdlLexer()
        lexer.build()

        tokens = lexer.tokenize('"my label" : nat')
        assert tokens[0].type == "TEXT"
        assert tokens[0].value == '"my label"'

    def test_illegal_character(self):
        """Test that an illegal character raises."""
        lexer = IdlLexer()
        lexer.build()

        with pytest.raises(SyntaxError):
            lexer.tokenize("type A = @nat;")

    def test_skip_illegal(self):
        """Test skipping illegal characters."""
        lexer = IdlLexer(skip_illegal=True)
        lexer.build()

        tokens = lexer.tokenize("type A = @nat;")
        assert [t.type for t in tokens] == ["TYPE", "IDENTIFIER", "EQUALS", "IDENTIFIER", "SEMI"]
        assert lexer.skipped == [9]


class TestInterfaceParser:
    """Tests for whole-interface parsing."""

    def test_methods_and_kinds(self):
        """Test method argument lists and modes."""
        parsed = parse_interface("""
            service : {
                greet: (text) -> (text) query;
                compute: (int, int) -> (int);
                inspect: () -> () composite_query;
                notify: (nat) -> () oneway;
            }
        """)
        by_name = {m.name: m for m in parsed.methods}

        assert by_name["greet"].kind is MethodKind.QUERY
        assert by_name["greet"].args == ["text"]
        assert by_name["greet"].rets == ["text"]
        assert by_name["compute"].kind is MethodKind.UPDATE
        assert by_name["compute"].args == ["int", "int"]
        assert by_name["inspect"].kind is MethodKind.COMPOSITE_QUERY
        assert by_name["inspect"].args == []
        assert by_name["notify"].kind is MethodKind.ONEWAY

    def test_method_order_preserved(self):
        """Test that methods keep declaration order."""
        parsed = parse_interface("service : { b : () -> (); a : () -> (); }")
        assert [m.name for m in parsed.methods] == ["b", "a"]

    def test_type_definitions(self):
        """Test parsing type definitions."""
        parsed = parse_interface("""
            type Range = record { start: nat64; length: nat64 };
            type Mode = variant { install; reinstall; upgrade };
            service : { get : (Range) -> (vec nat8) query; }
        """)
        assert parsed.aliases["Range"] == "record { start : nat64; length : nat64 }"
        assert parsed.aliases["Mode"] == "variant { install; reinstall; upgrade }"
        assert parsed.method("get").args == ["Range"]

    def test_named_arguments(self):
        """Test named method arguments."""
        parsed = parse_interface("service : { transfer : (to : principal, amount : nat) -> (); }")
        method = parsed.method("transfer")
        assert method.args == ["principal", "nat"]
        assert method.arg_names == ["to", "amount"]

    def test_nested_types_rendered(self):
        """Test rendering nested argument types."""
        parsed = parse_interface(
            "service : { f : (opt vec record { int; int }, vec <text>) -> (); }"
        )
        assert parsed.method("f").args == ["opt vec record { int; int }", "vec text"]

    def test_init_args_and_quoted_method(self):
        """Test init arguments and a quoted method name."""
        parsed = parse_interface('service : (nat) -> { "http_request" : () -> (); }')
        assert parsed.init_args == ["nat"]
        assert parsed.methods[0].name == "http_request"

    def test_service_alias(self):
        """Test a service declared through an alias."""
        parsed = parse_interface("""
            type Ledger = service { balance : (principal) -> (nat) query; };
            service : Ledger
        """)
        assert parsed.method("balance").kind is MethodKind.QUERY

    def test_func_alias_method(self):
        """Test a method declared through a function alias."""
        parsed = parse_interface("""
            type Handler = func (text) -> (nat) query;
            service : { handle : Handler; }
        """)
        assert parsed.method("handle").args == ["text"]
        assert parsed.method("handle").kind is MethodKind.QUERY

    def test_types_only(self):
        """Test a source with no service."""
        parsed = parse_interface("type A = nat;")
        assert parsed.methods == []
        assert parsed.aliases == {"A": "nat"}

    def test_import_ignored(self):
        """Test that imports are ignored."""
        parsed = parse_interface('import "other.did"; service : {}')
        assert parsed.methods == []

    def test_syntax_error_position(self):
        """Test the position in a syntax error."""
        with pytest.raises(SyntaxError, match=r"position 9"):
            parse_interface("type A = ;")

    def test_duplicate_type(self):
        """Test that a type defined twice is rejected."""
        with pytest.raises(SyntaxError, match="already defined"):
            parse_interface("type A = nat; type A = text;")

    def test_signature_rendering(self):
        """Test rendering a method signature."""
        parsed = parse_interface("service : { greet : (text) -> (text) query; }")
        assert parsed.methods[0].signature() == "greet : (text) -> (text) query"
