"""Lexer for Candid interface-description source."""

import ply.lex as lex


class IdlLexer:
    """Lexer for tokenizing Candid IDL text."""

    # Reserved keywords
    reserved = {
        "type": "TYPE",
        "import": "IMPORT",
        "service": "SERVICE",
        "func": "FUNC",
        "opt": "OPT",
        "vec": "VEC",
        "record": "RECORD",
        "variant": "VARIANT",
        "query": "QUERY",
        "composite_query": "COMPOSITE_QUERY",
        "oneway": "ONEWAY",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "NUMBER",
        "TEXT",
        "LBRACE",
        "RBRACE",
        "LPAREN",
        "RPAREN",
        "LANGLE",
        "RANGLE",
        "COLON",
        "SEMI",
        "COMMA",
        "EQUALS",
        "ARROW",
    ] + list(reserved.values())

    # Simple tokens
    t_LBRACE = r"\{"
    t_RBRACE = r"\}"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_LANGLE = r"<"
    t_RANGLE = r">"
    t_COLON = r":"
    t_SEMI = r";"
    t_COMMA = r","
    t_EQUALS = r"="
    t_ARROW = r"->"

    # Ignored characters (spaces, tabs, carriage returns)
    t_ignore = " \t\r"

    # Line comments
    t_ignore_LINE_COMMENT = r"//[^\n]*"

    def __init__(self, skip_illegal: bool = False) -> None:
        self.lexer: lex.Lexer = None  # type: ignore
        self.skip_illegal = skip_illegal
        self.skipped: list[int] = []

    def t_BLOCK_COMMENT(self, t: lex.LexToken) -> None:
        r"/\*(.|\n)*?\*/"
        t.lexer.lineno += t.value.count("\n")

    def t_TEXT(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"\\\n]|\\.)*"'
        return t

    def t_NUMBER(self, t: lex.LexToken) -> lex.LexToken:
        r"\d+"
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        # Check if it's a reserved word
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        if self.skip_illegal:
            self.skipped.append(t.lexpos)
            t.lexer.skip(1)
            return
        raise SyntaxError(
            f"Illegal character '{t.value[0]}' at line {t.lineno} (position {t.lexpos})"
        )

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.skipped = []
        self.lexer.lineno = 1
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
