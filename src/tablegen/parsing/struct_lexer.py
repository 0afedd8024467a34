"""Lexer for annotated struct definitions."""

import ply.lex as lex


class StructLexer:
    """Lexer for tokenizing struct definitions and their attributes."""

    # Reserved keywords
    reserved = {
        "struct": "STRUCT",
        "pub": "PUB",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "INTEGER",
        "STRING",
        "SHORT_STRING",
        "HASH",
        "AT",
        "LBRACE",
        "RBRACE",
        "LBRACKET",
        "RBRACKET",
        "LPAREN",
        "RPAREN",
        "LT",
        "GT",
        "DCOLON",
        "COLON",
        "SEMI",
        "COMMA",
    ] + list(reserved.values())

    # Simple tokens
    t_HASH = r"\#"
    t_AT = r"@"
    t_LBRACE = r"\{"
    t_RBRACE = r"\}"
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_LT = r"<"
    t_GT = r">"
    t_DCOLON = r"::"
    t_COLON = r":"
    t_SEMI = r";"
    t_COMMA = r","

    # Ignored characters (spaces, tabs, carriage returns)
    t_ignore = " \t\r"

    # Line comments
    t_ignore_COMMENT = r"//[^\n]*"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"\\\n]|\\.)*"'
        return t

    def t_SHORT_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r"'([^'\\\n]|\\.)*'"
        return t

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"-?(0[xX][0-9a-fA-F]+|\d+)"
        # Keep the literal text, hex digits and all
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' (line {t.lineno})")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize and rewind the line counter."""
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
