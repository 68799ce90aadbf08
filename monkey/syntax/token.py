"""Token vocabulary for the Monkey language. Tokens are produced by the lexer and consumed by the parser; only the
literal text of leaf tokens survives into the AST.
"""

import enum
from dataclasses import dataclass


class TokenKind(enum.Enum):
    """Closed set of token kinds. Values are what shows up in parser error messages."""
    ILLEGAL = "ILLEGAL"  # character (or unterminated string) the lexer does not understand
    EOF = "EOF"          # end of input, repeated forever once reached

    # identifiers + literals
    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

    # operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    EQ = "=="
    NOT_EQ = "!="
    LT = "<"
    GT = ">"

    # delimiters
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    NULL = "NULL"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self):
        return self.value


KEYWORDS = {
    "fn": TokenKind.FUNCTION,
    "let": TokenKind.LET,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "null": TokenKind.NULL,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "return": TokenKind.RETURN,
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    literal: str

    def __str__(self):
        return f"{self.kind}('{self.literal}')"


def lookup_ident(ident):
    """Returns keyword kind of ident, or IDENT if ident is not a keyword."""
    return KEYWORDS.get(ident, TokenKind.IDENT)
