"""Lexical analysis for the Monkey language: converts raw source text into a stream of Tokens.

The lexer never raises. Characters it does not understand become ILLEGAL tokens, and reporting them is left to the
parser. Once the end of input is reached, every further call to next_token returns an EOF token.
"""

from string import ascii_letters, digits, whitespace

from monkey.syntax.token import Token, TokenKind, lookup_ident


class Lexer:
    """Single-pass lexer over a source string with one character of lookahead."""
    EOF_LITERAL = ""

    SINGLE = {
        "=": TokenKind.ASSIGN,
        "+": TokenKind.PLUS,
        "-": TokenKind.MINUS,
        "!": TokenKind.BANG,
        "*": TokenKind.ASTERISK,
        "/": TokenKind.SLASH,
        "<": TokenKind.LT,
        ">": TokenKind.GT,
        ",": TokenKind.COMMA,
        ";": TokenKind.SEMICOLON,
        ":": TokenKind.COLON,
        "(": TokenKind.LPAREN,
        ")": TokenKind.RPAREN,
        "{": TokenKind.LBRACE,
        "}": TokenKind.RBRACE,
        "[": TokenKind.LBRACKET,
        "]": TokenKind.RBRACKET,
    }
    DOUBLE = {
        "==": TokenKind.EQ,
        "!=": TokenKind.NOT_EQ,
    }

    def __init__(self, source):
        self.source = source
        self.position = 0

    @staticmethod
    def _is_letter(char):
        return char != "" and (char in ascii_letters or char == "_")

    @staticmethod
    def _is_digit(char):
        return char != "" and char in digits

    def _current_char(self):
        if self.position >= len(self.source):
            return Lexer.EOF_LITERAL
        return self.source[self.position]

    def _peek_char(self):
        if self.position + 1 >= len(self.source):
            return Lexer.EOF_LITERAL
        return self.source[self.position + 1]

    def _skip_whitespace(self):
        while self._current_char() != "" and self._current_char() in whitespace:
            self.position += 1

    def _read_while(self, predicate):
        """Consumes the maximal run of characters satisfying predicate and returns it."""
        start = self.position
        while predicate(self._current_char()):
            self.position += 1
        return self.source[start:self.position]

    def _read_string(self):
        """Reads a string literal starting at the opening quote. No escape sequences are processed."""
        start = self.position
        end = self.source.find('"', start + 1)

        if end == -1:
            self.position = len(self.source)
            return Token(TokenKind.ILLEGAL, self.source[start:])

        self.position = end + 1
        return Token(TokenKind.STRING, self.source[start + 1:end])

    def next_token(self):
        """Returns the next Token and advances past it."""
        self._skip_whitespace()
        char = self._current_char()

        if char == Lexer.EOF_LITERAL:
            return Token(TokenKind.EOF, Lexer.EOF_LITERAL)

        pair = char + self._peek_char()
        if pair in Lexer.DOUBLE:
            self.position += 2
            return Token(Lexer.DOUBLE[pair], pair)

        if char in Lexer.SINGLE:
            self.position += 1
            return Token(Lexer.SINGLE[char], char)

        if char == '"':
            return self._read_string()

        if Lexer._is_letter(char):
            ident = self._read_while(lambda c: Lexer._is_letter(c) or Lexer._is_digit(c))
            return Token(lookup_ident(ident), ident)

        if Lexer._is_digit(char):
            return Token(TokenKind.INT, self._read_while(Lexer._is_digit))

        self.position += 1
        return Token(TokenKind.ILLEGAL, char)

    def __iter__(self):
        """Yields tokens up to and including the first EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return
