"""Operator-precedence (Pratt) parser for the Monkey language.

Every token kind that can start an expression registers a prefix rule, and every token kind that can continue one
registers an infix rule plus a binding precedence. Precedence, lowest to highest:

```
LOWEST
EQUALS       ; == !=
LESSGREATER  ; < >
SUM          ; + -
PRODUCT      ; * /
PREFIX       ; !x -x
CALL         ; f(x) a[i]
```

The parser does not stop at the first error. A statement that fails to parse records one message in Parser.errors,
then tokens are skipped up to the next statement boundary and parsing resumes. Callers must check errors before
evaluating the returned Program.
"""

import enum

from monkey.syntax import ast
from monkey.syntax.token import TokenKind


INT64_MAX = 2 ** 63 - 1


class Precedence(enum.IntEnum):
    LOWEST = enum.auto()
    EQUALS = enum.auto()
    LESSGREATER = enum.auto()
    SUM = enum.auto()
    PRODUCT = enum.auto()
    PREFIX = enum.auto()
    CALL = enum.auto()


class ParseError(Exception):
    """Raised inside the parser to abandon the current statement. Never escapes parse_program."""


class Parser:
    """Builds a Program from a Lexer's token stream, using two tokens of lookahead (current and peek)."""
    PRECEDENCES = {
        TokenKind.EQ: Precedence.EQUALS,
        TokenKind.NOT_EQ: Precedence.EQUALS,
        TokenKind.LT: Precedence.LESSGREATER,
        TokenKind.GT: Precedence.LESSGREATER,
        TokenKind.PLUS: Precedence.SUM,
        TokenKind.MINUS: Precedence.SUM,
        TokenKind.ASTERISK: Precedence.PRODUCT,
        TokenKind.SLASH: Precedence.PRODUCT,
        TokenKind.LPAREN: Precedence.CALL,
        TokenKind.LBRACKET: Precedence.CALL,
    }

    def __init__(self, lexer):
        self.lexer = lexer
        self.errors = []

        self.cur_token = None
        self.peek_token = None
        self._open_braces = 0  # braces opened (and not closed) by the statement being parsed

        self.prefix_parse_fns = {}
        self.infix_parse_fns = {}

        self._register_prefix(TokenKind.IDENT, Parser.parse_identifier)
        self._register_prefix(TokenKind.INT, Parser.parse_integer_literal)
        self._register_prefix(TokenKind.STRING, Parser.parse_string_literal)
        self._register_prefix(TokenKind.TRUE, Parser.parse_boolean_literal)
        self._register_prefix(TokenKind.FALSE, Parser.parse_boolean_literal)
        self._register_prefix(TokenKind.NULL, Parser.parse_null_literal)
        self._register_prefix(TokenKind.BANG, Parser.parse_prefix_expression)
        self._register_prefix(TokenKind.MINUS, Parser.parse_prefix_expression)
        self._register_prefix(TokenKind.LPAREN, Parser.parse_grouped_expression)
        self._register_prefix(TokenKind.IF, Parser.parse_if_expression)
        self._register_prefix(TokenKind.FUNCTION, Parser.parse_function_literal)
        self._register_prefix(TokenKind.LBRACKET, Parser.parse_array_literal)
        self._register_prefix(TokenKind.LBRACE, Parser.parse_hash_literal)

        for kind in (TokenKind.PLUS, TokenKind.MINUS, TokenKind.ASTERISK, TokenKind.SLASH,
                     TokenKind.EQ, TokenKind.NOT_EQ, TokenKind.LT, TokenKind.GT):
            self._register_infix(kind, Parser.parse_infix_expression)
        self._register_infix(TokenKind.LPAREN, Parser.parse_call_expression)
        self._register_infix(TokenKind.LBRACKET, Parser.parse_index_expression)

        # fill cur_token and peek_token
        self._next_token()
        self._next_token()

    def _register_prefix(self, kind, parse):
        self.prefix_parse_fns[kind] = parse

    def _register_infix(self, kind, parse):
        self.infix_parse_fns[kind] = parse

    # -----------------------------------------------------------------------------------------------------------------
    # token helpers

    def _next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

        if self._cur_is(TokenKind.LBRACE):
            self._open_braces += 1
        elif self._cur_is(TokenKind.RBRACE):
            self._open_braces -= 1

    def _cur_is(self, kind):
        return self.cur_token is not None and self.cur_token.kind is kind

    def _peek_is(self, kind):
        return self.peek_token.kind is kind

    def _expect_peek(self, kind):
        """Advances if the next token is of kind, raises ParseError otherwise."""
        if not self._peek_is(kind):
            raise ParseError(f"expected next token to be {kind}, got {self.peek_token.kind} instead")
        self._next_token()

    def _peek_precedence(self):
        return Parser.PRECEDENCES.get(self.peek_token.kind, Precedence.LOWEST)

    def _cur_precedence(self):
        return Parser.PRECEDENCES.get(self.cur_token.kind, Precedence.LOWEST)

    def _synchronize(self):
        """Skips to the ';' that ends the failed statement (ignoring those inside braces it opened) or to EOF."""
        while not self._cur_is(TokenKind.EOF):
            if self._cur_is(TokenKind.SEMICOLON) and self._open_braces <= 0:
                break
            self._next_token()

    # -----------------------------------------------------------------------------------------------------------------
    # statements

    def parse_program(self):
        """Parses the whole token stream. Parse errors are collected in self.errors."""
        program = ast.Program()

        while not self._cur_is(TokenKind.EOF):
            if not self._cur_is(TokenKind.SEMICOLON):
                self._open_braces = 1 if self._cur_is(TokenKind.LBRACE) else 0
                try:
                    program.statements.append(self.parse_statement())
                except ParseError as error:
                    self.errors.append(str(error))
                    self._synchronize()
            self._next_token()

        return program

    def parse_statement(self):
        if self._cur_is(TokenKind.LET):
            return self.parse_let_statement()
        if self._cur_is(TokenKind.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self):
        self._expect_peek(TokenKind.IDENT)
        name = ast.Identifier(self.cur_token.literal)

        self._expect_peek(TokenKind.ASSIGN)
        self._next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self._peek_is(TokenKind.SEMICOLON):
            self._next_token()
        return ast.LetStatement(name, value)

    def parse_return_statement(self):
        self._next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self._peek_is(TokenKind.SEMICOLON):
            self._next_token()
        return ast.ReturnStatement(value)

    def parse_expression_statement(self):
        expression = self.parse_expression(Precedence.LOWEST)

        if self._peek_is(TokenKind.SEMICOLON):
            self._next_token()
        return ast.ExpressionStatement(expression)

    def parse_block_statement(self):
        """Parses statements from the current '{' up to the matching '}'."""
        block = ast.BlockStatement()
        self._next_token()

        while not self._cur_is(TokenKind.RBRACE):
            if self._cur_is(TokenKind.EOF):
                raise ParseError("unterminated block, got EOF instead")
            if not self._cur_is(TokenKind.SEMICOLON):
                block.statements.append(self.parse_statement())
            self._next_token()

        return block

    # -----------------------------------------------------------------------------------------------------------------
    # expressions

    def parse_expression(self, precedence):
        prefix = self.prefix_parse_fns.get(self.cur_token.kind)
        if prefix is None:
            raise ParseError(f"no prefix parse function for {self.cur_token.kind} found")
        left = prefix(self)

        while not self._peek_is(TokenKind.SEMICOLON) and precedence < self._peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.kind)
            if infix is None:
                return left

            self._next_token()
            left = infix(self, left)

        return left

    def parse_identifier(self):
        return ast.Identifier(self.cur_token.literal)

    def parse_integer_literal(self):
        literal = self.cur_token.literal
        value = int(literal)
        if value > INT64_MAX:
            raise ParseError(f"could not parse {literal} as integer")
        return ast.IntegerLiteral(value)

    def parse_string_literal(self):
        return ast.StringLiteral(self.cur_token.literal)

    def parse_boolean_literal(self):
        return ast.BooleanLiteral(self._cur_is(TokenKind.TRUE))

    def parse_null_literal(self):
        return ast.NullLiteral()

    def parse_prefix_expression(self):
        operator = self.cur_token.literal
        self._next_token()
        return ast.PrefixExpression(operator, self.parse_expression(Precedence.PREFIX))

    def parse_infix_expression(self, left):
        operator = self.cur_token.literal
        precedence = self._cur_precedence()
        self._next_token()
        return ast.InfixExpression(operator, left, self.parse_expression(precedence))

    def parse_grouped_expression(self):
        self._next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        self._expect_peek(TokenKind.RPAREN)
        return expression

    def parse_if_expression(self):
        self._expect_peek(TokenKind.LPAREN)
        self._next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        self._expect_peek(TokenKind.RPAREN)

        self._expect_peek(TokenKind.LBRACE)
        consequence = self.parse_block_statement()

        alternative = None
        if self._peek_is(TokenKind.ELSE):
            self._next_token()
            self._expect_peek(TokenKind.LBRACE)
            alternative = self.parse_block_statement()

        return ast.IfExpression(condition, consequence, alternative)

    def parse_function_literal(self):
        self._expect_peek(TokenKind.LPAREN)
        parameters = self._parse_list(TokenKind.RPAREN, Parser._parse_parameter)

        self._expect_peek(TokenKind.LBRACE)
        return ast.FunctionLiteral(parameters, self.parse_block_statement())

    def _parse_parameter(self):
        if not self._cur_is(TokenKind.IDENT):
            raise ParseError(f"expected next token to be {TokenKind.IDENT}, got {self.cur_token.kind} instead")
        return ast.Identifier(self.cur_token.literal)

    def _parse_item(self):
        return self.parse_expression(Precedence.LOWEST)

    def _parse_list(self, end, parse_item):
        """Parses a comma-separated list that starts after the current token and ends with an end token. parse_item
        is called with the first token of each item as the current token.
        """
        items = []

        if self._peek_is(end):
            self._next_token()
            return items

        self._next_token()
        items.append(parse_item(self))

        while self._peek_is(TokenKind.COMMA):
            self._next_token()
            self._next_token()
            items.append(parse_item(self))

        self._expect_peek(end)
        return items

    def parse_call_expression(self, callee):
        return ast.CallExpression(callee, self._parse_list(TokenKind.RPAREN, Parser._parse_item))

    def parse_array_literal(self):
        return ast.ArrayLiteral(self._parse_list(TokenKind.RBRACKET, Parser._parse_item))

    def parse_index_expression(self, collection):
        self._next_token()
        index = self.parse_expression(Precedence.LOWEST)
        self._expect_peek(TokenKind.RBRACKET)
        return ast.IndexExpression(collection, index)

    def parse_hash_literal(self):
        pairs = []

        while not self._peek_is(TokenKind.RBRACE):
            self._next_token()
            key = self.parse_expression(Precedence.LOWEST)

            self._expect_peek(TokenKind.COLON)
            self._next_token()
            pairs.append((key, self.parse_expression(Precedence.LOWEST)))

            if not self._peek_is(TokenKind.RBRACE):
                self._expect_peek(TokenKind.COMMA)

        self._expect_peek(TokenKind.RBRACE)
        return ast.HashLiteral(pairs)
