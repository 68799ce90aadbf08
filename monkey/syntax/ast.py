"""Abstract syntax tree for the Monkey language.

Formally, the grammar accepted by the parser can be loosely defined as

```
<program>    ::= <statement>*
<statement>  ::= "let" <ident> "=" <expr> ";"?
               | "return" <expr> ";"?
               | <expr> ";"?
<block>      ::= "{" <statement>* "}"
<expr>       ::= <ident> | <int> | <string> | "true" | "false" | "null"
               | <prefix_op> <expr>                        ; "!" and "-"
               | <expr> <infix_op> <expr>                  ; precedence climbing, see parser.py
               | "(" <expr> ")"
               | "if" "(" <expr> ")" <block> ("else" <block>)?
               | "fn" "(" (<ident> ("," <ident>)*)? ")" <block>
               | <expr> "(" (<expr> ("," <expr>)*)? ")"     ; call
               | "[" (<expr> ("," <expr>)*)? "]"            ; array
               | <expr> "[" <expr> "]"                      ; index
               | "{" (<expr> ":" <expr> ("," <expr> ":" <expr>)*)? "}"
```

Every node renders back to canonical source text through str(). Operator applications are fully parenthesized, so the
rendering of a tree re-parses to an equal tree. Nodes are dataclasses and compare structurally.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


class Node(ABC):
    """Superclass of every AST node."""

    @abstractmethod
    def token_literal(self):
        """Literal text of the token that defines this node."""

    @abstractmethod
    def __str__(self):
        """Canonical source text of this node."""


class Statement(Node):
    """Node that can appear directly in a program or block."""


class Expression(Node):
    """Node that produces a value."""


def join_statements(statements):
    """Renders statements separated by spaces. Expression statements that are followed by another statement get a
    trailing ';', otherwise re-parsing could fuse them with the next statement (e.g. `f` followed by `(-x)`).
    """
    rendered = []
    for idx, stmt in enumerate(statements):
        text = str(stmt)
        if isinstance(stmt, ExpressionStatement) and idx < len(statements) - 1:
            text += ";"
        rendered.append(text)
    return " ".join(rendered)


# ---------------------------------------------------------------------------------------------------------------------
# expressions

@dataclass
class Identifier(Expression):
    name: str

    def token_literal(self):
        return self.name

    def __str__(self):
        return self.name


@dataclass
class IntegerLiteral(Expression):
    value: int

    def token_literal(self):
        return str(self.value)

    def __str__(self):
        return str(self.value)


@dataclass
class StringLiteral(Expression):
    value: str

    def token_literal(self):
        return self.value

    def __str__(self):
        return f'"{self.value}"'


@dataclass
class BooleanLiteral(Expression):
    value: bool

    def token_literal(self):
        return "true" if self.value else "false"

    def __str__(self):
        return self.token_literal()


@dataclass
class NullLiteral(Expression):

    def token_literal(self):
        return "null"

    def __str__(self):
        return "null"


@dataclass
class PrefixExpression(Expression):
    operator: str
    operand: Expression

    def token_literal(self):
        return self.operator

    def __str__(self):
        return f"({self.operator}{self.operand})"


@dataclass
class InfixExpression(Expression):
    operator: str
    left: Expression
    right: Expression

    def token_literal(self):
        return self.operator

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class IfExpression(Expression):
    condition: Expression
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None

    def token_literal(self):
        return "if"

    def __str__(self):
        result = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            result += f" else {self.alternative}"
        return result


@dataclass
class FunctionLiteral(Expression):
    parameters: List[Identifier]
    body: "BlockStatement"

    def token_literal(self):
        return "fn"

    def __str__(self):
        return f"fn({', '.join(str(param) for param in self.parameters)}) {self.body}"


@dataclass
class CallExpression(Expression):
    callee: Expression
    arguments: List[Expression] = field(default_factory=list)

    def token_literal(self):
        return "("

    def __str__(self):
        return f"{self.callee}({', '.join(str(arg) for arg in self.arguments)})"


@dataclass
class ArrayLiteral(Expression):
    elements: List[Expression] = field(default_factory=list)

    def token_literal(self):
        return "["

    def __str__(self):
        return f"[{', '.join(str(element) for element in self.elements)}]"


@dataclass
class IndexExpression(Expression):
    collection: Expression
    index: Expression

    def token_literal(self):
        return "["

    def __str__(self):
        return f"({self.collection}[{self.index}])"


@dataclass
class HashLiteral(Expression):
    pairs: List[Tuple[Expression, Expression]] = field(default_factory=list)

    def token_literal(self):
        return "{"

    def __str__(self):
        return "{" + ", ".join(f"{key}: {value}" for key, value in self.pairs) + "}"


# ---------------------------------------------------------------------------------------------------------------------
# statements

@dataclass
class LetStatement(Statement):
    name: Identifier
    value: Expression

    def token_literal(self):
        return "let"

    def __str__(self):
        return f"let {self.name} = {self.value};"


@dataclass
class ReturnStatement(Statement):
    value: Expression

    def token_literal(self):
        return "return"

    def __str__(self):
        return f"return {self.value};"


@dataclass
class ExpressionStatement(Statement):
    expression: Expression

    def token_literal(self):
        return self.expression.token_literal()

    def __str__(self):
        return str(self.expression)


@dataclass
class BlockStatement(Statement):
    statements: List[Statement] = field(default_factory=list)

    def token_literal(self):
        return "{"

    def __str__(self):
        if not self.statements:
            return "{ }"
        return f"{{ {join_statements(self.statements)} }}"


@dataclass
class Program(Node):
    """Root of every parsed tree."""
    statements: List[Statement] = field(default_factory=list)

    def token_literal(self):
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self):
        return join_statements(self.statements)
