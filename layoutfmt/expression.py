"""
Expressions embedded in attribute values.

Geometric attributes such as ``top="10-5* 4"`` hold arithmetic, and
``*Color`` attributes hold calls such as ``rgb(255,255,0)``. Both are
re-printed in one canonical spelling: ``10 - (5 * 4)``, ``rgb(255, 255, 0)``.
Values that do not parse are kept exactly as written.
"""
import re
from dataclasses import dataclass
from typing import assert_never

from layoutfmt.constants import DEFAULT_SYMBOLS, MAX_EXPRESSION_TOKENS, SymbolTables


class ExpressionError(ValueError):
    pass


@dataclass(frozen=True)
class Number:
    value: str


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class UnaryMinus:
    operand: 'Expression'


@dataclass(frozen=True)
class BinaryOp:
    op: str
    lhs: 'Expression'
    rhs: 'Expression'


@dataclass(frozen=True)
class Call:
    name: str
    args: tuple[str, ...]


Expression = Number | Identifier | UnaryMinus | BinaryOp | Call


TOKEN_PATTERN = re.compile(
    r"\s*(?:"
    r"(?P<number>(?:\d+(?:\.\d+)?|\.\d+)%?)"
    r"|(?P<identifier>[A-Za-z_][A-Za-z0-9_.]*)"
    r"|(?P<operator>[-+*/()])"
    r")"
)
CALL_PATTERN = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_.]*)\s*\((.*)\)\s*", re.DOTALL)

ADDITIVE = ("+", "-")
MULTIPLICATIVE = ("*", "/")


def tokenize(source: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    position = 0
    end = len(source.rstrip())
    while position < end:
        match = TOKEN_PATTERN.match(source, position)
        if not match or match.end() == position:
            raise ExpressionError(f"unexpected character at {position}")
        kind = match.lastgroup
        assert kind is not None
        tokens.append((kind, match.group(kind)))
        position = match.end()
        if len(tokens) > MAX_EXPRESSION_TOKENS:
            raise ExpressionError("expression too long")
    return tokens


@dataclass
class ExpressionParser:
    """
    Recursive descent over::

        sum     := product (("+" | "-") product)*
        product := unary (("*" | "/") unary)*
        unary   := "-" unary | primary
        primary := number | identifier | "(" sum ")"
    """
    tokens: list[tuple[str, str]]
    position: int = 0

    def peek(self) -> str | None:
        if self.position < len(self.tokens):
            return self.tokens[self.position][1]
        return None

    def advance(self) -> tuple[str, str]:
        if self.position >= len(self.tokens):
            raise ExpressionError("unexpected end of expression")
        token = self.tokens[self.position]
        self.position += 1
        return token

    def parse(self) -> Expression:
        node = self.parse_sum()
        if self.position != len(self.tokens):
            raise ExpressionError(f"unexpected {self.peek()!r}")
        return node

    def parse_sum(self) -> Expression:
        node = self.parse_product()
        while self.peek() in ADDITIVE:
            _, op = self.advance()
            node = BinaryOp(op, node, self.parse_product())
        return node

    def parse_product(self) -> Expression:
        node = self.parse_unary()
        while self.peek() in MULTIPLICATIVE:
            _, op = self.advance()
            node = BinaryOp(op, node, self.parse_unary())
        return node

    def parse_unary(self) -> Expression:
        if self.peek() == "-":
            self.advance()
            return UnaryMinus(self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> Expression:
        kind, text = self.advance()
        if kind == "number":
            return Number(text)
        elif kind == "identifier":
            return Identifier(text)
        elif text == "(":
            node = self.parse_sum()
            if self.peek() != ")":
                raise ExpressionError("missing closing parenthesis")
            self.advance()
            return node
        raise ExpressionError(f"unexpected {text!r}")


def parse_expression(source: str) -> Expression:
    return ExpressionParser(tokenize(source)).parse()


def split_arguments(source: str) -> list[str]:
    args: list[str] = []
    depth = 0
    current = ""
    for c in source:
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
            if depth < 0:
                raise ExpressionError("unbalanced parentheses")
        elif c == "," and depth == 0:
            args.append(current)
            current = ""
            continue
        current += c
    if depth != 0:
        raise ExpressionError("unbalanced parentheses")
    args.append(current)
    return args


def parse_call(source: str) -> Call:
    match = CALL_PATTERN.fullmatch(source)
    if not match:
        raise ExpressionError("not a call")
    name, inner = match.groups()
    args = tuple(arg.strip() for arg in split_arguments(inner))
    if not all(args):
        raise ExpressionError("empty argument")
    return Call(name, args)


def print_operand(node: Expression) -> str:
    if isinstance(node, BinaryOp):
        return f"({print_expression(node)})"
    return print_expression(node)


def print_expression(node: Expression) -> str:
    if isinstance(node, Number):
        return node.value
    elif isinstance(node, Identifier):
        return node.name
    elif isinstance(node, UnaryMinus):
        return f"-{print_operand(node.operand)}"
    elif isinstance(node, BinaryOp):
        return f"{print_operand(node.lhs)} {node.op} {print_operand(node.rhs)}"
    elif isinstance(node, Call):
        return f"{node.name}({', '.join(node.args)})"
    else:
        assert_never(node)


def is_braced(value: str) -> bool:
    stripped = value.strip()
    return len(stripped) >= 2 and stripped[0] == "{" and stripped[-1] == "}"


def format_attribute_value(
    name: str,
    value: str,
    symbols: SymbolTables = DEFAULT_SYMBOLS,
) -> str:
    braced = is_braced(value)
    is_color = name.endswith("Color")
    if not (braced or is_color or name in symbols.expression_attributes):
        return value

    source = value.strip()[1:-1] if braced else value
    try:
        if is_color:
            expression: Expression = parse_call(source)
        else:
            expression = parse_expression(source)
    except ExpressionError:
        return value

    formatted = print_expression(expression)
    if braced:
        return "{" + formatted + "}"
    return formatted
