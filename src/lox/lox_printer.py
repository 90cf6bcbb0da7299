"""
Renders Lox expression trees as fully parenthesized prefix text, and reads that
text back.

Rendering rules:
    Binary / Logical   (op left right)         e.g. (+ 1 2)
    Unary              (op right)              e.g. (- 5)
    Grouping           (group expr)
    Ternary            (?: cond then else)
    Literals           nil, true, false, 1, 2.5, "text"
    Variable / This    the bare lexeme
    Assign             (= name value)
    Call               (call callee arg ...)
    Get / Set          (get obj name), (set obj name value)
    Super              (super method)

`read_prefix` accepts the subset of that form the parser can produce
(literals, groups, unary, binary and ternary nodes), so that
`read_prefix(AstPrinter().print(tree))` rebuilds `tree` up to token positions.
"""

from __future__ import annotations

import math
import re
from typing import Any

from lox.lox_ast import (
    Assign,
    Binary,
    Call,
    Expr,
    Get,
    Grouping,
    Literal,
    Logical,
    Set,
    Super,
    Ternary,
    This,
    Unary,
    Variable,
)
from lox.lox_constants import TokenType, token_hashmap
from lox.lox_errors import ParseError
from lox.lox_lexer import Token

UNARY_OPS = {"!", "-"}
BINARY_OPS = {"==", "!=", ">", ">=", "<", "<=", "-", "+", "/", "*"}

_NUMBER_RE = re.compile(r"-?(\d+(\.\d*)?([eE][-+]?\d+)?|inf)$|nan$")


def quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def render_literal(value: Any) -> str:
    if value is None:
        return "nil"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return quote(value)
    num = float(value)
    if num == 0 and math.copysign(1.0, num) < 0:
        return "-0"
    if math.isfinite(num) and num.is_integer():
        return str(int(num))
    return repr(num)


class AstPrinter:
    """Visitor producing the prefix rendering of an expression tree."""

    def print(self, expr: Expr) -> str:
        return expr.accept(self)

    def visit_literal_expr(self, expr: Literal) -> str:
        return render_literal(expr.value)

    def visit_grouping_expr(self, expr: Grouping) -> str:
        return self.parenthesize("group", expr.expression)

    def visit_unary_expr(self, expr: Unary) -> str:
        return self.parenthesize(expr.operator.lexeme, expr.right)

    def visit_binary_expr(self, expr: Binary) -> str:
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_ternary_expr(self, expr: Ternary) -> str:
        return self.parenthesize(
            "?:", expr.condition, expr.true_branch, expr.false_branch
        )

    def visit_variable_expr(self, expr: Variable) -> str:
        return expr.name.lexeme

    def visit_assign_expr(self, expr: Assign) -> str:
        return self.parenthesize("=", expr.name.lexeme, expr.value)

    def visit_logical_expr(self, expr: Logical) -> str:
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_call_expr(self, expr: Call) -> str:
        return self.parenthesize("call", expr.callee, *expr.arguments)

    def visit_get_expr(self, expr: Get) -> str:
        return self.parenthesize("get", expr.obj, expr.name.lexeme)

    def visit_set_expr(self, expr: Set) -> str:
        return self.parenthesize("set", expr.obj, expr.name.lexeme, expr.value)

    def visit_this_expr(self, expr: This) -> str:
        return "this"

    def visit_super_expr(self, expr: Super) -> str:
        return self.parenthesize("super", expr.method.lexeme)

    def parenthesize(self, name: str, *parts: Expr | str) -> str:
        pieces = [name]
        for part in parts:
            pieces.append(part.accept(self) if isinstance(part, Expr) else part)
        return "(" + " ".join(pieces) + ")"


def print_ast(expr: Expr) -> str:
    return AstPrinter().print(expr)


class PrefixReader:
    """Reads the prefix rendering back into an expression tree.

    Attributes:
        text (str): The rendering being read.
        items (list[tuple[str, str, int]]): Scanned (kind, text, column) triples,
            where kind is "(", ")", "string" or "atom".
        position (int): Index of the next unread item.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.items = self.scan(text)
        self.position = 0

    def scan(self, text: str) -> list[tuple[str, str, int]]:
        items: list[tuple[str, str, int]] = []
        i = 0
        while i < len(text):
            ch = text[i]
            if ch.isspace():
                i += 1
            elif ch in "()":
                items.append((ch, ch, i + 1))
                i += 1
            elif ch == '"':
                start = i
                i += 1
                chars: list[str] = []
                while i < len(text) and text[i] != '"':
                    if text[i] == "\\" and i + 1 < len(text):
                        i += 1
                    chars.append(text[i])
                    i += 1
                if i >= len(text):
                    raise self.error("Unterminated string.", text[start:], start + 1)
                i += 1
                items.append(("string", "".join(chars), start + 1))
            else:
                start = i
                while i < len(text) and not text[i].isspace() and text[i] not in '()"':
                    i += 1
                items.append(("atom", text[start:i], start + 1))
        return items

    def error(self, message: str, lexeme: str, col: int) -> ParseError:
        type_ = TokenType.EOF if lexeme == "" else TokenType.ILLEGAL
        return ParseError(message, Token(type_, lexeme, None, 1, col))

    def at_end(self) -> bool:
        return self.position >= len(self.items)

    def next_item(self) -> tuple[str, str, int]:
        if self.at_end():
            raise self.error("Expect expression.", "", len(self.text) + 1)
        item = self.items[self.position]
        self.position += 1
        return item

    def read(self) -> Expr:
        expr = self.read_expr()
        if not self.at_end():
            _, text, col = self.items[self.position]
            raise self.error("Unexpected text after expression.", text, col)
        return expr

    def read_expr(self) -> Expr:
        kind, text, col = self.next_item()
        if kind == "string":
            return Literal(text)
        if kind == "atom":
            return self.read_atom(text, col)
        if kind == ")":
            raise self.error("Expect expression.", text, col)

        head_kind, head, head_col = self.next_item()
        if head_kind != "atom":
            raise self.error("Expect operator after '('.", head, head_col)
        operands: list[Expr] = []
        while not self.at_end() and self.items[self.position][0] != ")":
            operands.append(self.read_expr())
        if self.at_end():
            raise self.error("Expect ')' after expression.", "", len(self.text) + 1)
        self.position += 1
        return self.build(head, head_col, operands)

    def read_atom(self, text: str, col: int) -> Expr:
        if text == "nil":
            return Literal(None)
        if text == "true":
            return Literal(True)
        if text == "false":
            return Literal(False)
        if _NUMBER_RE.match(text):
            return Literal(float(text))
        raise self.error("Expect expression.", text, col)

    def build(self, head: str, col: int, operands: list[Expr]) -> Expr:
        arity = len(operands)
        if head == "group" and arity == 1:
            return Grouping(operands[0])
        if head == "?:" and arity == 3:
            return Ternary(operands[0], operands[1], operands[2])
        if head in UNARY_OPS and arity == 1:
            return Unary(Token(token_hashmap[head], head, None, 1, col), operands[0])
        if head in BINARY_OPS and arity == 2:
            operator = Token(token_hashmap[head], head, None, 1, col)
            return Binary(operands[0], operator, operands[1])
        raise self.error(f"Cannot build '{head}' from {arity} operand(s).", head, col)


def read_prefix(text: str) -> Expr:
    return PrefixReader(text).read()


__all__ = ["AstPrinter", "PrefixReader", "print_ast", "read_prefix", "render_literal"]
