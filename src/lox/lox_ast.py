"""
Defines the expression tree produced by the Lox parser.

Classes:
    Expr:
        Base of the closed set of expression variants. Nodes carry data only;
        behavior lives in visitors (interpreter, printer) reached through `accept`.

    ExprVisitor:
        Protocol listing one `visit_<kind>_expr` method per variant. Adding a
        variant means extending this protocol and every visitor.

Each node tracks:
    Its direct operands as fields (child expressions, operator/name tokens,
    literal values). Trees are immutable and children are always fully built
    before the parent exists.

Usage:
    tree = Binary(Literal(1.0), Token(TokenType.PLUS, "+"), Literal(2.0))
    tree.to_dict()  # plain dicts, suitable for JSON output or test assertions
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Protocol, TypeVar

from lox.lox_lexer import Token

R = TypeVar("R")
R_co = TypeVar("R_co", covariant=True)


class ExprVisitor(Protocol[R_co]):
    def visit_literal_expr(self, expr: Literal) -> R_co: ...

    def visit_grouping_expr(self, expr: Grouping) -> R_co: ...

    def visit_unary_expr(self, expr: Unary) -> R_co: ...

    def visit_binary_expr(self, expr: Binary) -> R_co: ...

    def visit_ternary_expr(self, expr: Ternary) -> R_co: ...

    def visit_variable_expr(self, expr: Variable) -> R_co: ...

    def visit_assign_expr(self, expr: Assign) -> R_co: ...

    def visit_logical_expr(self, expr: Logical) -> R_co: ...

    def visit_call_expr(self, expr: Call) -> R_co: ...

    def visit_get_expr(self, expr: Get) -> R_co: ...

    def visit_set_expr(self, expr: Set) -> R_co: ...

    def visit_this_expr(self, expr: This) -> R_co: ...

    def visit_super_expr(self, expr: Super) -> R_co: ...


def token_to_dict(tok: Token) -> dict[str, Any]:
    return {
        "type": tok.type.name,
        "lexeme": tok.lexeme,
        "line": tok.line,
        "col": tok.col,
    }


def _field_to_dict(value: Any) -> Any:
    if isinstance(value, Expr):
        return value.to_dict()
    if isinstance(value, Token):
        return token_to_dict(value)
    if isinstance(value, tuple):
        return [_field_to_dict(v) for v in value]
    return value


@dataclass(frozen=True)
class Expr:
    """Base class for every expression node."""

    kind = "expr"

    def accept(self, visitor: ExprVisitor[R]) -> R:  # pragma: no cover
        raise NotImplementedError(f"{type(self).__name__} does not accept visitors")

    def children(self) -> list[Expr]:
        """Returns the direct child expressions in source order."""
        out: list[Expr] = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Expr):
                out.append(value)
            elif isinstance(value, tuple):
                out.extend(v for v in value if isinstance(v, Expr))
        return out

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"kind": self.kind}
        for f in fields(self):
            out[f.name] = _field_to_dict(getattr(self, f.name))
        return out


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: Any

    kind = "literal"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_literal_expr(self)

    def __eq__(self, other: object) -> bool:
        # true and 1 are different literals even though Python compares them equal
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr

    kind = "grouping"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_grouping_expr(self)


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr

    kind = "unary"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_unary_expr(self)


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr

    kind = "binary"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_binary_expr(self)


@dataclass(frozen=True)
class Ternary(Expr):
    condition: Expr
    true_branch: Expr
    false_branch: Expr

    kind = "ternary"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_ternary_expr(self)


@dataclass(frozen=True)
class Variable(Expr):
    name: Token

    kind = "variable"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_variable_expr(self)


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr

    kind = "assign"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_assign_expr(self)


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr

    kind = "logical"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_logical_expr(self)


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...] = ()

    kind = "call"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_call_expr(self)


@dataclass(frozen=True)
class Get(Expr):
    obj: Expr
    name: Token

    kind = "get"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_get_expr(self)


@dataclass(frozen=True)
class Set(Expr):
    obj: Expr
    name: Token
    value: Expr

    kind = "set"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_set_expr(self)


@dataclass(frozen=True)
class This(Expr):
    keyword: Token

    kind = "this"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_this_expr(self)


@dataclass(frozen=True)
class Super(Expr):
    keyword: Token
    method: Token

    kind = "super"

    def accept(self, visitor: ExprVisitor[R]) -> R:
        return visitor.visit_super_expr(self)


__all__ = [
    "Assign",
    "Binary",
    "Call",
    "Expr",
    "ExprVisitor",
    "Get",
    "Grouping",
    "Literal",
    "Logical",
    "Set",
    "Super",
    "Ternary",
    "This",
    "Unary",
    "Variable",
    "token_to_dict",
]
