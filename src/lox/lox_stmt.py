"""Statement nodes for the Lox language.

These nodes are data only: the front end builds `Expression` statements when
parsing scripts, and nothing here executes them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, TypeVar

from lox.lox_ast import Expr, Variable
from lox.lox_lexer import Token

R = TypeVar("R")
R_co = TypeVar("R_co", covariant=True)


class StmtVisitor(Protocol[R_co]):
    def visit_block_stmt(self, stmt: Block) -> R_co: ...

    def visit_class_stmt(self, stmt: Class) -> R_co: ...

    def visit_expression_stmt(self, stmt: Expression) -> R_co: ...

    def visit_function_stmt(self, stmt: Function) -> R_co: ...

    def visit_if_stmt(self, stmt: If) -> R_co: ...

    def visit_print_stmt(self, stmt: Print) -> R_co: ...

    def visit_return_stmt(self, stmt: Return) -> R_co: ...

    def visit_var_stmt(self, stmt: Var) -> R_co: ...

    def visit_while_stmt(self, stmt: While) -> R_co: ...


@dataclass(frozen=True)
class Stmt:
    def accept(self, visitor: StmtVisitor[R]) -> R:  # pragma: no cover
        raise NotImplementedError(f"{type(self).__name__} does not accept visitors")


@dataclass(frozen=True)
class Block(Stmt):
    statements: tuple[Stmt, ...]

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_block_stmt(self)


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_function_stmt(self)


@dataclass(frozen=True)
class Class(Stmt):
    name: Token
    superclass: Variable | None
    methods: tuple[Function, ...]

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_class_stmt(self)


@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_expression_stmt(self)


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None = None

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_if_stmt(self)


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_print_stmt(self)


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Expr | None = None

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_return_stmt(self)


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Expr | None = None

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_var_stmt(self)


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt

    def accept(self, visitor: StmtVisitor[R]) -> R:
        return visitor.visit_while_stmt(self)


__all__ = [
    "Block",
    "Class",
    "Expression",
    "Function",
    "If",
    "Print",
    "Return",
    "Stmt",
    "StmtVisitor",
    "Var",
    "While",
]
