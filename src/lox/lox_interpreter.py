"""
Tree-walking evaluator for Lox expressions.

Values are plain Python objects, one per dynamic type:

    nil     → None
    boolean → bool
    number  → float (every number, integral or not)
    string  → str

Every operator checks the dynamic types of its operands before using them and
raises `LoxRuntimeError`, carrying the operator token, when they do not fit.
Evaluation has no side effects and keeps no state between calls.
"""

from __future__ import annotations

import math
from typing import Union

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
from lox.lox_constants import TokenType
from lox.lox_errors import LoxRuntimeError
from lox.lox_lexer import Token

LoxValue = Union[None, bool, float, str]


def is_number(value: object) -> bool:
    # bool subclasses int
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: LoxValue) -> bool:
    """nil and false are falsey; every other value is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: LoxValue, b: LoxValue) -> bool:
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    if is_number(a) and is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    return a == b


def format_value(value: LoxValue) -> str:
    """Render a value for diagnostics: strings quoted, everything else as printed."""
    if isinstance(value, str):
        return '"' + value + '"'
    return stringify(value)


def stringify(value: LoxValue) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        num = float(value)
        if math.isnan(num):
            return "nan"
        if math.isinf(num):
            return "inf" if num > 0 else "-inf"
        if num == 0 and math.copysign(1.0, num) < 0:
            return "-0"
        if num.is_integer():
            return str(int(num))
        return repr(num)
    return str(value)


class Interpreter:
    """Evaluates expression trees to Lox values.

    Implements every method of `ExprVisitor`. Nodes that need an environment
    (variables, calls, property access, `this`/`super`) are rejected with a
    `LoxRuntimeError` at their token.
    """

    def evaluate(self, expr: Expr) -> LoxValue:
        return expr.accept(self)

    def visit_literal_expr(self, expr: Literal) -> LoxValue:
        value = expr.value
        if is_number(value):
            return float(value)
        return value

    def visit_grouping_expr(self, expr: Grouping) -> LoxValue:
        return self.evaluate(expr.expression)

    def visit_unary_expr(self, expr: Unary) -> LoxValue:
        right = self.evaluate(expr.right)

        if expr.operator.type == TokenType.BANG:
            return not is_truthy(right)
        if expr.operator.type == TokenType.MINUS:
            self.check_number_operand(expr.operator, right)
            return -float(right)  # type: ignore[arg-type]

        raise LoxRuntimeError(
            f"Unknown unary operator '{expr.operator.lexeme}'.", expr.operator
        )

    def visit_binary_expr(self, expr: Binary) -> LoxValue:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op = expr.operator
        t = op.type

        if t == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if t == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if t == TokenType.PLUS:
            if is_number(left) and is_number(right):
                return float(left) + float(right)  # type: ignore[arg-type]
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise self.operands_error(op, left, right)

        if t in _ARITHMETIC or t in _COMPARISON:
            self.check_number_operands(op, left, right)
            a = float(left)  # type: ignore[arg-type]
            b = float(right)  # type: ignore[arg-type]
            if t in _COMPARISON:
                return _COMPARISON[t](a, b)
            return _ARITHMETIC[t](a, b)

        raise LoxRuntimeError(f"Unknown binary operator '{op.lexeme}'.", op)

    def visit_ternary_expr(self, expr: Ternary) -> LoxValue:
        if is_truthy(self.evaluate(expr.condition)):
            return self.evaluate(expr.true_branch)
        return self.evaluate(expr.false_branch)

    def visit_logical_expr(self, expr: Logical) -> LoxValue:
        left = self.evaluate(expr.left)

        if expr.operator.type == TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right)

    def visit_variable_expr(self, expr: Variable) -> LoxValue:
        raise self.unsupported("Variable access", expr.name)

    def visit_assign_expr(self, expr: Assign) -> LoxValue:
        raise self.unsupported("Assignment", expr.name)

    def visit_call_expr(self, expr: Call) -> LoxValue:
        raise self.unsupported("Function call", expr.paren)

    def visit_get_expr(self, expr: Get) -> LoxValue:
        raise self.unsupported("Property access", expr.name)

    def visit_set_expr(self, expr: Set) -> LoxValue:
        raise self.unsupported("Property assignment", expr.name)

    def visit_this_expr(self, expr: This) -> LoxValue:
        raise self.unsupported("'this'", expr.keyword)

    def visit_super_expr(self, expr: Super) -> LoxValue:
        raise self.unsupported("'super'", expr.keyword)

    # Operand checks

    def check_number_operand(self, operator: Token, operand: LoxValue) -> None:
        if is_number(operand):
            return
        raise LoxRuntimeError(
            f"Invalid operation: operator '{operator.lexeme}' not defined on "
            f"{format_value(operand)}",
            operator,
        )

    def check_number_operands(
        self, operator: Token, left: LoxValue, right: LoxValue
    ) -> None:
        if is_number(left) and is_number(right):
            return
        raise self.operands_error(operator, left, right)

    def operands_error(
        self, operator: Token, left: LoxValue, right: LoxValue
    ) -> LoxRuntimeError:
        return LoxRuntimeError(
            f"Invalid operation: operator '{operator.lexeme}' not defined on "
            f"{format_value(left)} and {format_value(right)}",
            operator,
        )

    def unsupported(self, what: str, token: Token) -> LoxRuntimeError:
        return LoxRuntimeError(
            f"{what} is not supported in expression evaluation.", token
        )


def _divide(a: float, b: float) -> float:
    # Python raises on float division by zero; Lox follows IEEE-754
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


_ARITHMETIC = {
    TokenType.MINUS: lambda a, b: a - b,
    TokenType.STAR: lambda a, b: a * b,
    TokenType.SLASH: _divide,
}

_COMPARISON = {
    TokenType.GREATER: lambda a, b: a > b,
    TokenType.GREATER_EQUAL: lambda a, b: a >= b,
    TokenType.LESS: lambda a, b: a < b,
    TokenType.LESS_EQUAL: lambda a, b: a <= b,
}


def evaluate(expr: Expr) -> LoxValue:
    return Interpreter().evaluate(expr)


__all__ = [
    "Interpreter",
    "LoxValue",
    "evaluate",
    "format_value",
    "is_equal",
    "is_truthy",
    "stringify",
]
