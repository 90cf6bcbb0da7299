"""
Structured errors raised by the Lox front end.

Classes:
    LoxError: Base class carrying a message and, where available, the offending token.
    ParseError: Raised while deriving an expression from the token stream.
    LoxRuntimeError: Raised when an operator is applied to unsupported operand types.

Both channels render the same way, so callers can report them uniformly:

    [Pos 1:3] Error at '+': Invalid operation: operator '+' not defined on 1 and "a"
    [Pos 1:7] Error at end: Expect expression.
"""

from lox.lox_constants import TokenType
from lox.lox_lexer import Token


class LoxError(Exception):
    """Base class for Lox diagnostics.

    Attributes:
        message (str): Human-readable description of the failure.
        token (Token | None): The token the failure is attributed to.
    """

    def __init__(self, message: str, token: Token | None = None):
        super().__init__(message)
        self.message = message
        self.token = token

    def __str__(self) -> str:
        tok = self.token
        if tok is None:
            return self.message
        if tok.type == TokenType.EOF:
            return f"[Pos {tok.line}:{tok.col}] Error at end: {self.message}"
        return f"[Pos {tok.line}:{tok.col}] Error at '{tok.lexeme}': {self.message}"


class ParseError(LoxError):
    """Syntax error; `token` is the token at which derivation failed."""

    def __init__(self, message: str, token: Token):
        super().__init__(message, token)


class LoxRuntimeError(LoxError):
    """Type error during evaluation; `token` is the offending operator."""


__all__ = ["LoxError", "LoxRuntimeError", "ParseError"]
