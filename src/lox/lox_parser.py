"""
Lox Expression Parser

Parses a Lox token stream into an expression tree (`Expr`) by recursive descent
with one function per precedence level.

Grammar
-------
    expression  → ternary
    ternary     → equality ( "?" expression ":" ternary )?
    equality    → comparison ( ( "!=" | "==" ) comparison )*
    comparison  → term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        → factor ( ( "-" | "+" ) factor )*
    factor      → unary ( ( "/" | "*" ) unary )*
    unary       → ( "!" | "-" ) unary | primary
    primary     → NUMBER | STRING | "true" | "false" | "nil"
                | "(" expression ")"

Binary levels loop over same-precedence operators, so `a - b - c` parses as
`(a - b) - c`. Unary operators and the ternary false branch recurse, so
`---5` nests three `Unary` nodes and `a ? b : c ? d : e` nests to the right.

Parser Behavior
---------------
- `parse()` stops at the first syntax error and raises `ParseError`; no
  partial tree is ever returned.
- `parse_script()` reads `;`-separated expressions, records every error,
  resynchronizes at the next statement boundary, and finally raises the first
  recorded error.

Entry Points
------------
- `Parser(tokens).parse()`: Parse a single expression.
- `Parser(tokens).parse_script()`: Parse a sequence of expression statements.
- `parse(tokens)`: Module-level shortcut for `Parser(tokens).parse()`.

Raises
------
ParseError
    Carries the message and the token at which derivation failed.
"""

from __future__ import annotations

from lox.lox_ast import Binary, Expr, Grouping, Literal, Ternary, Unary
from lox.lox_constants import SYNC_KEYWORDS, TokenType
from lox.lox_errors import ParseError
from lox.lox_lexer import Token
from lox.lox_stmt import Expression, Stmt


class Parser:
    """
    Lox Parser Class

    Owns a single forward cursor over the token stream. Only `advance`, `peek`,
    `previous`, `check`, `match` and `is_at_end` move or read the cursor; the
    grammar methods are written in terms of them.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream. Must end with an EOF token.
    current : int
        Index of the next unconsumed token.
    errors : list[ParseError]
        Errors recorded by `parse_script`, in source order.
    """

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens or tokens[-1].type != TokenType.EOF:
            last = tokens[-1] if tokens else None
            eof = Token(
                TokenType.EOF,
                "",
                None,
                last.line if last else 1,
                last.col + len(last.lexeme) if last else 1,
            )
            tokens = list(tokens) + [eof]
        self.tokens: list[Token] = tokens
        self.current: int = 0
        self.errors: list[ParseError] = []

    # Entry points

    def parse(self) -> Expr:
        """Parse one expression and return its tree.

        Raises:
            ParseError: On the first syntax error.
        """
        return self.expression()

    def parse_script(self) -> list[Stmt]:
        """Parse `;`-separated expressions into `Expression` statements.

        A trailing `;` is optional. After a syntax error the parser skips to
        the next statement boundary and keeps going so that every error is
        collected in `self.errors`; the first one is then raised.
        """
        statements: list[Stmt] = []
        while not self.is_at_end():
            try:
                statements.append(self.expression_statement())
            except ParseError as e:
                self.errors.append(e)
                self.synchronize()
        if self.errors:
            raise self.errors[0]
        return statements

    # Statements

    def expression_statement(self) -> Stmt:
        value = self.expression()
        if not self.is_at_end():
            self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(value)

    # Expressions, lowest precedence first

    def expression(self) -> Expr:
        return self.ternary()

    def ternary(self) -> Expr:
        condition = self.equality()

        if self.match(TokenType.QUESTION):
            true_branch = self.expression()
            self.consume(
                TokenType.COLON, "Expect ':' after true branch of ternary expression."
            )
            false_branch = self.ternary()
            return Ternary(condition, true_branch, false_branch)

        return condition

    def equality(self) -> Expr:
        expr = self.comparison()

        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self.comparison()
            expr = Binary(expr, operator, right)

        return expr

    def comparison(self) -> Expr:
        expr = self.term()

        while self.match(
            TokenType.GREATER,
            TokenType.GREATER_EQUAL,
            TokenType.LESS,
            TokenType.LESS_EQUAL,
        ):
            operator = self.previous()
            right = self.term()
            expr = Binary(expr, operator, right)

        return expr

    def term(self) -> Expr:
        expr = self.factor()

        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.factor()
            expr = Binary(expr, operator, right)

        return expr

    def factor(self) -> Expr:
        expr = self.unary()

        while self.match(TokenType.SLASH, TokenType.STAR):
            operator = self.previous()
            right = self.unary()
            expr = Binary(expr, operator, right)

        return expr

    def unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)

        return self.primary()

    def primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    # Cursor primitives

    def match(self, *types: TokenType) -> bool:
        """Consume the current token if it has any of the given types."""
        for t in types:
            if self.check(t):
                self.advance()
                return True
        return False

    def consume(self, type_: TokenType, message: str) -> Token:
        """Consume a token of the expected type or raise a ParseError with `message`."""
        if self.check(type_):
            return self.advance()
        raise self.error(self.peek(), message)

    def check(self, type_: TokenType) -> bool:
        """Test the current token type without consuming it. Always false at EOF."""
        if self.is_at_end():
            return False
        return self.peek().type == type_

    def advance(self) -> Token:
        """Consume the current token and return it. At EOF the cursor stays put."""
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        """True once the cursor sits on the EOF token."""
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        """Return the current token without consuming it."""
        return self.tokens[self.current]

    def previous(self) -> Token:
        """Return the most recently consumed token."""
        return self.tokens[self.current - 1]

    def error(self, token: Token, message: str) -> ParseError:
        """Build (but do not raise) a ParseError anchored at `token`."""
        return ParseError(message, token)

    def synchronize(self) -> None:
        """Discard tokens until the start of the next statement."""
        self.advance()

        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in SYNC_KEYWORDS:
                return
            self.advance()


def parse(tokens: list[Token]) -> Expr:
    return Parser(tokens).parse()


__all__ = ["Parser", "parse"]
