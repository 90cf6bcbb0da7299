"""
Lexical analyzer for the Lox language.

This module turns raw source text into the token stream consumed by the parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, lexeme, literal value and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips whitespace and `//` line comments
    - Longest-match recognition of operators and punctuation
    - Recognizes:
        * Identifiers and keywords
        * Numbers (always carried as float literals)
        * Double-quoted strings, which may span lines
        * Operators and punctuation

Malformed input never raises: unknown characters and unterminated strings
become `ILLEGAL` tokens, which the parser rejects with a positioned error.

Example:
    >>> tokens = tokenize("1 + 2")
    >>> [t.type.name for t in tokens]
    ['NUMBER', 'PLUS', 'NUMBER', 'EOF']
"""

from typing import Any

from lox.lox_constants import KEYWORDS, TokenType, token_hashmap


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def current(self) -> str | None:
        return self.source[self.position] if self.position < len(self.source) else None

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in the Lox language.

    Tokens are never modified after the lexer produces them.

    Attributes:
        type (TokenType): The token kind.
        lexeme (str): The exact source text the token was scanned from.
        literal (Any): The literal value for NUMBER (float) and STRING (str) tokens.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "lexeme", "literal", "line", "col")

    def __init__(
        self,
        type_: TokenType,
        lexeme: str,
        literal: Any = None,
        line: int = 0,
        col: int = 0,
    ):
        self.type = type_
        self.lexeme = lexeme
        self.literal = literal
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.lexeme == other.lexeme
            and self.literal == other.literal
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.lexeme, self.literal, self.line, self.col))


class Lexer:
    """Lexical analyzer for the Lox language.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and `//` comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "/" and self.peek(1) == "/":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(2):  # longest operator is two characters
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, None, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token; an EOF token once the input is exhausted.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(TokenType.EOF, "", None, self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch.isascii() and (ch.isalpha() or ch == "_"):
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isascii() and (self.peek().isalnum() or self.peek() == "_")
            ):
                ident += self.advance()
            return Token(KEYWORDS.get(ident, TokenType.IDENTIFIER), ident, None, line, col)

        # 2. Number
        if ch.isascii() and ch.isdigit():
            num = ""
            while self.peek().isascii() and self.peek().isdigit():
                num += self.advance()
            # A fractional part needs at least one digit after the dot
            if self.peek() == "." and self.peek(1).isascii() and self.peek(1).isdigit():
                num += self.advance()
                while self.peek().isascii() and self.peek().isdigit():
                    num += self.advance()
            return Token(TokenType.NUMBER, num, float(num), line, col)

        # 3. String
        if ch == '"':
            lexeme = self.advance()
            while not self.stream.end_of_file() and self.peek() != '"':
                lexeme += self.advance()
            if self.stream.end_of_file():
                return Token(TokenType.ILLEGAL, lexeme, None, line, col)
            lexeme += self.advance()
            return Token(TokenType.STRING, lexeme, lexeme[1:-1], line, col)

        # 4. Operator or punctuation
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character
        return Token(TokenType.ILLEGAL, self.advance(), None, line, col)

    def scan_tokens(self) -> list[Token]:
        """Scans the remaining input into a list terminated by a single EOF token."""
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == TokenType.EOF:
                return tokens


def tokenize(source: str) -> list[Token]:
    return Lexer(CharacterStream(source, 0, 1, 1)).scan_tokens()


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
