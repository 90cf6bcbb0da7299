from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lox.lox_ast import Binary, Expr, Grouping, Literal, Ternary, Unary
from lox.lox_constants import TokenType
from lox.lox_errors import ParseError
from lox.lox_lexer import Token, tokenize
from lox.lox_parser import Parser, parse
from lox.lox_printer import print_ast
from lox.lox_stmt import Expression


def parse_source(source: str) -> Expr:
    return Parser(tokenize(source)).parse()


def make_tokens(*types_vals: tuple[TokenType, str, Any]) -> list[Token]:
    return [Token(t, lexeme, lit) for t, lexeme, lit in types_vals] + [
        Token(TokenType.EOF, "")
    ]


def normalize(node: Any) -> Any:
    """Drop source positions and tag literal types, so only shape and values compare."""
    if isinstance(node, list):
        return [normalize(n) for n in node]
    if isinstance(node, dict):
        if node.get("kind") == "literal":
            value = node["value"]
            return {"kind": "literal", "value": (type(value).__name__, value)}
        return {k: normalize(v) for k, v in node.items() if k not in ("line", "col")}
    return node


def shape(source: str) -> str:
    return print_ast(parse_source(source))


# Precedence and associativity


@pytest.mark.parametrize(  # type: ignore[misc]
    "source,expected",
    [
        ("1", "1"),
        ('"hi"', '"hi"'),
        ("true", "true"),
        ("false", "false"),
        ("nil", "nil"),
        ("1 + 2", "(+ 1 2)"),
        ("1 + 2 * 3", "(+ 1 (* 2 3))"),
        ("(1 + 2) * 3", "(* (group (+ 1 2)) 3)"),
        ("1 - 2 - 3", "(- (- 1 2) 3)"),
        ("8 / 4 / 2", "(/ (/ 8 4) 2)"),
        ("1 < 2 == 3 > 4", "(== (< 1 2) (> 3 4))"),
        ("1 == 2 != 3", "(!= (== 1 2) 3)"),
        ("1 <= 2 >= 3", "(>= (<= 1 2) 3)"),
        ("-1 * 2", "(* (- 1) 2)"),
        ("!true == false", "(== (! true) false)"),
        ("---5", "(- (- (- 5)))"),
        ("!!nil", "(! (! nil))"),
        ("1 + 2 > 3 * 4", "(> (+ 1 2) (* 3 4))"),
        ("((1))", "(group (group 1))"),
        ("1 == 1 ? 2 : 3", "(?: (== 1 1) 2 3)"),
        ("true ? 1 : false ? 2 : 3", "(?: true 1 (?: false 2 3))"),
        ("false ? true ? 1 : 2 : 3", "(?: false (?: true 1 2) 3)"),
    ],
)
def test_parse_shapes(source: str, expected: str) -> None:
    assert shape(source) == expected


def test_precedence_tree() -> None:
    tree = parse_source("1 + 2 * 3")
    assert isinstance(tree, Binary)
    assert tree.operator.type == TokenType.PLUS
    assert tree.left == Literal(1.0)
    assert isinstance(tree.right, Binary)
    assert tree.right.operator.type == TokenType.STAR
    assert tree.right.left == Literal(2.0)
    assert tree.right.right == Literal(3.0)


def test_grouping_tree() -> None:
    tree = parse_source("(1 + 2) * 3")
    assert isinstance(tree, Binary)
    assert isinstance(tree.left, Grouping)
    assert isinstance(tree.left.expression, Binary)
    assert tree.right == Literal(3.0)


def test_unary_chain_nests_three_deep() -> None:
    tree = parse_source("---5")
    depth = 0
    while isinstance(tree, Unary):
        assert tree.operator.type == TokenType.MINUS
        tree = tree.right
        depth += 1
    assert depth == 3
    assert tree == Literal(5.0)


def test_ternary_branches() -> None:
    tree = parse_source("true ? 1 : false ? 2 : 3")
    assert isinstance(tree, Ternary)
    assert isinstance(tree.false_branch, Ternary)
    assert tree.true_branch == Literal(1.0)

    tree = parse_source("false ? true ? 1 : 2 : 3")
    assert isinstance(tree, Ternary)
    assert isinstance(tree.true_branch, Ternary)
    assert tree.false_branch == Literal(3.0)


def test_operator_token_is_kept() -> None:
    tree = parse_source("1 +\n2")
    assert isinstance(tree, Binary)
    assert tree.operator == Token(TokenType.PLUS, "+", None, 1, 3)


def test_parse_from_hand_built_tokens() -> None:
    tokens = make_tokens(
        (TokenType.NUMBER, "1", 1.0),
        (TokenType.PLUS, "+", None),
        (TokenType.NUMBER, "2", 2.0),
    )
    tree = parse(tokens)
    assert tree == Binary(Literal(1.0), tokens[1], Literal(2.0))


def test_missing_eof_is_appended() -> None:
    tokens = [Token(TokenType.NUMBER, "7", 7.0, 1, 1)]
    parser = Parser(tokens)
    assert parser.parse() == Literal(7.0)
    assert parser.tokens[-1].type == TokenType.EOF


def test_trailing_tokens_are_left_unconsumed() -> None:
    parser = Parser(tokenize("1 2"))
    assert parser.parse() == Literal(1.0)
    assert parser.peek().literal == 2.0


def test_parsers_do_not_share_state() -> None:
    a = Parser(tokenize("1 + 2"))
    b = Parser(tokenize("3"))
    assert b.parse() == Literal(3.0)
    assert isinstance(a.parse(), Binary)
    assert a.current == 3
    assert b.current == 1


# Errors


@pytest.mark.parametrize(  # type: ignore[misc]
    "source,message,lexeme",
    [
        ("(1 + 2", "Expect ')' after expression.", ""),
        ("(1 + )", "Expect expression.", ")"),
        ("", "Expect expression.", ""),
        ("true ? 1", "Expect ':' after true branch of ternary expression.", ""),
        ("true ? 1 2", "Expect ':' after true branch of ternary expression.", "2"),
        ("* 3", "Expect expression.", "*"),
        ("1 + @", "Expect expression.", "@"),
        ("foo", "Expect expression.", "foo"),
    ],
)
def test_parse_errors(source: str, message: str, lexeme: str) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source(source)
    err = exc_info.value
    assert err.message == message
    assert err.token is not None
    assert err.token.lexeme == lexeme


def test_error_at_end_reports_position() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source("(1 + 2")
    assert str(exc_info.value) == "[Pos 1:7] Error at end: Expect ')' after expression."


def test_error_at_token_reports_lexeme() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source("(1 + )")
    assert str(exc_info.value) == "[Pos 1:6] Error at ')': Expect expression."


# Scripts and recovery


def test_parse_script_multiple_expressions() -> None:
    stmts = Parser(tokenize("1 + 2; 3 * 4;")).parse_script()
    assert len(stmts) == 2
    assert all(isinstance(s, Expression) for s in stmts)
    assert print_ast(stmts[1].expression) == "(* 3 4)"  # type: ignore[attr-defined]


def test_parse_script_trailing_semicolon_optional() -> None:
    assert len(Parser(tokenize("1; 2")).parse_script()) == 2
    assert Parser(tokenize("")).parse_script() == []


def test_parse_script_missing_semicolon() -> None:
    with pytest.raises(ParseError) as exc_info:
        Parser(tokenize("1 2")).parse_script()
    assert exc_info.value.message == "Expect ';' after expression."


def test_parse_script_collects_errors_and_raises_first() -> None:
    parser = Parser(tokenize("(1 + ; 2 * ; 3;"))
    with pytest.raises(ParseError) as exc_info:
        parser.parse_script()
    assert len(parser.errors) == 2
    assert exc_info.value is parser.errors[0]
    assert [e.token.lexeme for e in parser.errors] == [";", ";"]  # type: ignore[union-attr]


def test_synchronize_stops_after_semicolon() -> None:
    parser = Parser(tokenize("1 2 3; 4"))
    parser.synchronize()
    assert parser.previous().type == TokenType.SEMICOLON
    assert parser.peek().literal == 4.0


def test_synchronize_stops_before_statement_keyword() -> None:
    parser = Parser(tokenize("1 2 print 3"))
    parser.synchronize()
    assert parser.peek().type == TokenType.PRINT


def test_synchronize_stops_at_eof() -> None:
    parser = Parser(tokenize("1 2 3"))
    parser.synchronize()
    assert parser.is_at_end()
    parser.synchronize()
    assert parser.is_at_end()


def test_cursor_never_passes_eof() -> None:
    parser = Parser(tokenize("1"))
    assert parser.advance().type == TokenType.NUMBER
    assert parser.advance().type == TokenType.NUMBER
    assert parser.is_at_end()
    assert parser.current == 1
    assert not parser.check(TokenType.EOF)
    assert not parser.match(TokenType.EOF)


# Properties

numbers = st.integers(min_value=0, max_value=999).map(str)


@given(  # type: ignore[misc]
    st.lists(numbers, min_size=3, max_size=6),
    st.sampled_from(["+", "-", "*", "/", "==", "!=", "<", "<=", ">", ">="]),
)
def test_binary_levels_are_left_associative(operands: list[str], op: str) -> None:
    tree = parse_source(f" {op} ".join(operands))
    for expected in reversed(operands[1:]):
        assert isinstance(tree, Binary)
        assert tree.operator.lexeme == op
        assert tree.right == Literal(float(expected))
        tree = tree.left
    assert tree == Literal(float(operands[0]))


@given(st.integers(min_value=1, max_value=50))  # type: ignore[misc]
def test_unary_depth_matches_operator_count(n: int) -> None:
    tree = parse_source("!" * n + "true")
    for _ in range(n):
        assert isinstance(tree, Unary)
        tree = tree.right
    assert tree == Literal(True)


@given(st.integers(min_value=1, max_value=30))  # type: ignore[misc]
def test_nested_groupings(n: int) -> None:
    tree = parse_source("(" * n + "1" + ")" * n)
    assert shape("(" * n + "1" + ")" * n) == "(group " * n + "1" + ")" * n
    for _ in range(n):
        assert isinstance(tree, Grouping)
        tree = tree.expression


def test_positions_do_not_affect_shape() -> None:
    a = parse_source("1+2*3").to_dict()
    b = parse_source("1 +\n  2 *   3").to_dict()
    assert a != b
    assert normalize(a) == normalize(b)


@pytest.mark.parametrize(  # type: ignore[misc]
    "left,right",
    [("true", "1"), ("false", "0"), ("nil", "false"), ('"1"', "1")],
)
def test_literals_of_different_types_are_distinct(left: str, right: str) -> None:
    assert parse_source(left) != parse_source(right)
    assert normalize(parse_source(left).to_dict()) != normalize(parse_source(right).to_dict())
