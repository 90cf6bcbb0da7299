import io
import json
import traceback

from lox.lox_config import MODES, LoxConfig
from lox.lox_constants import TokenType
from lox.lox_errors import LoxRuntimeError, ParseError
from lox.lox_interpreter import Interpreter, stringify
from lox.lox_lexer import tokenize
from lox.lox_parser import Parser
from lox.lox_printer import print_ast
from lox.lox_stmt import Expression


def print_traceback() -> None:
    buf = io.StringIO()
    traceback.print_exc(file=buf)
    print("[error] >>>")
    print(buf.getvalue())


def paren_depth(line: str) -> int:
    """Net count of open parentheses in a line, ignoring string contents."""
    depth = 0
    for tok in tokenize(line):
        if tok.type == TokenType.LEFT_PAREN:
            depth += 1
        elif tok.type == TokenType.RIGHT_PAREN:
            depth -= 1
    return depth


def run_source(source: str, mode: str = "eval", verbose: bool = False) -> list[str]:
    """Lex, parse and render every `;`-separated expression in `source`.

    Args:
        source: Lox source text.
        mode: "eval" for values, "ast" for prefix renderings, "json" for trees.
        verbose: Echo the token stream and each tree before rendering.

    Returns:
        One output line per expression.

    Raises:
        ParseError: The first syntax error in the source.
        LoxRuntimeError: The first operand type error met while evaluating.
        ValueError: If `mode` is not a known mode.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown output mode: {mode!r}")

    tokens = tokenize(source)
    if verbose:
        print(f"[tokens] >>> {tokens}")

    statements = Parser(tokens).parse_script()
    interpreter = Interpreter()
    out: list[str] = []
    for stmt in statements:
        if not isinstance(stmt, Expression):  # pragma: no cover
            raise TypeError(f"Cannot run statement {type(stmt).__name__}")
        expr = stmt.expression
        if verbose:
            print(f"[ast] >>> {print_ast(expr)}")
        if mode == "ast":
            out.append(print_ast(expr))
        elif mode == "json":
            out.append(json.dumps(expr.to_dict()))
        else:
            out.append(stringify(interpreter.evaluate(expr)))
    return out


def handle_command(src: str, config: LoxConfig) -> bool:
    """Applies a REPL meta-command. Returns False if `src` is not one."""
    if src.lower() == "verbose-mode":
        config.verbose = not config.verbose
        print(f"[mode] >>> Verbose mode {'ON' if config.verbose else 'OFF'}")
        return True
    if src.startswith(":mode"):
        mode = src[5:].strip()
        if not mode:
            print(f"[mode] >>> Output mode: {config.mode}")
        elif mode in MODES:
            config.mode = mode
            print(f"[mode] >>> Output mode set to {mode}")
        else:
            print(f"[error] >>> Unknown mode {mode!r}; choose one of {', '.join(MODES)}")
        return True
    return False


def start_repl(config: LoxConfig | None = None) -> None:
    config = config or LoxConfig()
    print(f"Lox REPL [mode={config.mode}]. Type 'exit' or 'quit' to leave.")

    while True:
        try:
            src_lines: list[str] = []
            depth = 0
            while True:
                prompt = config.prompt if not src_lines else "... "
                line = input(prompt)
                if line.strip() in ("exit", "quit") and not src_lines:
                    print("Exiting Lox REPL.")
                    return
                src_lines.append(line)
                depth += paren_depth(line)
                if depth <= 0:
                    break
            src = "\n".join(src_lines).strip()
            if not src or src.startswith("//"):
                continue
            if handle_command(src, config):
                continue

            try:
                for result in run_source(src, config.mode, config.verbose):
                    print(result)
            except ParseError as e:
                print(f"[parse error] >>> {e}")
            except LoxRuntimeError as e:
                print(f"[runtime error] >>> {e}")
            except Exception:
                print_traceback()

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Lox REPL.")
            break


def main() -> None:
    start_repl(LoxConfig.from_env())


if __name__ == "__main__":
    main()
